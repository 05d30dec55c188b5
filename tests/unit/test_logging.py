"""Unit tests for logging configuration."""

import logging

import pytest
import structlog

from game_ledger.service.logging import bind_context, clear_context, configure_logging

pytestmark = pytest.mark.unit


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    clear_context()


def test_configure_installs_structlog_formatter(restore_root_logger):
    configure_logging(level="debug", json_output=True)

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)


def test_json_output_includes_bound_context(restore_root_logger, capsys):
    configure_logging(level="INFO", json_output=True)
    bind_context(correlation_id="corr-9")

    logging.getLogger("game_ledger.test").info("New game 3 record created")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    assert '"correlation_id": "corr-9"' in line
    assert "New game 3 record created" in line
