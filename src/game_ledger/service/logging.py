"""Logging setup for the Game Ledger service.

Application modules log through the standard library (``logging.getLogger``);
records are rendered by structlog, as JSON when not attached to a terminal.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


def _wants_json() -> bool:
    return os.getenv("GAME_LEDGER_LOG_JSON") == "1" or not sys.stderr.isatty()


def _processors(json_output: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(level: str = "INFO", json_output: bool | None = None) -> None:
    """Install a structlog formatter on the root logger.

    Args:
        level: Root log level name
        json_output: Force JSON (True) or console (False) output; auto-detect if None
    """
    if json_output is None:
        json_output = _wants_json()

    pre_chain = _processors(json_output)
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    # Request lines are already tagged by CorrelationIdMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def bind_context(**kwargs: Any) -> None:
    """Attach key/value pairs to every log record in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


__all__ = ["configure_logging", "bind_context", "clear_context"]
