"""Test configuration for pytest."""

import pytest

from game_ledger.persistence.database import GameRepository
from game_ledger.persistence.ledger import GameLedger


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "conformance: API contract conformance tests")


@pytest.fixture
def db_path(tmp_path):
    """Path to a fresh database file."""
    return tmp_path / "ledger.sqlite"


@pytest.fixture
def repository(db_path):
    """Repository backed by a temporary database file."""
    with GameRepository(db_path) as repo:
        yield repo


@pytest.fixture
def ledger(repository):
    """Ledger over the temporary repository."""
    return GameLedger(repository)
