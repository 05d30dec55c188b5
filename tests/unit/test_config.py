"""Unit tests for LedgerConfig."""

import pytest

from game_ledger.service.config import LedgerConfig

pytestmark = pytest.mark.unit


def test_defaults(monkeypatch):
    for name in [
        "GAME_LEDGER_DB_PATH",
        "GAME_LEDGER_HOST",
        "GAME_LEDGER_PORT",
        "GAME_LEDGER_PUBLIC_DIR",
        "GAME_LEDGER_ENFORCE_FOREIGN_KEYS",
        "GAME_LEDGER_EXECUTOR_WORKERS",
        "GAME_LEDGER_CORS_ORIGINS",
    ]:
        monkeypatch.delenv(name, raising=False)

    config = LedgerConfig.from_env()

    assert config.db_path == "database.sqlite"
    assert config.host == "localhost"
    assert config.port == 25563
    assert config.public_dir == "public"
    assert config.enforce_foreign_keys is False
    assert config.cors_origins == ["*"]


def test_from_env_overrides(monkeypatch):
    monkeypatch.setenv("GAME_LEDGER_DB_PATH", "/tmp/games.sqlite")
    monkeypatch.setenv("GAME_LEDGER_PORT", "8080")
    monkeypatch.setenv("GAME_LEDGER_PUBLIC_DIR", "")
    monkeypatch.setenv("GAME_LEDGER_ENFORCE_FOREIGN_KEYS", "true")
    monkeypatch.setenv("GAME_LEDGER_CORS_ORIGINS", "http://a.test, http://b.test")

    config = LedgerConfig.from_env()

    assert config.db_path == "/tmp/games.sqlite"
    assert config.port == 8080
    assert config.public_dir is None
    assert config.enforce_foreign_keys is True
    assert config.cors_origins == ["http://a.test", "http://b.test"]
