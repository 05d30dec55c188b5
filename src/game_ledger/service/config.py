"""Configuration primitives for the Game Ledger service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class LedgerConfig:
    """Runtime configuration for the Game Ledger service.

    Configuration Sources (priority order):
    1. Direct constructor arguments
    2. Environment variables (GAME_LEDGER_*)
    3. Default values

    Attributes:
        db_path: SQLite database path (default: database.sqlite)
        host: Interface to bind to (default: localhost)
        port: Service port (default: 25563)
        public_dir: Directory of static assets served at / (default: public)
        enforce_foreign_keys: Reject transactions for unknown games
        executor_workers: Threads used to run blocking ledger calls
        cors_origins: Allowed CORS origins (default: all)
    """

    db_path: str = "database.sqlite"
    host: str = "localhost"
    port: int = 25563
    public_dir: str | None = "public"
    enforce_foreign_keys: bool = False
    executor_workers: int = 4
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> LedgerConfig:
        """Create configuration from environment variables.

        Optional:
            GAME_LEDGER_DB_PATH: SQLite database path
            GAME_LEDGER_HOST: Bind host
            GAME_LEDGER_PORT: Service port
            GAME_LEDGER_PUBLIC_DIR: Static asset directory ("" disables)
            GAME_LEDGER_ENFORCE_FOREIGN_KEYS: 1/true to enable FK checks
            GAME_LEDGER_EXECUTOR_WORKERS: Worker thread count
            GAME_LEDGER_CORS_ORIGINS: Comma-separated list of origins
        """
        public_dir = os.environ.get("GAME_LEDGER_PUBLIC_DIR", "public")
        origins = [
            origin.strip()
            for origin in os.environ.get("GAME_LEDGER_CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        return cls(
            db_path=os.environ.get("GAME_LEDGER_DB_PATH", "database.sqlite"),
            host=os.environ.get("GAME_LEDGER_HOST", "localhost"),
            port=int(os.environ.get("GAME_LEDGER_PORT", "25563")),
            public_dir=public_dir or None,
            enforce_foreign_keys=_env_flag("GAME_LEDGER_ENFORCE_FOREIGN_KEYS"),
            executor_workers=int(os.environ.get("GAME_LEDGER_EXECUTOR_WORKERS", "4")),
            cors_origins=origins or ["*"],
        )
