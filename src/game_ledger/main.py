"""Game Ledger main entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys

import uvicorn

from game_ledger.persistence.errors import StorageError
from game_ledger.service.logging import configure_logging

logger = logging.getLogger(__name__)


def main() -> int:
    """Main entry point for the Game Ledger service."""
    parser = argparse.ArgumentParser(
        prog="game-ledger",
        description="Game Ledger - game session and transaction tracking service",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("GAME_LEDGER_HOST", "localhost"),
        help="Host to bind to (default: localhost)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("GAME_LEDGER_PORT", "25563")),
        help="Port to listen on (default: 25563)",
    )
    parser.add_argument(
        "--db-path",
        default=None,
        help="SQLite database path (default: database.sqlite)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: info)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Force JSON log output (default: auto-detect)",
    )

    args = parser.parse_args()

    configure_logging(
        level=args.log_level.upper(),
        json_output=args.json_logs if args.json_logs else None,
    )

    # The app factory reads its settings from the environment
    if args.db_path:
        os.environ["GAME_LEDGER_DB_PATH"] = args.db_path
    os.environ["GAME_LEDGER_HOST"] = args.host
    os.environ["GAME_LEDGER_PORT"] = str(args.port)

    try:
        uvicorn.run(
            "game_ledger.service.app:create_app_from_env",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=args.log_level,
            log_config=None,
            factory=True,
        )
        return 0
    except StorageError as e:
        logger.error(f"Could not open database: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return 0


if __name__ == "__main__":
    sys.exit(main())
