"""FastAPI application factory for the Game Ledger service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..persistence.database import GameRepository
from ..persistence.errors import StorageError
from ..persistence.ledger import GameLedger
from .config import LedgerConfig
from .errors import register_error_handlers
from .executor import get_executor, shutdown_executor
from .middleware import CorrelationIdMiddleware
from .router import build_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup/shutdown."""
    config: LedgerConfig = app.state.config
    logger.info(f"Starting Game Ledger service with database {config.db_path}")
    get_executor(max_workers=config.executor_workers)

    yield

    logger.info("Shutting down Game Ledger service...")
    shutdown_executor(wait=True)
    ledger: GameLedger = app.state.ledger
    ledger.repository.close()
    logger.info("Game Ledger service shutdown complete")


def create_ledger_app(
    config: LedgerConfig,
    ledger: GameLedger | None = None,
) -> FastAPI:
    """Create and configure the Game Ledger FastAPI application.

    Args:
        config: LedgerConfig instance
        ledger: Pre-built ledger; one backed by config.db_path is created
            if omitted

    Returns:
        Configured FastAPI application

    Raises:
        StorageError: If the database cannot be opened or initialized
    """
    if ledger is None:
        repository = GameRepository(
            config.db_path,
            enforce_foreign_keys=config.enforce_foreign_keys,
        )
        ledger = GameLedger(repository)

    app = FastAPI(
        title="Game Ledger",
        description="Game session and transaction tracking service",
        version=__version__,
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    register_error_handlers(app)
    app.include_router(build_router(ledger))

    app.state.ledger = ledger
    app.state.config = config

    @app.get("/healthz")
    def healthz() -> dict:
        """Health check endpoint with database verification."""
        checks = {}
        try:
            ledger.ping()
            active = ledger.get_active_game()
            checks["database"] = {
                "status": "healthy",
                "active_game_id": active.id if active else None,
            }
        except StorageError as e:
            checks["database"] = {"status": "unhealthy", "error": str(e)}

        healthy = checks["database"]["status"] == "healthy"
        return {
            "status": "ok" if healthy else "degraded",
            "service": "game-ledger",
            "version": __version__,
            "checks": checks,
        }

    # Mounted after the API routes so they take precedence
    if config.public_dir and Path(config.public_dir).is_dir():
        app.mount("/", StaticFiles(directory=config.public_dir, html=True), name="public")
    elif config.public_dir:
        logger.warning(f"Static directory {config.public_dir} not found, not serving assets")

    return app


def create_app_from_env() -> FastAPI:
    """Create app using environment variable configuration."""
    return create_ledger_app(LedgerConfig.from_env())


__all__ = ["create_ledger_app", "create_app_from_env"]
