"""Persistence layer - Game repository and ledger operations."""

from .database import (
    GameProfit,
    GameProfitByDay,
    GameRecord,
    GameRepository,
    GameTransaction,
)
from .errors import StorageError
from .ledger import GameLedger

__all__ = [
    "GameLedger",
    "GameProfit",
    "GameProfitByDay",
    "GameRecord",
    "GameRepository",
    "GameTransaction",
    "StorageError",
]
