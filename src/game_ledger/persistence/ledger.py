"""Game Ledger - business rules on top of the game repository.

The ledger is the only writer that callers should talk to. It keeps at
most one game active at a time: starting a game closes every game that
is still open.

All calls are serialized through a single lock held for the whole call,
so the repository never runs two operations at once. ``start_game`` is
still two units of work: if the process dies between them, every prior
game is closed and no new game exists.
"""

from __future__ import annotations

import logging
import threading

from .database import GameProfit, GameProfitByDay, GameRecord, GameRepository, GameTransaction
from .errors import StorageError

logger = logging.getLogger(__name__)


class GameLedger:
    """Session layer enforcing the single active game rule.

    Example:
        ledger = GameLedger(GameRepository("database.sqlite"))
        game_id = ledger.start_game("Friday poker")
        ledger.save_transaction(game_id, "alice", 500)
        ledger.get_profit()
    """

    def __init__(
        self,
        repository: GameRepository,
        lock: threading.Lock | None = None,
    ) -> None:
        """Initialize the ledger.

        Args:
            repository: Shared repository handle
            lock: Lock guarding the repository. A private one is created
                if omitted.
        """
        self._repository = repository
        self._lock = lock or threading.Lock()

    @property
    def repository(self) -> GameRepository:
        return self._repository

    def start_game(self, description: str | None) -> int:
        """Close all active games and open a new one.

        Returns:
            Id of the new game
        """
        with self._lock:
            try:
                closed = self._repository.close_active_games()
                logger.info(f"Closed {closed} previously active game(s)")
                game_id = self._repository.new_game(description)
            except StorageError:
                logger.exception("Failed to start game")
                raise
            logger.info(f"New game {game_id} record created")
            return game_id

    def save_transaction(self, game_id: int, user_id: str, amount: int) -> None:
        """Record a transaction; game_id is trusted as given."""
        with self._lock:
            try:
                self._repository.save_transaction(game_id, user_id, amount)
            except StorageError:
                logger.exception(f"Failed to save transaction for user {user_id}")
                raise
            logger.info(
                f"User {user_id} performed transaction for {amount} in game {game_id}"
            )

    def get_all_transactions(self) -> list[GameTransaction]:
        with self._lock:
            return self._repository.get_all_transactions()

    def get_profit(self) -> list[GameProfit]:
        with self._lock:
            return self._repository.get_profit()

    def get_profit_by_day(self) -> list[GameProfitByDay]:
        with self._lock:
            return self._repository.get_profit_by_day()

    def get_active_game(self) -> GameRecord | None:
        with self._lock:
            return self._repository.get_active_game()

    def ping(self) -> None:
        """Verify the repository is reachable."""
        with self._lock:
            self._repository.ping()
