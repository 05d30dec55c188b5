"""Game Repository - SQLite persistence for games and transactions.

Every public operation runs as a single unit of work: it either commits
completely or rolls back, and any driver failure surfaces as StorageError.
Timestamps are generated by SQLite itself (UTC, ``YYYY-MM-DD HH:MM:SS``).
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from .errors import StorageError


SCHEMA_SQL = (
    """
    CREATE TABLE IF NOT EXISTS game_info (
        id INTEGER PRIMARY KEY,
        start_date TEXT NOT NULL,
        end_date TEXT NULL,
        description TEXT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS game_transactions (
        game_id INTEGER NOT NULL,
        user_id TEXT NOT NULL,
        amount INTEGER NOT NULL,
        date TEXT NOT NULL,
        FOREIGN KEY (game_id) REFERENCES game_info(id)
    )
    """,
)


@dataclass(slots=True)
class GameRecord:
    """A row of the game_info table."""

    id: int
    start_date: str
    end_date: str | None
    description: str | None

    @property
    def is_active(self) -> bool:
        return self.end_date is None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class GameTransaction:
    game_id: int
    user_id: str
    amount: int
    date: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class GameProfit:
    user_id: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class GameProfitByDay:
    user_id: str
    date: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class GameRepository:
    """Repository for games and the transactions recorded against them.

    The repository is not thread-safe on its own; callers sharing one
    instance across threads must serialize access (GameLedger does).

    Example:
        with GameRepository("database.sqlite") as repo:
            repo.close_active_games()
            game_id = repo.new_game("Friday poker")
            repo.save_transaction(game_id, "alice", 500)
            repo.get_profit()
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        enforce_foreign_keys: bool = False,
    ) -> None:
        """Open the database and create the schema if needed.

        Args:
            db_path: Path to SQLite database file, or ``":memory:"``.
                Defaults to database.sqlite in the working directory.
            enforce_foreign_keys: Reject transactions whose game_id does
                not exist in game_info.

        Raises:
            StorageError: If the database cannot be opened or initialized.
        """
        if db_path is None:
            db_path = Path.cwd() / "database.sqlite"

        self.db_path = str(db_path)
        self.enforce_foreign_keys = enforce_foreign_keys
        self._conn: sqlite3.Connection | None = None
        self._ensure_connection()
        self.initialize()

    def _ensure_connection(self) -> None:
        """Ensure database connection is established."""
        if self._conn is not None:
            return
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            # Autocommit mode; transactions are opened explicitly in _unit_of_work
            conn = sqlite3.connect(
                self.db_path,
                isolation_level=None,
                check_same_thread=False,
            )
            conn.row_factory = sqlite3.Row
            conn.execute(
                f"PRAGMA foreign_keys = {'ON' if self.enforce_foreign_keys else 'OFF'}"
            )
            # Wait up to 5 seconds if database is locked
            conn.execute("PRAGMA busy_timeout = 5000")
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Could not open database {self.db_path}: {exc}") from exc
        self._conn = conn

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection, reopening it after close()."""
        if self._conn is None:
            self._ensure_connection()
            # A reopened :memory: database starts empty
            self.initialize()
        assert self._conn is not None
        return self._conn

    @contextmanager
    def _unit_of_work(self, write: bool = False) -> Iterator[sqlite3.Connection]:
        """Run the enclosed statements in one transaction.

        Writers take the RESERVED lock up front so the whole unit is
        serialized against other connections to the same file.
        """
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseException:
                # Also covers a failed COMMIT, e.g. SQLITE_BUSY
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc

    def initialize(self) -> None:
        """Create the game_info and game_transactions tables if absent."""
        with self._unit_of_work(write=True) as conn:
            for statement in SCHEMA_SQL:
                conn.execute(statement)

    def close_active_games(self) -> int:
        """Close every game that has no end date.

        Returns:
            Number of games closed (usually 0 or 1)
        """
        with self._unit_of_work(write=True) as conn:
            cursor = conn.execute(
                "UPDATE game_info SET end_date = datetime('now') WHERE end_date IS NULL"
            )
            return cursor.rowcount

    def new_game(self, description: str | None) -> int:
        """Insert a new active game.

        Args:
            description: Free-text label for the game

        Returns:
            The id assigned to the inserted row
        """
        with self._unit_of_work(write=True) as conn:
            cursor = conn.execute(
                """
                INSERT INTO game_info (start_date, end_date, description)
                VALUES (datetime('now'), NULL, ?)
                """,
                (description,),
            )
            return int(cursor.lastrowid)

    def save_transaction(self, game_id: int, user_id: str, amount: int) -> None:
        """Record a transaction for a user against a game.

        The game does not have to be active.
        """
        with self._unit_of_work(write=True) as conn:
            conn.execute(
                """
                INSERT INTO game_transactions (game_id, user_id, amount, date)
                VALUES (?, ?, ?, datetime('now'))
                """,
                (game_id, user_id, amount),
            )

    def get_all_transactions(self) -> list[GameTransaction]:
        """List every transaction, most recent first."""
        with self._unit_of_work() as conn:
            rows = conn.execute(
                """
                SELECT game_id, user_id, amount, date
                FROM game_transactions
                ORDER BY date DESC, rowid DESC
                """
            ).fetchall()

        return [
            GameTransaction(
                game_id=row["game_id"],
                user_id=row["user_id"],
                amount=row["amount"],
                date=row["date"],
            )
            for row in rows
        ]

    def get_profit(self) -> list[GameProfit]:
        """Total amount per user across all games, ordered by user_id."""
        with self._unit_of_work() as conn:
            rows = conn.execute(
                """
                SELECT user_id, SUM(amount) AS amount
                FROM game_transactions
                GROUP BY user_id
                ORDER BY user_id
                """
            ).fetchall()

        return [GameProfit(user_id=row["user_id"], amount=row["amount"]) for row in rows]

    def get_profit_by_day(self) -> list[GameProfitByDay]:
        """Total amount per user per calendar day (UTC), latest day first."""
        with self._unit_of_work() as conn:
            rows = conn.execute(
                """
                SELECT user_id, date(date) AS day, SUM(amount) AS amount
                FROM game_transactions
                GROUP BY user_id, date(date)
                ORDER BY day DESC, user_id
                """
            ).fetchall()

        return [
            GameProfitByDay(
                user_id=row["user_id"],
                date=row["day"],
                amount=row["amount"],
            )
            for row in rows
        ]

    def get_games(self) -> list[GameRecord]:
        """List every game, oldest first."""
        with self._unit_of_work() as conn:
            rows = conn.execute(
                "SELECT id, start_date, end_date, description FROM game_info ORDER BY id"
            ).fetchall()
        return [self._row_to_game(row) for row in rows]

    def get_active_game(self) -> GameRecord | None:
        """Return the game without an end date, if any."""
        with self._unit_of_work() as conn:
            row = conn.execute(
                """
                SELECT id, start_date, end_date, description
                FROM game_info
                WHERE end_date IS NULL
                ORDER BY id DESC
                LIMIT 1
                """
            ).fetchone()
        if row is None:
            return None
        return self._row_to_game(row)

    @staticmethod
    def _row_to_game(row: sqlite3.Row) -> GameRecord:
        return GameRecord(
            id=row["id"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            description=row["description"],
        )

    def ping(self) -> None:
        """Run a trivial query to verify the connection."""
        with self._unit_of_work() as conn:
            conn.execute("SELECT 1")

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> GameRepository:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes connection."""
        self.close()
