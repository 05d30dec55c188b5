"""Unit tests for the GameLedger business rules."""

import threading

import pytest

from game_ledger.persistence.database import GameProfit
from game_ledger.persistence.errors import StorageError
from game_ledger.persistence.ledger import GameLedger

pytestmark = pytest.mark.unit


class RecordingRepository:
    """Repository double that records calls and checks the lock is held."""

    def __init__(self, lock, fail_on=None):
        self.lock = lock
        self.fail_on = fail_on
        self.calls = []
        self.next_id = 0

    def _call(self, name, *args):
        assert self.lock.locked(), f"{name} called without the ledger lock"
        self.calls.append((name, args))
        if name == self.fail_on:
            raise StorageError(f"{name} failed")

    def close_active_games(self):
        self._call("close_active_games")
        return 1

    def new_game(self, description):
        self._call("new_game", description)
        self.next_id += 1
        return self.next_id

    def save_transaction(self, game_id, user_id, amount):
        self._call("save_transaction", game_id, user_id, amount)

    def get_all_transactions(self):
        self._call("get_all_transactions")
        return []

    def get_profit(self):
        self._call("get_profit")
        return [GameProfit(user_id="alice", amount=1)]

    def get_profit_by_day(self):
        self._call("get_profit_by_day")
        return []

    def get_active_game(self):
        self._call("get_active_game")
        return None

    def ping(self):
        self._call("ping")


@pytest.fixture
def lock():
    return threading.Lock()


class TestStartGame:
    """Tests for starting games."""

    def test_closes_then_creates(self, lock):
        repo = RecordingRepository(lock)
        ledger = GameLedger(repo, lock=lock)

        game_id = ledger.start_game("round one")

        assert game_id == 1
        assert [name for name, _ in repo.calls] == ["close_active_games", "new_game"]
        assert repo.calls[1][1] == ("round one",)

    def test_close_failure_skips_new_game(self, lock):
        repo = RecordingRepository(lock, fail_on="close_active_games")
        ledger = GameLedger(repo, lock=lock)

        with pytest.raises(StorageError):
            ledger.start_game("x")
        assert [name for name, _ in repo.calls] == ["close_active_games"]
        assert not lock.locked()

    def test_new_game_failure_leaves_games_closed(self, ledger, repository, monkeypatch):
        ledger.start_game("first")

        def broken_new_game(description):
            raise StorageError("disk full")

        monkeypatch.setattr(repository, "new_game", broken_new_game)

        with pytest.raises(StorageError, match="disk full"):
            ledger.start_game("second")
        assert repository.get_active_game() is None

    def test_exactly_one_active_game_after_each_start(self, ledger, repository):
        for i in range(4):
            game_id = ledger.start_game(f"game {i}")
            games = repository.get_games()
            active = [game for game in games if game.end_date is None]
            assert [game.id for game in active] == [game_id]
            for game in games:
                if game.id != game_id:
                    assert game.end_date <= active[0].start_date


class TestForwarding:
    """Tests for pass-through operations."""

    def test_save_transaction_forwards(self, lock):
        repo = RecordingRepository(lock)
        GameLedger(repo, lock=lock).save_transaction(7, "bob", -40)
        assert repo.calls == [("save_transaction", (7, "bob", -40))]

    def test_reads_forward_under_lock(self, lock):
        repo = RecordingRepository(lock)
        ledger = GameLedger(repo, lock=lock)

        assert ledger.get_all_transactions() == []
        assert ledger.get_profit() == [GameProfit(user_id="alice", amount=1)]
        assert ledger.get_profit_by_day() == []
        assert ledger.get_active_game() is None
        assert [name for name, _ in repo.calls] == [
            "get_all_transactions",
            "get_profit",
            "get_profit_by_day",
            "get_active_game",
        ]

    def test_storage_error_propagates_unchanged(self, lock):
        repo = RecordingRepository(lock, fail_on="save_transaction")
        ledger = GameLedger(repo, lock=lock)

        with pytest.raises(StorageError, match="save_transaction failed"):
            ledger.save_transaction(1, "alice", 5)
        assert not lock.locked()

    def test_no_active_game_check_on_save(self, ledger, repository):
        first = ledger.start_game("first")
        ledger.start_game("second")

        ledger.save_transaction(first, "alice", 5)
        assert repository.get_all_transactions()[0].game_id == first


class TestScenario:
    """End-to-end ledger scenario over a real database."""

    def test_two_games(self, ledger, repository):
        game_a = ledger.start_game("A")
        ledger.save_transaction(game_a, "alice", 500)
        ledger.save_transaction(game_a, "bob", -200)
        game_b = ledger.start_game("B")
        ledger.save_transaction(game_b, "alice", 100)

        assert (game_a, game_b) == (1, 2)
        assert ledger.get_profit() == [
            GameProfit(user_id="alice", amount=600),
            GameProfit(user_id="bob", amount=-200),
        ]

        transactions = ledger.get_all_transactions()
        assert [(tx.game_id, tx.user_id, tx.amount) for tx in transactions] == [
            (2, "alice", 100),
            (1, "bob", -200),
            (1, "alice", 500),
        ]

        first, second = repository.get_games()
        assert first.end_date is not None
        assert first.end_date <= second.start_date
        assert second.end_date is None
        assert ledger.get_active_game().id == game_b
