"""Pydantic models backing the Game Ledger API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# SQLite INTEGER is a signed 64-bit value
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class StartGameRequest(BaseModel):
    """Request to close the active game and start a new one."""

    description: str = Field(description="Free-text label for the game")


class SaveTransactionRequest(BaseModel):
    """Request to record a transaction against a game.

    The game is not required to be the active one.
    """

    game_id: int = Field(ge=INT64_MIN, le=INT64_MAX)
    user_id: str
    amount: int = Field(
        ge=INT64_MIN,
        le=INT64_MAX,
        description="Signed amount in the smallest unit, e.g. cents",
    )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class StartGameResponse(BaseModel):
    status: str = "ok"
    game_id: int


class StatusResponse(BaseModel):
    status: str = "ok"


class TransactionOut(BaseModel):
    """A recorded transaction."""

    game_id: int
    user_id: str
    amount: int
    date: str


class ProfitOut(BaseModel):
    """Total amount for a user across all games."""

    user_id: str
    amount: int


class ProfitByDayOut(BaseModel):
    """Total amount for a user on one UTC calendar day."""

    user_id: str
    date: str
    amount: int


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    correlation_id: str | None = None
