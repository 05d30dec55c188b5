"""FastAPI router for the Game Ledger service.

Endpoints:
- POST /start_game
- POST /save_transaction
- GET  /get_transactions
- GET  /get_profit
- GET  /get_profit_by_day

POST bodies may be form-encoded (what the bundled front-end submits) or JSON.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Annotated, Any, Callable, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from .executor import run_in_executor
from .models import (
    ProfitByDayOut,
    ProfitOut,
    SaveTransactionRequest,
    StartGameRequest,
    StartGameResponse,
    StatusResponse,
    TransactionOut,
)

if TYPE_CHECKING:
    from ..persistence.ledger import GameLedger

M = TypeVar("M", bound=BaseModel)


def form_or_json(model: type[M]) -> Callable[[Request], Any]:
    """Build a dependency that validates a form or JSON body into ``model``."""

    async def parse(request: Request) -> M:
        content_type = request.headers.get("content-type", "")
        data: Any
        if content_type.startswith("application/json"):
            try:
                data = await request.json()
            except json.JSONDecodeError as exc:
                raise RequestValidationError(
                    [{"type": "json_invalid", "loc": ("body",), "msg": str(exc)}]
                ) from exc
        else:
            data = dict(await request.form())

        try:
            return model.model_validate(data)
        except ValidationError as exc:
            errors = [
                {**error, "loc": ("body", *error["loc"])}
                for error in exc.errors(include_url=False)
            ]
            raise RequestValidationError(errors) from exc

    return parse


StartGameBody = Annotated[StartGameRequest, Depends(form_or_json(StartGameRequest))]
SaveTransactionBody = Annotated[
    SaveTransactionRequest, Depends(form_or_json(SaveTransactionRequest))
]


def build_router(ledger: GameLedger) -> APIRouter:
    """Build the Game Ledger API router.

    Args:
        ledger: The shared GameLedger instance

    Returns:
        Configured APIRouter
    """
    router = APIRouter()

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    @router.post("/start_game", response_model=StartGameResponse)
    async def start_game(body: StartGameBody) -> StartGameResponse:
        """Close the active game and start a new one."""
        game_id = await run_in_executor(ledger.start_game, body.description)
        return StartGameResponse(game_id=game_id)

    @router.post("/save_transaction", response_model=StatusResponse)
    async def save_transaction(body: SaveTransactionBody) -> StatusResponse:
        """Record a transaction for a user."""
        await run_in_executor(
            ledger.save_transaction,
            body.game_id,
            body.user_id,
            body.amount,
        )
        return StatusResponse()

    # -----------------------------------------------------------------------
    # Reports
    # -----------------------------------------------------------------------

    @router.get("/get_transactions", response_model=list[TransactionOut])
    async def get_transactions() -> list[TransactionOut]:
        """All transactions, most recent first."""
        rows = await run_in_executor(ledger.get_all_transactions)
        return [TransactionOut(**row.to_dict()) for row in rows]

    @router.get("/get_profit", response_model=list[ProfitOut])
    async def get_profit() -> list[ProfitOut]:
        """Total per user, ordered by user id."""
        rows = await run_in_executor(ledger.get_profit)
        return [ProfitOut(**row.to_dict()) for row in rows]

    @router.get("/get_profit_by_day", response_model=list[ProfitByDayOut])
    async def get_profit_by_day() -> list[ProfitByDayOut]:
        """Total per user per day, latest day first."""
        rows = await run_in_executor(ledger.get_profit_by_day)
        return [ProfitByDayOut(**row.to_dict()) for row in rows]

    return router
