"""Settlement route handlers.

Endpoints:
    POST /api/settlements                          -- Settle a list of player balances.
    POST /api/settlements/for-player/{player_id}   -- Settlements one player pays or receives.
    POST /api/settlements/payment-link             -- Deep link for paying or requesting a settlement.
    POST /api/ledger                               -- Aggregate session rows, then settle them.
"""

import logging
from collections import Counter
from typing import Optional

from fastapi import APIRouter, HTTPException, Path, status
from pydantic import BaseModel, Field, field_validator

from pokerledger.config import settings
from pokerledger.models.balance import PlayerBalance, Settlement, SettlementDiagnostics
from pokerledger.models.session import LedgerEntry, LedgerTotals, SessionRecord
from pokerledger.services.ledger_builder import build_ledger, ledger_totals, to_balances
from pokerledger.services.payment_links import (
    InvalidPaymentHandleError,
    MissingPaymentHandleError,
    PaymentLink,
    build_payment_link,
    settlements_for_player,
)
from pokerledger.services.settlement_engine import settle

logger = logging.getLogger("pokerledger.routes.settlements")

router = APIRouter(tags=["Settlements"])


# ---------------------------------------------------------------------------
# Pydantic request / response schemas
# ---------------------------------------------------------------------------

class SettleRequest(BaseModel):
    """Request body for POST /api/settlements."""
    balances: list[PlayerBalance] = Field(
        ..., description="Net result for every player in the session."
    )

    @field_validator("balances")
    @classmethod
    def validate_balances(cls, v: list[PlayerBalance]) -> list[PlayerBalance]:
        if len(v) > settings.MAX_PLAYERS_PER_SESSION:
            raise ValueError(
                f"At most {settings.MAX_PLAYERS_PER_SESSION} players per session"
            )
        counts = Counter(b.id for b in v)
        duplicates = sorted(pid for pid, n in counts.items() if n > 1)
        if duplicates:
            raise ValueError(f"Duplicate player ids: {duplicates}")
        return v


class SettleResponse(BaseModel):
    """Response for POST /api/settlements."""
    settlements: list[Settlement]
    diagnostics: SettlementDiagnostics


class LedgerRequest(BaseModel):
    """Request body for POST /api/ledger."""
    records: list[SessionRecord] = Field(
        ..., description="Session export rows, one per seat."
    )


class LedgerResponse(BaseModel):
    """Response for POST /api/ledger."""
    players: list[LedgerEntry]
    totals: LedgerTotals
    settlements: list[Settlement]
    diagnostics: SettlementDiagnostics


class PaymentLinkRequest(BaseModel):
    """Request body for POST /api/settlements/payment-link."""
    settlement: Settlement
    handles: dict[str, str] = Field(
        default_factory=dict,
        description="Payment handles keyed by player id.",
    )
    viewer_id: Optional[str] = None
    note: Optional[str] = Field(default=None, max_length=280)


# ---------------------------------------------------------------------------
# POST /api/settlements -- Settle balances
# ---------------------------------------------------------------------------

@router.post(
    "/settlements",
    response_model=SettleResponse,
    status_code=status.HTTP_200_OK,
    summary="Compute minimal settlements for a session",
)
async def compute_session_settlements(body: SettleRequest) -> SettleResponse:
    """Compute the payments that zero every player's balance.

    Balances that do not sum to zero are still settled as far as
    possible; the remainder is reported in ``diagnostics``.
    """
    report = settle(body.balances)
    return SettleResponse(
        settlements=report.settlements,
        diagnostics=report.diagnostics,
    )


# ---------------------------------------------------------------------------
# POST /api/settlements/for-player/{player_id}
# ---------------------------------------------------------------------------

@router.post(
    "/settlements/for-player/{player_id}",
    response_model=list[Settlement],
    status_code=status.HTTP_200_OK,
    summary="Settlements involving one player",
)
async def player_settlements(
    body: SettleRequest,
    player_id: str = Path(...),
) -> list[Settlement]:
    """Return the settlements the player pays or receives.

    Raises:
        HTTPException 404: The player is not part of the session.
    """
    if not any(b.id == player_id for b in body.balances):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Player not found in session",
        )
    report = settle(body.balances)
    return settlements_for_player(report.settlements, player_id)


# ---------------------------------------------------------------------------
# POST /api/settlements/payment-link
# ---------------------------------------------------------------------------

@router.post(
    "/settlements/payment-link",
    response_model=PaymentLink,
    status_code=status.HTTP_200_OK,
    summary="Build a pay / request deep link for a settlement",
)
async def payment_link(body: PaymentLinkRequest) -> PaymentLink:
    """Build the deep link for settling up.

    Raises:
        HTTPException 404: The counterparty has no payment handle.
        HTTPException 422: The counterparty's payment handle is blank or malformed.
    """
    try:
        return build_payment_link(
            body.settlement,
            body.handles,
            viewer_id=body.viewer_id,
            note=body.note,
        )
    except MissingPaymentHandleError as e:
        logger.warning("Payment link unavailable: %s", e)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except InvalidPaymentHandleError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e),
        )


# ---------------------------------------------------------------------------
# POST /api/ledger -- Aggregate and settle
# ---------------------------------------------------------------------------

@router.post(
    "/ledger",
    response_model=LedgerResponse,
    status_code=status.HTTP_200_OK,
    summary="Aggregate session rows and settle them",
)
async def session_ledger(body: LedgerRequest) -> LedgerResponse:
    """Build per-player results from session rows and settle them.

    Raises:
        HTTPException 400: The session has more players than allowed.
    """
    players = build_ledger(body.records)
    if len(players) > settings.MAX_PLAYERS_PER_SESSION:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.MAX_PLAYERS_PER_SESSION} players per session",
        )

    report = settle(to_balances(players))
    logger.info(
        "Settled ledger with %d players in %d payments",
        len(players),
        len(report.settlements),
    )
    return LedgerResponse(
        players=players,
        totals=ledger_totals(players),
        settlements=report.settlements,
        diagnostics=report.diagnostics,
    )
