"""Session ledger models.

A session export lists one row per seat: a player who re-buys or
re-seats appears in several rows under the same ``player_id``.
"""

from pydantic import BaseModel, Field, StrictInt


class SessionRecord(BaseModel):
    """One row of a session export, already converted to integer cents."""

    player_id: str
    player_name: str = ""
    buy_in: StrictInt = Field(default=0, ge=0)
    buy_out: StrictInt = Field(default=0, ge=0)
    stack: StrictInt = Field(default=0, ge=0)


class LedgerEntry(BaseModel):
    """A single player's aggregated result for a session."""

    id: str
    name: str
    buy_in: int = 0
    cash_out: int = 0
    net: int = 0


class LedgerTotals(BaseModel):
    """Session-wide totals across all ledger entries."""

    buy_in_total: int
    cash_out_total: int
    net_total: int
