"""Pydantic models for pokerledger."""

from pokerledger.models.balance import (
    PlayerBalance,
    PlayerRef,
    Settlement,
    SettlementDiagnostics,
    SettlementReport,
)
from pokerledger.models.session import LedgerEntry, LedgerTotals, SessionRecord

__all__ = [
    # Balance models
    "PlayerBalance",
    "PlayerRef",
    "Settlement",
    "SettlementDiagnostics",
    "SettlementReport",
    # Session models
    "SessionRecord",
    "LedgerEntry",
    "LedgerTotals",
]
