"""Pure functions for turning session export rows into player balances.

Rows are expected to be typed already (integer cents); parsing the
export file itself happens before this module is reached.
"""

import logging
from typing import Iterable, Sequence

from pokerledger.models.balance import PlayerBalance
from pokerledger.models.session import LedgerEntry, LedgerTotals, SessionRecord

logger = logging.getLogger("pokerledger.services.ledger")


def build_ledger(records: Iterable[SessionRecord]) -> list[LedgerEntry]:
    """Aggregate session rows into one ledger entry per player.

    - Rows are grouped by ``player_id`` in order of first appearance.
    - The display name is the first non-empty name seen for the player.
    - ``cash_out`` uses ``buy_out`` when set, else the ``stack`` still on
      the table when the session ended.

    Args:
        records: Session export rows; a player may appear in many rows.

    Returns:
        One LedgerEntry per distinct player.
    """
    entries: dict[str, LedgerEntry] = {}
    skipped = 0

    for record in records:
        player_id = record.player_id.strip()
        if not player_id:
            skipped += 1
            continue

        entry = entries.get(player_id)
        if entry is None:
            entry = LedgerEntry(id=player_id, name="")
            entries[player_id] = entry

        if not entry.name:
            entry.name = record.player_name.strip()

        entry.buy_in += record.buy_in
        entry.cash_out += record.buy_out or record.stack

    for entry in entries.values():
        entry.net = entry.cash_out - entry.buy_in

    if skipped:
        logger.warning("Skipped %d session rows without a player_id", skipped)

    return list(entries.values())


def to_balances(entries: Sequence[LedgerEntry]) -> list[PlayerBalance]:
    """Project ledger entries onto the balances the settlement engine reads."""
    return [PlayerBalance(id=e.id, name=e.name, net=e.net) for e in entries]


def ledger_totals(entries: Sequence[LedgerEntry]) -> LedgerTotals:
    """Sum buy-ins, cash-outs, and nets across the whole session."""
    buy_in_total = sum(e.buy_in for e in entries)
    cash_out_total = sum(e.cash_out for e in entries)
    return LedgerTotals(
        buy_in_total=buy_in_total,
        cash_out_total=cash_out_total,
        net_total=cash_out_total - buy_in_total,
    )
