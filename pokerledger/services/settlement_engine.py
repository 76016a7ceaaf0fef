"""Pure functions for settling a session's balances.

No database access, no async. Given every player's net result for a
session, produce the payments that bring all balances back to zero.
"""

import logging
from typing import Sequence

from pokerledger.models.balance import (
    PlayerBalance,
    Settlement,
    SettlementDiagnostics,
    SettlementReport,
)

logger = logging.getLogger("pokerledger.services.settlement")


def _settle_order(balances: Sequence[PlayerBalance]) -> list[PlayerBalance]:
    """Sort balances by net descending.

    Among equal nets the player listed first is reached first by the
    pointer scanning that side: creditors are read from the front and
    debtors from the back, so debtor ties are laid out in reverse.
    """
    def sort_key(item: tuple[int, PlayerBalance]) -> tuple[int, int]:
        index, balance = item
        return (-balance.net, index if balance.net >= 0 else -index)

    return [balance for _, balance in sorted(enumerate(balances), key=sort_key)]


def compute_settlements(balances: Sequence[PlayerBalance]) -> list[Settlement]:
    """Compute the payments that zero every player's balance.

    Greedy two-pointer matching: the largest remaining creditor is paid
    by the largest remaining debtor until one of them reaches zero.
    Every payment closes out at least one player, so ``n`` players need
    at most ``n - 1`` payments.

    The caller's balances are never modified. Input that does not sum to
    zero still terminates; the remainder is left unsettled and shows up
    in :func:`summarize_settlements`.

    Args:
        balances: Player balances for one session, in any order.

    Returns:
        Settlements in the order they were generated, largest pairings first.
    """
    ordered = _settle_order(balances)
    remaining = [b.net for b in ordered]
    settlements: list[Settlement] = []

    i = 0
    j = len(ordered) - 1
    while i < j:
        if remaining[i] <= 0 or remaining[j] >= 0:
            break

        amount = min(remaining[i], -remaining[j])
        if amount > 0:
            settlements.append(
                Settlement(from_=ordered[j].ref, to=ordered[i].ref, amount=amount)
            )
            remaining[i] -= amount
            remaining[j] += amount

        if remaining[i] == 0:
            i += 1
        if remaining[j] == 0:
            j -= 1

    return settlements


def apply_settlements(
    balances: Sequence[PlayerBalance],
    settlements: Sequence[Settlement],
) -> dict[str, int]:
    """Return each player's net after every settlement has been paid.

    The payer's net rises by the amount paid and the payee's net falls
    by the amount received. Players unknown to ``balances`` are added
    starting from zero.
    """
    result: dict[str, int] = {}
    for balance in balances:
        result[balance.id] = result.get(balance.id, 0) + balance.net
    for s in settlements:
        result[s.from_.id] = result.get(s.from_.id, 0) + s.amount
        result[s.to.id] = result.get(s.to.id, 0) - s.amount
    return result


def summarize_settlements(
    balances: Sequence[PlayerBalance],
    settlements: Sequence[Settlement],
) -> SettlementDiagnostics:
    """Compute verification totals for a settlement list.

    For balances that sum to zero, ``total_settled == total_credit`` and
    ``residuals`` is empty.
    """
    total_credit = sum(b.net for b in balances if b.net > 0)
    total_debit = sum(-b.net for b in balances if b.net < 0)
    total_settled = sum(s.amount for s in settlements)
    residuals = {
        player_id: net
        for player_id, net in apply_settlements(balances, settlements).items()
        if net != 0
    }
    return SettlementDiagnostics(
        total_credit=total_credit,
        total_debit=total_debit,
        total_settled=total_settled,
        imbalance=total_credit - total_debit,
        unsettled=total_credit - total_settled,
        residuals=residuals,
    )


def settle(balances: Sequence[PlayerBalance]) -> SettlementReport:
    """Compute settlements and their diagnostics in one pass.

    An imbalanced session is logged as a warning but still settled as
    far as the balances allow.
    """
    settlements = compute_settlements(balances)
    diagnostics = summarize_settlements(balances, settlements)

    logger.debug(
        "Computed %d settlements for %d players (total_settled=%d)",
        len(settlements),
        len(balances),
        diagnostics.total_settled,
    )
    if not diagnostics.is_balanced:
        logger.warning(
            "Balances do not sum to zero (imbalance=%d, unsettled=%d, residual_players=%d)",
            diagnostics.imbalance,
            diagnostics.unsettled,
            len(diagnostics.residuals),
        )

    return SettlementReport(settlements=settlements, diagnostics=diagnostics)
