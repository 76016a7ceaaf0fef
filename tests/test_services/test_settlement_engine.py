"""Tests for the settlement engine pure functions.

Covers the worked scenarios plus the correctness properties every
settlement list must satisfy: zero-sum, conservation, at most n - 1
payments, no self-payment, and determinism.
"""

import logging
import random

import pytest

from pokerledger.models.balance import PlayerBalance, Settlement
from pokerledger.services.settlement_engine import (
    apply_settlements,
    compute_settlements,
    settle,
    summarize_settlements,
)


def _triples(settlements: list[Settlement]) -> list[tuple[str, str, int]]:
    return [(s.from_.id, s.to.id, s.amount) for s in settlements]


def _zero_sum_session(rng: random.Random, size: int) -> list[PlayerBalance]:
    """Random session whose nets sum to zero."""
    nets = [rng.randint(-50_000, 50_000) for _ in range(size - 1)]
    nets.append(-sum(nets))
    return [PlayerBalance(id=f"p{i}", name=f"Player {i}", net=n) for i, n in enumerate(nets)]


WELL_FORMED_SESSIONS = [
    [("A", 500), ("B", -500)],
    [("A", 300), ("B", -100), ("C", -200)],
    [("A", 1000), ("B", -400), ("C", -300), ("D", -300)],
    [("A", 250), ("B", 250), ("C", -500)],
    [("A", 1200), ("B", -700), ("C", 0), ("D", 300), ("E", -800)],
    [("A", -1), ("B", 1)],
    [("A", 4000), ("B", 2500), ("C", -1500), ("D", -1500), ("E", -1500), ("F", -2000)],
]


class TestExampleScenarios:
    """The worked examples for the settlement engine."""

    def test_single_pair(self, make_balances):
        result = compute_settlements(make_balances(("A", 500), ("B", -500)))
        assert _triples(result) == [("B", "A", 500)]

    def test_largest_debtor_paid_first(self, make_balances):
        result = compute_settlements(
            make_balances(("A", 300), ("B", -100), ("C", -200))
        )
        assert _triples(result) == [("C", "A", 200), ("B", "A", 100)]

    def test_one_creditor_three_debtors(self, make_balances):
        balances = make_balances(("A", 1000), ("B", -400), ("C", -300), ("D", -300))
        result = compute_settlements(balances)
        assert _triples(result) == [
            ("B", "A", 400),
            ("C", "A", 300),
            ("D", "A", 300),
        ]
        assert sum(s.amount for s in result) == 1000

    def test_all_zero(self, make_balances):
        assert compute_settlements(make_balances(("A", 0), ("B", 0))) == []

    def test_one_debtor_covers_two_creditors(self, make_balances):
        result = compute_settlements(
            make_balances(("A", 250), ("B", 250), ("C", -500))
        )
        assert _triples(result) == [("C", "A", 250), ("C", "B", 250)]


class TestEdgeCases:

    def test_empty_input(self):
        assert compute_settlements([]) == []

    def test_single_player(self, make_balances):
        assert compute_settlements(make_balances(("A", 700))) == []

    def test_settlement_carries_names(self):
        balances = [
            PlayerBalance(id="u1", name="Alice", net=900),
            PlayerBalance(id="u2", name="Bob", net=-900),
        ]
        (only,) = compute_settlements(balances)
        assert only.from_.name == "Bob"
        assert only.to.name == "Alice"
        assert only.to_dict() == {
            "from": {"id": "u2", "name": "Bob"},
            "to": {"id": "u1", "name": "Alice"},
            "amount": 900,
        }

    def test_input_not_mutated(self, make_balances):
        balances = make_balances(("A", 300), ("B", -100), ("C", -200))
        snapshot = [b.model_dump() for b in balances]
        compute_settlements(balances)
        assert [b.model_dump() for b in balances] == snapshot

    def test_input_order_irrelevant_to_totals(self, make_balances):
        forward = make_balances(("A", 600), ("B", -200), ("C", -400))
        backward = list(reversed(forward))
        assert sum(s.amount for s in compute_settlements(forward)) == 600
        assert sum(s.amount for s in compute_settlements(backward)) == 600

    def test_same_sign_players_never_settle_together(self, make_balances):
        balances = make_balances(("A", 400), ("B", 400), ("C", -400), ("D", -400))
        for s in compute_settlements(balances):
            assert s.from_.id in {"C", "D"}
            assert s.to.id in {"A", "B"}

    def test_equal_nets_settle_in_input_order(self, make_balances):
        balances = make_balances(("A", 300), ("B", 300), ("C", -300), ("D", -300))
        assert _triples(compute_settlements(balances)) == [
            ("C", "A", 300),
            ("D", "B", 300),
        ]

    def test_surplus_credit_left_unsettled(self, make_balances):
        """Input that does not sum to zero still terminates."""
        result = compute_settlements(make_balances(("A", 500), ("B", -300)))
        assert _triples(result) == [("B", "A", 300)]

    def test_surplus_debt_left_unsettled(self, make_balances):
        result = compute_settlements(make_balances(("A", 100), ("B", -300), ("C", -50)))
        assert _triples(result) == [("B", "A", 100)]

    def test_only_debtors(self, make_balances):
        assert compute_settlements(make_balances(("A", -100), ("B", -200))) == []

    def test_only_creditors(self, make_balances):
        assert compute_settlements(make_balances(("A", 100), ("B", 200))) == []


class TestProperties:
    """Properties checked across fixed and seeded-random sessions."""

    @pytest.fixture(params=range(len(WELL_FORMED_SESSIONS) + 20))
    def session(self, request, make_balances) -> list[PlayerBalance]:
        if request.param < len(WELL_FORMED_SESSIONS):
            return make_balances(*WELL_FORMED_SESSIONS[request.param])
        rng = random.Random(request.param)
        return _zero_sum_session(rng, rng.randint(2, 30))

    def test_zero_sum_correctness(self, session):
        after = apply_settlements(session, compute_settlements(session))
        assert all(net == 0 for net in after.values())

    def test_conservation(self, session):
        settlements = compute_settlements(session)
        total_positive = sum(b.net for b in session if b.net > 0)
        total_negative = sum(-b.net for b in session if b.net < 0)
        assert sum(s.amount for s in settlements) == total_positive == total_negative

    def test_at_most_n_minus_one_payments(self, session):
        nonzero = [b for b in session if b.net != 0]
        settlements = compute_settlements(session)
        assert len(settlements) <= max(len(nonzero) - 1, 0)

    def test_no_self_payment(self, session):
        for s in compute_settlements(session):
            assert s.from_.id != s.to.id

    def test_zero_balance_players_never_participate(self, session):
        zero_ids = {b.id for b in session if b.net == 0}
        for s in compute_settlements(session):
            assert s.from_.id not in zero_ids
            assert s.to.id not in zero_ids

    def test_amounts_positive(self, session):
        assert all(s.amount > 0 for s in compute_settlements(session))

    def test_deterministic(self, session):
        assert compute_settlements(session) == compute_settlements(session)


class TestSummarizeSettlements:

    def test_balanced_session(self, make_balances):
        balances = make_balances(("A", 1000), ("B", -400), ("C", -300), ("D", -300))
        diagnostics = summarize_settlements(balances, compute_settlements(balances))
        assert diagnostics.total_credit == 1000
        assert diagnostics.total_debit == 1000
        assert diagnostics.total_settled == 1000
        assert diagnostics.imbalance == 0
        assert diagnostics.unsettled == 0
        assert diagnostics.residuals == {}
        assert diagnostics.is_balanced

    def test_surplus_credit_reported(self, make_balances):
        balances = make_balances(("A", 500), ("B", -300))
        diagnostics = summarize_settlements(balances, compute_settlements(balances))
        assert diagnostics.imbalance == 200
        assert diagnostics.unsettled == 200
        assert diagnostics.residuals == {"A": 200}
        assert not diagnostics.is_balanced

    def test_surplus_debt_reported(self, make_balances):
        balances = make_balances(("A", 100), ("B", -300))
        diagnostics = summarize_settlements(balances, compute_settlements(balances))
        assert diagnostics.imbalance == -200
        assert diagnostics.unsettled == 0
        assert diagnostics.residuals == {"B": -200}

    def test_empty(self):
        diagnostics = summarize_settlements([], [])
        assert diagnostics.total_settled == 0
        assert diagnostics.is_balanced


class TestSettle:

    def test_returns_settlements_and_diagnostics(self, make_balances):
        report = settle(make_balances(("A", 250), ("B", 250), ("C", -500)))
        assert _triples(report.settlements) == [("C", "A", 250), ("C", "B", 250)]
        assert report.diagnostics.total_settled == 500

    def test_imbalance_logged_as_warning(self, make_balances, caplog):
        with caplog.at_level(logging.WARNING, logger="pokerledger.services.settlement"):
            report = settle(make_balances(("A", 500), ("B", -300)))
        assert report.diagnostics.unsettled == 200
        assert "do not sum to zero" in caplog.text

    def test_balanced_session_not_warned(self, make_balances, caplog):
        with caplog.at_level(logging.WARNING, logger="pokerledger.services.settlement"):
            settle(make_balances(("A", 500), ("B", -500)))
        assert caplog.text == ""
