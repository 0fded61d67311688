"""Unit tests for intent resolution and the intent queue."""

import pytest

from tycoon.events import (
    EmiPayment,
    IntentRejected,
    LoanCompleted,
    LoanOriginated,
    OpenFinance,
)
from tycoon.intents import PayEmi, PreCloseLoan, TakeLoan, ViewFinance
from tycoon.lifecycle import Origination, RejectReason, Rejection
from tycoon.state import ActiveLoan, Completion
from tycoon.systems import ProcessIntents, resolve_intent
from tests.helpers.factories import mock_loan

QUICK = TakeLoan(
    bank_id="city_bank",
    loan_type_id="quick_loan",
    amount=50_000.0,
    interest_rate=8.5,
    duration=12,
)


def test_take_loan_emits_originated(fin):
    result = resolve_intent(fin, QUICK)

    assert isinstance(result, Origination)
    (event,) = fin.drain_events()
    assert isinstance(event, LoanOriginated)
    assert event.loan.original_amount == 50_000.0
    assert fin.balance == 50_000.0


def test_rejection_emits_intent_rejected(fin):
    resolve_intent(fin, QUICK)
    fin.drain_events()

    result = resolve_intent(fin, QUICK)

    assert isinstance(result, Rejection)
    (event,) = fin.drain_events()
    assert isinstance(event, IntentRejected)
    assert event.intent == QUICK
    assert event.reason is RejectReason.LOAN_ACTIVE
    assert event.message == result.message


def test_manual_payment_event(fin):
    fin.state.slot = ActiveLoan(mock_loan())
    fin.game.balance = 10_000.0

    resolve_intent(fin, PayEmi())

    (event,) = fin.drain_events()
    assert isinstance(event, EmiPayment)
    assert event.manual and event.success


def test_manual_final_payment_emits_completion(fin):
    fin.state.slot = ActiveLoan(
        mock_loan(remaining_months=1, remaining_amount=100.0, emi_amount=101.0)
    )
    fin.game.balance = 101.0

    resolve_intent(fin, PayEmi())

    kinds = [e.kind for e in fin.drain_events()]
    assert kinds == ["emi-payment", "loan-completed"]


def test_pre_close_emits_completion(fin):
    fin.state.slot = ActiveLoan(mock_loan(remaining_amount=1_000.0))
    fin.game.balance = 2_000.0

    resolve_intent(fin, PreCloseLoan())

    (event,) = fin.drain_events()
    assert isinstance(event, LoanCompleted)
    assert event.completion is Completion.EARLY
    assert event.credit_score == 758


def test_view_finance(fin):
    result = resolve_intent(fin, ViewFinance())

    assert isinstance(result, OpenFinance)
    assert [b.id for b in result.banks] == ["city_bank"]
    assert result.current_loan is None
    assert result.credit_score == 750
    assert fin.drain_events() == [result]


def test_view_finance_payload_is_snapshot(fin):
    fin.state.slot = ActiveLoan(mock_loan())
    view = resolve_intent(fin, ViewFinance())

    view.current_loan.remaining_amount = 0.0
    view.relationships["city_bank"].score = 0

    assert fin.active_loan.remaining_amount == 100_000.0
    assert fin.relationships["city_bank"].score == 50
    with pytest.raises(TypeError):
        view.relationships["city_bank"] = None


def test_unknown_intent_raises(fin):
    with pytest.raises(TypeError, match="Unknown intent"):
        resolve_intent(fin, object())


# Queue
# ---------------------------------------------------------------------------
def test_queue_drained_fifo(fin):
    fin.dispatch(QUICK)
    fin.dispatch(QUICK)
    fin.dispatch(ViewFinance())

    ProcessIntents().execute(fin)

    kinds = [e.kind for e in fin.drain_events()]
    assert kinds == ["loan-originated", "intent-rejected", "open-finance"]
    assert len(fin.intents) == 0


def test_empty_queue_is_noop(fin):
    ProcessIntents().execute(fin)
    assert fin.drain_events() == []


def test_intents_queued_during_drain_wait(fin, monkeypatch):
    """Only intents present when the system starts are processed this tick."""
    original_emit = type(fin).emit

    def emit_and_requeue(self, event):
        original_emit(self, event)
        if isinstance(event, OpenFinance) and len(self.outbox) == 1:
            self.dispatch(ViewFinance())

    monkeypatch.setattr(type(fin), "emit", emit_and_requeue)

    fin.dispatch(ViewFinance())
    ProcessIntents().execute(fin)

    assert len(fin.outbox) == 1
    assert list(fin.intents) == [ViewFinance()]
