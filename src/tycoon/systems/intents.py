"""Player intent handling, shared by the queued and the synchronous paths."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from tycoon.catalog import get_available_banks
from tycoon.core.decorators import system
from tycoon.events import (
    EmiPayment,
    IntentRejected,
    LoanCompleted,
    LoanOriginated,
    OpenFinance,
)
from tycoon.intents import Intent, PayEmi, PreCloseLoan, TakeLoan, ViewFinance
from tycoon.lifecycle import (
    Origination,
    PaymentOutcome,
    PreClosure,
    Rejection,
    originate_loan,
    pay_emi,
    pre_close_loan,
)
from tycoon.state import LoanRecord

if TYPE_CHECKING:
    from tycoon.finance import Finance

IntentResult = Origination | PaymentOutcome | PreClosure | OpenFinance | Rejection


def resolve_intent(fin: Finance, intent: Intent) -> IntentResult:
    """
    Apply one player intent through the lifecycle and emit its notification.

    Returns the lifecycle outcome (or the ``OpenFinance`` payload). A refused
    intent emits ``IntentRejected`` and returns the :class:`Rejection`.
    """
    result: IntentResult
    if isinstance(intent, TakeLoan):
        result = originate_loan(
            fin.state,
            fin.game,
            fin.catalog,
            fin.config,
            bank_id=intent.bank_id,
            loan_type_id=intent.loan_type_id,
            amount=intent.amount,
            interest_rate=intent.interest_rate,
            duration=intent.duration,
            collateral_id=intent.collateral_id,
            now=fin.clock,
        )
        if isinstance(result, Origination):
            fin.emit(LoanOriginated(loan=result.loan))

    elif isinstance(intent, PayEmi):
        result = pay_emi(fin.state, fin.game, fin.config, now=fin.clock)
        if isinstance(result, PaymentOutcome):
            fin.emit(
                EmiPayment(
                    success=True,
                    amount=result.amount,
                    principal_paid=result.principal_paid,
                    interest_paid=result.interest_paid,
                    remaining_loan=result.remaining_loan,
                    remaining_months=result.remaining_months,
                    balance=fin.game.balance,
                    manual=True,
                )
            )
            if result.record is not None:
                _emit_completed(fin, result.record)

    elif isinstance(intent, PreCloseLoan):
        result = pre_close_loan(fin.state, fin.game, fin.config, now=fin.clock)
        if isinstance(result, PreClosure):
            _emit_completed(fin, result.record)

    elif isinstance(intent, ViewFinance):
        result = open_finance_view(fin)
        fin.emit(result)

    else:
        raise TypeError(f"Unknown intent {intent!r}")

    if isinstance(result, Rejection):
        fin.emit(
            IntentRejected(intent=intent, reason=result.reason, message=result.message)
        )
    return result


def open_finance_view(fin: Finance) -> OpenFinance:
    """Snapshot of everything the finance screen renders."""
    state = fin.state
    banks = get_available_banks(
        fin.catalog,
        state.unlocked_banks,
        fin.game.level,
        state.relationships,
        unlocked_loan_types=state.unlocked_loan_types,
    )
    loan = state.active_loan
    return OpenFinance(
        banks=tuple(banks),
        current_loan=loan.snapshot() if loan is not None else None,
        credit_score=state.credit_score,
        relationships=MappingProxyType(
            {k: r.snapshot() for k, r in state.relationships.items()}
        ),
    )


def _emit_completed(fin: Finance, record: LoanRecord) -> None:
    bank_id = record.loan.bank_id
    fin.emit(
        LoanCompleted(
            bank_id=bank_id,
            completion=record.completion,
            relationship=fin.state.relationships[bank_id].snapshot(),
            credit_score=fin.state.credit_score,
        )
    )


@system
class ProcessIntents:
    """
    Drain the intent queue in FIFO order.

    Notes
    -----
    Intents dispatched while the queue is being drained (e.g. by an event
    consumer) wait for the next tick.
    """

    def execute(self, fin: Finance) -> None:
        log = self.get_logger()
        pending = len(fin.intents)
        if pending == 0:
            return

        log.info(f"--- Processing {pending} intent(s) ---")
        for _ in range(pending):
            intent = fin.intents.popleft()
            result = resolve_intent(fin, intent)
            if isinstance(result, Rejection):
                log.warning(f"  {type(intent).__name__} rejected: {result.message}")
