"""EMI aging: the automatic monthly installment driven by the tick timer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tycoon.core.decorators import system
from tycoon.events import EmiPayment, LoanCompleted, LoanPenalty
from tycoon.lifecycle import Rejection, apply_scheduled_payment
from tycoon.logging import DEEP_DEBUG

if TYPE_CHECKING:
    from tycoon.finance import Finance


@system
class CollectScheduledEmi:
    """
    Age the EMI due timer and collect the installment when it expires.

    Rule
    ----
        active loan ∧ timer ≥ interval  →  timer = 0, apply_scheduled_payment
        otherwise                        →  timer += Δt

    Notes
    -----
    • Emits ``EmiPayment`` for every attempt, then ``LoanCompleted`` when the
      loan was fully amortized or ``LoanPenalty`` when consecutive misses
      reached the threshold.
    • The timer keeps running while no loan is active; origination resets it.
    """

    def execute(self, fin: Finance) -> None:
        log = self.get_logger()
        state = fin.state

        if state.active_loan is None or state.emi_due_timer < state.emi_interval:
            state.emi_due_timer += fin.dt
            if log.isEnabledFor(DEEP_DEBUG):
                log.deep(  # type: ignore[attr-defined]
                    f"  EMI timer {state.emi_due_timer:.1f}/{state.emi_interval:.1f} ms"
                )
            return

        log.info("--- Collecting scheduled EMI ---")
        state.emi_due_timer = 0.0
        outcome = apply_scheduled_payment(state, fin.game, fin.config, now=fin.clock)
        if isinstance(outcome, Rejection):
            return

        fin.emit(
            EmiPayment(
                success=outcome.success,
                amount=outcome.amount,
                principal_paid=outcome.principal_paid,
                interest_paid=outcome.interest_paid,
                remaining_loan=outcome.remaining_loan,
                remaining_months=outcome.remaining_months,
                balance=fin.game.balance,
            )
        )

        if outcome.completed and outcome.record is not None:
            bank_id = outcome.record.loan.bank_id
            fin.emit(
                LoanCompleted(
                    bank_id=bank_id,
                    completion=outcome.record.completion,
                    relationship=state.relationships[bank_id].snapshot(),
                    credit_score=state.credit_score,
                )
            )
        elif outcome.multiple_missed:
            fin.emit(
                LoanPenalty(
                    message="Multiple EMIs missed! Rating decreased.",
                    penalty_amount=outcome.late_fee,
                    credit_score=state.credit_score,
                )
            )
