"""Starter loan for a brand-new, penniless player."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tycoon.amortization import calculate_adjusted_interest_rate
from tycoon.core.decorators import system
from tycoon.events import LoanOriginated
from tycoon.lifecycle import Origination, originate_loan

if TYPE_CHECKING:
    from tycoon.finance import Finance


@system
class GrantStarterLoan:
    """
    Originate the configured starter loan once, on a fresh game.

    Rule
    ----
        starter configured ∧ balance = 0 ∧ no active loan ∧ empty history
            → originate at the player's personalised rate

    Notes
    -----
    • Checked on the first executed tick only; a refused starter loan is not
      retried.
    • Enabled by default (100 000 Quick Loan from City Bank over 12 months);
      disabled when ``starter_loan`` is null.
    """

    checked: bool = False

    def execute(self, fin: Finance) -> None:
        if self.checked:
            return
        self.checked = True

        starter = fin.config.starter_loan
        state = fin.state
        if starter is None:
            return
        if fin.game.balance != 0 or state.active_loan is not None or state.loan_history:
            return

        log = self.get_logger()
        loan_type = fin.catalog.get_loan_type(starter.bank_id, starter.loan_type_id)
        if loan_type is None:
            log.warning(
                f"  Starter loan product '{starter.bank_id}/{starter.loan_type_id}' "
                f"not in catalog"
            )
            return

        rel = state.relationships.get(starter.bank_id)
        rate = calculate_adjusted_interest_rate(
            loan_type.base_rate,
            fin.game.level,
            state.credit_score,
            rel.score if rel is not None else 0,
            loan_type.relationship_discount,
            level_discount=fin.config.level_rate_discount,
            floor=fin.config.min_interest_rate,
        )

        log.info("--- Granting starter loan ---")
        result = originate_loan(
            state,
            fin.game,
            fin.catalog,
            fin.config,
            bank_id=starter.bank_id,
            loan_type_id=starter.loan_type_id,
            amount=starter.amount,
            interest_rate=rate,
            duration=starter.duration,
            now=fin.clock,
        )
        if isinstance(result, Origination):
            fin.emit(LoanOriginated(loan=result.loan))
        else:
            log.warning(f"  Starter loan refused: {result.message}")
