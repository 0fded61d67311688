# src/tycoon/lifecycle.py
"""
Loan lifecycle – the only legal mutators of the active-loan slot, the loan
history, bank relationships and the credit score.

State machine
-------------
    NoLoan ──originate──▶ Active ──paid off──▶ Completed (history, FULL)
                            │  ▲
                            │  └── missed installment (late fee, penalties)
                            └────pre-close──▶ PreClosed (history, EARLY)

Business failures never raise: every operation returns either an outcome
record or a :class:`Rejection`, and a rejection guarantees that nothing was
mutated. There is no default / foreclosure state; a loan whose installments
keep being missed stays active and keeps accruing late fees.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tycoon import logging
from tycoon.amortization import (
    CREDIT_SCORE_MAX,
    CREDIT_SCORE_MIN,
    calculate_emi,
    calculate_pre_closure_amount,
    calculate_total_interest,
    generate_amortization_schedule,
    monthly_rate,
)
from tycoon.catalog import gated_loan_types
from tycoon.helpers import clamp
from tycoon.state import (
    NO_LOAN,
    ActiveLoan,
    BankRelationship,
    Completion,
    FinanceState,
    GameState,
    Loan,
    LoanRecord,
)

if TYPE_CHECKING:
    from tycoon.catalog import BankCatalog
    from tycoon.config import Config

__all__ = [
    "Origination",
    "PaymentOutcome",
    "PreClosure",
    "RejectReason",
    "Rejection",
    "apply_scheduled_payment",
    "originate_loan",
    "pay_emi",
    "pre_close_loan",
    "seed_relationship",
]

log = logging.getLogger(__name__)

RELATIONSHIP_MIN = 0
RELATIONSHIP_MAX = 100

# Slack for float comparisons against the balance
_EPS = 1e-9


class RejectReason(str, Enum):
    """Why a lifecycle operation refused to act."""

    LOAN_ACTIVE = "loan_active"
    NO_ACTIVE_LOAN = "no_active_loan"
    UNKNOWN_BANK = "unknown_bank"
    UNKNOWN_LOAN_TYPE = "unknown_loan_type"
    LOCKED = "locked"
    INVALID_INPUT = "invalid_input"
    COLLATERAL_REQUIRED = "collateral_required"
    INVALID_EMI = "invalid_emi"
    INSUFFICIENT_FUNDS = "insufficient_funds"


@dataclass(slots=True, frozen=True)
class Rejection:
    """Structured refusal; the state is exactly as it was before the call."""

    reason: RejectReason
    message: str


@dataclass(slots=True, frozen=True)
class Origination:
    """A freshly originated loan (snapshot) and the amount credited."""

    loan: Loan
    credited: float


@dataclass(slots=True, frozen=True)
class PaymentOutcome:
    """
    Result of one installment attempt.

    ``success`` is False for a missed scheduled installment; then
    ``shortfall`` and ``late_fee`` are set and ``multiple_missed`` tells
    whether the consecutive-miss threshold was reached.
    """

    success: bool
    amount: float
    principal_paid: float = 0.0
    interest_paid: float = 0.0
    remaining_loan: float = 0.0
    remaining_months: int = 0
    shortfall: float = 0.0
    late_fee: float = 0.0
    multiple_missed: bool = False
    completed: bool = False
    record: LoanRecord | None = None
    loan: Loan | None = None


@dataclass(slots=True, frozen=True)
class PreClosure:
    """Early payoff receipt."""

    record: LoanRecord
    amount_paid: float
    penalty: float


# Relationship / credit helpers
# ---------------------------------------------------------------------------
def seed_relationship(
    state: FinanceState, bank_id: str, cfg: Config, *, now: float = 0.0
) -> BankRelationship:
    """Return the relationship with ``bank_id``, creating it at the initial score."""
    rel = state.relationships.get(bank_id)
    if rel is None:
        rel = BankRelationship(score=cfg.relationship_init, first_unlocked=now)
        state.relationships[bank_id] = rel
        log.debug(f"  Seeded relationship with '{bank_id}' at {rel.score}")
    return rel


def _nudge_relationship(rel: BankRelationship, delta: int) -> None:
    rel.score = clamp(rel.score + delta, RELATIONSHIP_MIN, RELATIONSHIP_MAX)


def _nudge_credit(state: FinanceState, delta: int) -> None:
    state.credit_score = clamp(
        state.credit_score + delta, CREDIT_SCORE_MIN, CREDIT_SCORE_MAX
    )


def _archive(
    state: FinanceState,
    loan: Loan,
    completion: Completion,
    *,
    now: float,
    penalty_paid: float = 0.0,
) -> LoanRecord:
    record = LoanRecord(
        loan=loan.snapshot(),
        completion=completion,
        closed_at=now,
        penalty_paid=penalty_paid,
    )
    state.loan_history.append(record)
    state.slot = NO_LOAN
    return record


# Origination
# ---------------------------------------------------------------------------
def originate_loan(
    state: FinanceState,
    game: GameState,
    catalog: BankCatalog,
    cfg: Config,
    *,
    bank_id: str,
    loan_type_id: str,
    amount: float,
    interest_rate: float,
    duration: int,
    collateral_id: str | None = None,
    now: float = 0.0,
) -> Origination | Rejection:
    """
    Open a new loan in the empty slot and credit the principal.

    Rule
    ----
        reject  if  slot active ∨ bank/type unknown ∨ locked
                    ∨ amount ∉ [min, max(level)]
                    ∨ duration not whole ∨ duration ∉ [min, max]
                    ∨ rate ≤ 0 ∨ EMI invalid ∨ collateral missing
        balance   += amount
        timer      = 0
        score_rel += 2                       (capped at 100)
    """
    if state.active_loan is not None:
        return _reject(RejectReason.LOAN_ACTIVE, "You already have an active loan")

    bank = catalog.get_bank(bank_id)
    if bank is None:
        return _reject(RejectReason.UNKNOWN_BANK, f"Unknown bank '{bank_id}'")
    loan_type = bank.get_loan_type(loan_type_id)
    if loan_type is None:
        return _reject(
            RejectReason.UNKNOWN_LOAN_TYPE,
            f"'{bank.name}' offers no loan type '{loan_type_id}'",
        )

    # ---- access ----------------------------------------------------------
    rel = state.relationships.get(bank_id)
    if bank_id not in state.unlocked_banks or game.level < bank.unlock_level:
        return _reject(RejectReason.LOCKED, f"'{bank.name}' is not unlocked yet")
    if rel is not None and rel.score < bank.min_relationship:
        return _reject(
            RejectReason.LOCKED,
            f"'{bank.name}' requires a relationship score of {bank.min_relationship}",
        )
    gated = gated_loan_types(cfg.unlocks)
    if game.level < loan_type.min_level or (
        loan_type_id in gated and loan_type_id not in state.unlocked_loan_types
    ):
        return _reject(
            RejectReason.LOCKED, f"'{loan_type.name}' is not available to you yet"
        )

    # ---- terms -----------------------------------------------------------
    max_amount = loan_type.max_amount_for(game.level)
    if not loan_type.min_amount <= amount <= max_amount:
        return _reject(
            RejectReason.INVALID_INPUT,
            f"Amount must be between {loan_type.min_amount:,.0f} "
            f"and {max_amount:,.0f}",
        )
    if isinstance(duration, bool) or not float(duration).is_integer():
        return _reject(
            RejectReason.INVALID_INPUT, "Duration must be a whole number of months"
        )
    duration = int(duration)
    if not loan_type.min_duration <= duration <= loan_type.max_duration:
        return _reject(
            RejectReason.INVALID_INPUT,
            f"Duration must be between {loan_type.min_duration} "
            f"and {loan_type.max_duration} months",
        )
    if interest_rate <= 0:
        return _reject(RejectReason.INVALID_INPUT, "Interest rate must be positive")
    if loan_type.requires_collateral and not collateral_id:
        return _reject(
            RejectReason.COLLATERAL_REQUIRED,
            f"'{loan_type.name}' requires a property as collateral",
        )

    emi = calculate_emi(amount, interest_rate, duration)
    if emi <= 0.0:
        return _reject(RejectReason.INVALID_EMI, "Could not compute the installment")

    # ---- commit ----------------------------------------------------------
    loan = Loan(
        bank_id=bank.id,
        bank_name=bank.name,
        loan_type_id=loan_type.id,
        loan_type_name=loan_type.name,
        category=loan_type.category,
        original_amount=amount,
        remaining_amount=amount,
        interest_rate=interest_rate,
        duration=duration,
        remaining_months=duration,
        emi_amount=emi,
        total_interest=calculate_total_interest(amount, emi, duration),
        pre_close_amount=calculate_pre_closure_amount(
            amount, cfg.pre_close_penalty_pct
        ),
        start_date=now,
        collateral_id=collateral_id,
        schedule=tuple(generate_amortization_schedule(amount, interest_rate, duration)),
    )
    state.slot = ActiveLoan(loan)
    state.emi_due_timer = 0.0
    game.balance += amount

    rel = seed_relationship(state, bank_id, cfg, now=now)
    _nudge_relationship(rel, cfg.relationship_origination_bonus)

    log.info(
        f"  Loan originated: {loan.loan_type_name} from {loan.bank_name}, "
        f"{amount:,.2f} @ {interest_rate:.2f}% x {duration} months "
        f"(EMI {emi:,.2f})"
    )
    return Origination(loan=loan.snapshot(), credited=amount)


# Installments
# ---------------------------------------------------------------------------
def apply_scheduled_payment(
    state: FinanceState, game: GameState, cfg: Config, *, now: float = 0.0
) -> PaymentOutcome | Rejection:
    """
    Collect one installment from the balance, or record a miss.

    Rule
    ----
        I = B · r,   Pr = EMI − I
        paid   (bal ≥ EMI): bal −= EMI, B −= Pr, n −= 1, score_rel += 1
                            n ≤ 0 ∨ B ≤ 0 → Completed
        missed (bal < EMI): B += f · EMI, k += 1, score_rel −= 5
                            k ≥ 3 → credit −= 30

    `B: Remaining Principal, r: Monthly Rate, n: Remaining Months,
    f: Late Fee Rate, k: Consecutive Misses`
    """
    loan = state.active_loan
    if loan is None:
        return _reject(RejectReason.NO_ACTIVE_LOAN, "No active loan to pay")

    if game.balance + _EPS < loan.emi_amount:
        return _record_miss(state, game, loan, cfg, now=now)
    return _collect(state, game, loan, cfg, now=now)


def pay_emi(
    state: FinanceState, game: GameState, cfg: Config, *, now: float = 0.0
) -> PaymentOutcome | Rejection:
    """
    Player-initiated installment.

    Same success path as :func:`apply_scheduled_payment`, but an unaffordable
    manual payment is simply refused: no late fee, no penalty. A successful
    payment restarts the EMI due timer.
    """
    loan = state.active_loan
    if loan is None:
        return _reject(RejectReason.NO_ACTIVE_LOAN, "No active loan to pay")
    if game.balance + _EPS < loan.emi_amount:
        return _reject(
            RejectReason.INSUFFICIENT_FUNDS,
            f"Insufficient funds: EMI is {loan.emi_amount:,.2f}, "
            f"balance is {game.balance:,.2f}",
        )

    outcome = _collect(state, game, loan, cfg, now=now)
    state.emi_due_timer = 0.0
    return outcome


def _collect(
    state: FinanceState, game: GameState, loan: Loan, cfg: Config, *, now: float
) -> PaymentOutcome:
    interest = loan.remaining_amount * monthly_rate(loan.interest_rate)
    principal = loan.emi_amount - interest

    game.balance = max(0.0, game.balance - loan.emi_amount)
    loan.remaining_amount -= principal
    loan.remaining_months -= 1
    loan.total_interest_paid += interest
    loan.penalty_count = 0
    loan.pre_close_amount = calculate_pre_closure_amount(
        max(0.0, loan.remaining_amount), cfg.pre_close_penalty_pct
    )

    rel = seed_relationship(state, loan.bank_id, cfg, now=now)
    rel.payments_made += 1
    _nudge_relationship(rel, cfg.relationship_payment_bonus)

    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            f"  EMI paid: principal={principal:,.2f}, interest={interest:,.2f}, "
            f"remaining={loan.remaining_amount:,.2f} ({loan.remaining_months} months)"
        )

    record = None
    if loan.remaining_months <= 0 or loan.remaining_amount <= _EPS:
        loan.remaining_amount = 0.0
        loan.remaining_months = max(0, loan.remaining_months)
        loan.pre_close_amount = 0.0
        rel.loans_completed += 1
        _nudge_relationship(rel, cfg.relationship_completion_bonus)
        _nudge_credit(state, cfg.credit_completion_bonus)
        record = _archive(state, loan, Completion.FULL, now=now)
        log.info(
            f"  Loan from {loan.bank_name} fully repaid. "
            f"Credit score now {state.credit_score}"
        )

    return PaymentOutcome(
        success=True,
        amount=loan.emi_amount,
        principal_paid=principal,
        interest_paid=interest,
        remaining_loan=loan.remaining_amount,
        remaining_months=loan.remaining_months,
        completed=record is not None,
        record=record,
        loan=loan.snapshot(),
    )


def _record_miss(
    state: FinanceState, game: GameState, loan: Loan, cfg: Config, *, now: float
) -> PaymentOutcome:
    late_fee = loan.emi_amount * cfg.late_fee_rate
    shortfall = loan.emi_amount - game.balance

    loan.penalty_count += 1
    loan.remaining_amount += late_fee
    loan.pre_close_amount = calculate_pre_closure_amount(
        loan.remaining_amount, cfg.pre_close_penalty_pct
    )

    rel = seed_relationship(state, loan.bank_id, cfg, now=now)
    rel.payments_missed += 1
    _nudge_relationship(rel, -cfg.relationship_missed_penalty)

    multiple = loan.penalty_count >= cfg.missed_payment_threshold
    if multiple:
        _nudge_credit(state, -cfg.credit_missed_penalty)

    log.warning(
        f"  EMI missed: short by {shortfall:,.2f}, late fee {late_fee:,.2f} "
        f"added ({loan.penalty_count} consecutive)"
    )

    return PaymentOutcome(
        success=False,
        amount=loan.emi_amount,
        remaining_loan=loan.remaining_amount,
        remaining_months=loan.remaining_months,
        shortfall=shortfall,
        late_fee=late_fee,
        multiple_missed=multiple,
        loan=loan.snapshot(),
    )


# Pre-closure
# ---------------------------------------------------------------------------
def pre_close_loan(
    state: FinanceState, game: GameState, cfg: Config, *, now: float = 0.0
) -> PreClosure | Rejection:
    """
    Pay off the active loan early.

    Rule
    ----
        due = B · (1 + p/100)
        reject if bal < due
        bal −= due, score_rel += 5, credit += 8

    `B: Remaining Principal, p: Pre-closure Penalty (%)`
    """
    loan = state.active_loan
    if loan is None:
        return _reject(RejectReason.NO_ACTIVE_LOAN, "No active loan to pre-close")

    due = calculate_pre_closure_amount(loan.remaining_amount, cfg.pre_close_penalty_pct)
    if game.balance + _EPS < due:
        return _reject(
            RejectReason.INSUFFICIENT_FUNDS,
            f"Insufficient funds: pre-closure needs {due:,.2f}, "
            f"balance is {game.balance:,.2f}",
        )

    penalty = due - loan.remaining_amount
    game.balance = max(0.0, game.balance - due)
    loan.remaining_amount = 0.0
    loan.pre_close_amount = 0.0

    rel = seed_relationship(state, loan.bank_id, cfg, now=now)
    rel.loans_completed += 1
    _nudge_relationship(rel, cfg.relationship_pre_close_bonus)
    _nudge_credit(state, cfg.credit_pre_close_bonus)

    record = _archive(state, loan, Completion.EARLY, now=now, penalty_paid=penalty)
    log.info(
        f"  Loan from {loan.bank_name} pre-closed for {due:,.2f} "
        f"(penalty {penalty:,.2f})"
    )
    return PreClosure(record=record, amount_paid=due, penalty=penalty)


def _reject(reason: RejectReason, message: str) -> Rejection:
    log.info(f"  Rejected ({reason.value}): {message}")
    return Rejection(reason=reason, message=message)

