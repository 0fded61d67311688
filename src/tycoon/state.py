"""
Finance state containers.

These are plain *state* records. The only code allowed to mutate the loan
slot, the loan history, bank relationships and the credit score lives in
:mod:`tycoon.lifecycle` (plus the unlock bookkeeping in :mod:`tycoon.systems`);
everything else reads them through the :class:`~tycoon.finance.Finance`
facade's read-only views.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TypeAlias

from tycoon.amortization import ScheduleEntry
from tycoon.catalog import LoanCategory


class Completion(str, Enum):
    """How a loan left the active slot."""

    FULL = "full"
    EARLY = "early"


@dataclass(slots=True)
class Loan:
    """
    A loan contract, active or archived.

    ``interest_rate`` and ``emi_amount`` are fixed at origination.
    ``remaining_amount`` moves down with each paid installment and up with
    late fees; ``pre_close_amount`` is kept in sync with it.
    """

    bank_id: str
    bank_name: str
    loan_type_id: str
    loan_type_name: str
    category: LoanCategory
    original_amount: float
    remaining_amount: float
    interest_rate: float  # annual %
    duration: int  # months
    remaining_months: int
    emi_amount: float
    total_interest: float  # projected over the full term
    pre_close_amount: float
    start_date: float
    total_interest_paid: float = 0.0
    penalty_count: int = 0  # consecutive missed installments
    collateral_id: str | None = None
    schedule: tuple[ScheduleEntry, ...] = ()

    def snapshot(self) -> Loan:
        """Return an independent copy safe to hand to UI consumers."""
        return replace(self)


@dataclass(slots=True, frozen=True)
class LoanRecord:
    """Archived loan in the append-only history."""

    loan: Loan
    completion: Completion
    closed_at: float
    penalty_paid: float = 0.0


@dataclass(slots=True)
class BankRelationship:
    """Payment track record with a single bank."""

    score: int
    first_unlocked: float
    payments_made: int = 0
    payments_missed: int = 0
    loans_completed: int = 0

    @property
    def tier(self) -> str:
        """Relationship label shown next to the bank."""
        if self.score >= 90:
            return "Preferred Partner"
        if self.score >= 70:
            return "Valued Client"
        if self.score >= 50:
            return "Established"
        if self.score >= 30:
            return "Developing"
        return "New Client"

    def snapshot(self) -> BankRelationship:
        return replace(self)


# ── loan slot: explicit tagged variant ───────────────────────────────────
@dataclass(slots=True, frozen=True)
class NoLoan:
    """The player has no active loan."""


@dataclass(slots=True, frozen=True)
class ActiveLoan:
    """The player is servicing ``loan``."""

    loan: Loan


LoanSlot: TypeAlias = NoLoan | ActiveLoan

NO_LOAN = NoLoan()


@dataclass(slots=True)
class FinanceState:
    """
    Everything the finance subsystem owns for one player.
    """

    # ── progression ──────────────────────────────────────────────────────
    unlocked_banks: set[str]
    unlocked_loan_types: set[str]

    # ── scores ───────────────────────────────────────────────────────────
    credit_score: int
    relationships: dict[str, BankRelationship] = field(default_factory=dict)

    # ── loans ────────────────────────────────────────────────────────────
    slot: LoanSlot = NO_LOAN
    loan_history: list[LoanRecord] = field(default_factory=list)

    # ── tick accounting ──────────────────────────────────────────────────
    emi_due_timer: float = 0.0
    emi_interval: float = 30_000.0  # ms between automatic installments
    last_checked_level: int = 1
    last_property_count: int = 0

    @property
    def active_loan(self) -> Loan | None:
        """The loan in the active slot, if any."""
        if isinstance(self.slot, ActiveLoan):
            return self.slot.loan
        return None


@dataclass(slots=True)
class GameState:
    """
    Slice of the surrounding game the finance core reads and debits.

    Owned by the outer simulation; property and market systems update
    ``level`` and ``property_count``.
    """

    balance: float = 0.0
    level: int = 1
    property_count: int = 0
