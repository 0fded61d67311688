"""
Finance notifications for the UI layer.

A closed set of frozen variants, one per notification. Consumers match on
the class (or on the ``kind`` constant) instead of poking at loosely shaped
dictionaries. Payloads are snapshots: mutating them never touches the live
finance state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Mapping, TypeAlias

from tycoon.catalog import Bank
from tycoon.intents import Intent
from tycoon.lifecycle import RejectReason
from tycoon.state import BankRelationship, Completion, Loan

__all__ = [
    "BankUnlocked",
    "EmiPayment",
    "FinanceEvent",
    "IntentRejected",
    "LoanCompleted",
    "LoanOriginated",
    "LoanPenalty",
    "LoanTypeUnlocked",
    "OpenFinance",
]


@dataclass(slots=True, frozen=True)
class _EventBase:
    kind: ClassVar[str] = ""


@dataclass(slots=True, frozen=True)
class OpenFinance(_EventBase):
    """The finance screen should be rendered with this data."""

    kind: ClassVar[str] = "open-finance"

    banks: tuple[Bank, ...]
    current_loan: Loan | None
    credit_score: int
    relationships: Mapping[str, BankRelationship]


@dataclass(slots=True, frozen=True)
class EmiPayment(_EventBase):
    """Result of a scheduled (``manual=False``) or manual EMI attempt."""

    kind: ClassVar[str] = "emi-payment"

    success: bool
    amount: float
    principal_paid: float
    interest_paid: float
    remaining_loan: float
    remaining_months: int
    balance: float
    manual: bool = False


@dataclass(slots=True, frozen=True)
class LoanOriginated(_EventBase):
    kind: ClassVar[str] = "loan-originated"

    loan: Loan


@dataclass(slots=True, frozen=True)
class LoanCompleted(_EventBase):
    """The active loan left the slot, fully amortized or pre-closed."""

    kind: ClassVar[str] = "loan-completed"

    bank_id: str
    completion: Completion
    relationship: BankRelationship
    credit_score: int


@dataclass(slots=True, frozen=True)
class LoanPenalty(_EventBase):
    """Consecutive missed installments reached the penalty threshold."""

    kind: ClassVar[str] = "loan-penalty"

    message: str
    penalty_amount: float
    credit_score: int


@dataclass(slots=True, frozen=True)
class BankUnlocked(_EventBase):
    kind: ClassVar[str] = "bank-unlocked"

    bank_id: str
    message: str


@dataclass(slots=True, frozen=True)
class LoanTypeUnlocked(_EventBase):
    kind: ClassVar[str] = "loan-type-unlocked"

    loan_type_id: str
    message: str


@dataclass(slots=True, frozen=True)
class IntentRejected(_EventBase):
    """A player intent was refused; ``message`` is user-facing."""

    kind: ClassVar[str] = "intent-rejected"

    intent: Intent
    reason: RejectReason
    message: str


FinanceEvent: TypeAlias = (
    OpenFinance
    | EmiPayment
    | LoanOriginated
    | LoanCompleted
    | LoanPenalty
    | BankUnlocked
    | LoanTypeUnlocked
    | IntentRejected
)
