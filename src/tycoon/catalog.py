# src/tycoon/catalog.py
"""
Bank catalog – static bank / loan-type data and the availability filter.

The catalog never tracks per-player progress. It answers "which of the
already-unlocked banks and loan types may this player see right now?";
deciding *when* something unlocks is the job of the progression systems,
driven by the declarative :class:`UnlockRule` table.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Mapping

import yaml

from tycoon.amortization import (
    calculate_adjusted_interest_rate,
    calculate_emi,
    calculate_total_amount,
    calculate_total_interest,
)
from tycoon.logging import getLogger

if TYPE_CHECKING:
    from tycoon.state import BankRelationship

__all__ = [
    "Bank",
    "BankCatalog",
    "LoanCategory",
    "LoanQuote",
    "LoanType",
    "UnlockRule",
    "gated_loan_types",
    "get_available_banks",
    "quote_loan",
    "relationship_rate_discount",
]

log = getLogger(__name__)


class LoanCategory(str, Enum):
    STARTER = "starter"
    BUSINESS = "business"
    ACQUISITION = "acquisition"
    DEVELOPMENT = "development"
    PREMIUM = "premium"


@dataclass(slots=True, frozen=True)
class LoanType:
    """
    A loan product offered by a bank.

    Parameters
    ----------
    id : str
        Product identifier, also the key used in ``unlocked_loan_types``.
    name : str
        Display name.
    category : LoanCategory
        Product family.
    min_level : int
        Lowest player level that may see the product.
    min_amount, max_amount : float
        Amount bounds at level 1.
    max_amount_per_level : float
        Extra headroom added to ``max_amount`` per level above 1.
    base_rate : float
        Annual interest rate in percent before personal adjustments.
    min_duration, max_duration : int
        Duration bounds in months.
    requires_collateral : bool
        Whether origination needs a ``collateral_id``.
    relationship_discount : float
        Rate reduction (percentage points) per relationship point.
    """

    id: str
    name: str
    category: LoanCategory
    min_level: int
    min_amount: float
    max_amount: float
    base_rate: float
    min_duration: int
    max_duration: int
    max_amount_per_level: float = 0.0
    requires_collateral: bool = False
    relationship_discount: float = 0.0

    def max_amount_for(self, level: int) -> float:
        """Upper amount bound at player ``level``."""
        return self.max_amount + self.max_amount_per_level * max(0, level - 1)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LoanType:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            category=LoanCategory(data["category"]),
            min_level=int(data.get("min_level", 1)),
            min_amount=float(data["min_amount"]),
            max_amount=float(data["max_amount"]),
            max_amount_per_level=float(data.get("max_amount_per_level", 0.0)),
            base_rate=float(data["base_rate"]),
            min_duration=int(data["min_duration"]),
            max_duration=int(data["max_duration"]),
            requires_collateral=bool(data.get("requires_collateral", False)),
            relationship_discount=float(data.get("relationship_discount", 0.0)),
        )


@dataclass(slots=True, frozen=True)
class Bank:
    """A lender and its ordered product list."""

    id: str
    name: str
    unlock_level: int
    min_relationship: int
    loan_types: tuple[LoanType, ...]
    rating: int = 3
    icon: str = "university"

    def get_loan_type(self, loan_type_id: str) -> LoanType | None:
        for lt in self.loan_types:
            if lt.id == loan_type_id:
                return lt
        return None

    def with_loan_types(self, loan_types: Iterable[LoanType]) -> Bank:
        """Copy of this bank offering only ``loan_types``."""
        return Bank(
            id=self.id,
            name=self.name,
            unlock_level=self.unlock_level,
            min_relationship=self.min_relationship,
            loan_types=tuple(loan_types),
            rating=self.rating,
            icon=self.icon,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Bank:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            unlock_level=int(data.get("unlock_level", 1)),
            min_relationship=int(data.get("min_relationship", 0)),
            loan_types=tuple(LoanType.from_mapping(lt) for lt in data["loan_types"]),
            rating=int(data.get("rating", 3)),
            icon=str(data.get("icon", "university")),
        )


# Catalog
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class BankCatalog:
    """Immutable, ordered collection of banks."""

    banks: tuple[Bank, ...]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> BankCatalog:
        from tycoon.config import ConfigValidator

        ConfigValidator.validate_catalog(data)
        return cls(banks=tuple(Bank.from_mapping(b) for b in data["banks"]))

    @classmethod
    def from_yaml(cls, path: str | Path) -> BankCatalog:
        p = Path(path)
        with p.open("rt", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, Mapping):
            raise TypeError(f"catalog root must be mapping, got {type(data)!r}")
        return cls.from_mapping(data)

    @classmethod
    def default(cls) -> BankCatalog:
        """Load the packaged ``tycoon/banks.yml``."""
        txt = resources.files("tycoon").joinpath("banks.yml").read_text()
        return cls.from_mapping(yaml.safe_load(txt) or {})

    def get_bank(self, bank_id: str) -> Bank | None:
        for bank in self.banks:
            if bank.id == bank_id:
                return bank
        return None

    def get_loan_type(self, bank_id: str, loan_type_id: str) -> LoanType | None:
        bank = self.get_bank(bank_id)
        return bank.get_loan_type(loan_type_id) if bank is not None else None

    def bank_ids(self) -> list[str]:
        return [b.id for b in self.banks]

    def loan_type_ids(self) -> set[str]:
        return {lt.id for b in self.banks for lt in b.loan_types}

    def __len__(self) -> int:
        return len(self.banks)


def get_available_banks(
    catalog: BankCatalog,
    unlocked_bank_ids: Iterable[str],
    player_level: int,
    relationships: Mapping[str, BankRelationship],
    *,
    unlocked_loan_types: Iterable[str] | None = None,
) -> list[Bank]:
    """
    Banks (and their loan types) the player may currently see.

    Rule
    ----
        bank visible  ⇔ unlocked ∧ level ≥ unlock_level
                        ∧ (no relationship ∨ score ≥ min_relationship)
        type visible  ⇔ min_level ≤ level
                        ∧ (unlocked_loan_types is None ∨ id ∈ unlocked_loan_types)

    Catalog order is preserved. The function is pure: identical inputs give
    identical output.
    """
    unlocked = set(unlocked_bank_ids)
    allowed_types = set(unlocked_loan_types) if unlocked_loan_types is not None else None

    available: list[Bank] = []
    for bank in catalog.banks:
        if bank.id not in unlocked or player_level < bank.unlock_level:
            continue
        rel = relationships.get(bank.id)
        if rel is not None and rel.score < bank.min_relationship:
            continue
        visible = [
            lt
            for lt in bank.loan_types
            if lt.min_level <= player_level
            and (allowed_types is None or lt.id in allowed_types)
        ]
        available.append(bank.with_loan_types(visible))

    log.debug(
        f"  {len(available)}/{len(catalog)} banks available at level {player_level}"
    )
    return available


# Offers
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class LoanQuote:
    """What an offer would cost the player, before committing."""

    bank_id: str
    loan_type_id: str
    amount: float
    duration: int
    interest_rate: float
    emi: float
    total_interest: float
    total_amount: float


def quote_loan(
    bank: Bank,
    loan_type: LoanType,
    *,
    amount: float,
    duration: int,
    player_level: int,
    credit_score: int,
    relationship: BankRelationship | None = None,
    level_discount: float = 0.2,
    min_rate: float = 3.0,
) -> LoanQuote:
    """Price an offer with the player's personalised rate."""
    rate = calculate_adjusted_interest_rate(
        loan_type.base_rate,
        player_level,
        credit_score,
        relationship.score if relationship is not None else 0,
        loan_type.relationship_discount,
        level_discount=level_discount,
        floor=min_rate,
    )
    emi = calculate_emi(amount, rate, duration)
    return LoanQuote(
        bank_id=bank.id,
        loan_type_id=loan_type.id,
        amount=amount,
        duration=duration,
        interest_rate=rate,
        emi=emi,
        total_interest=calculate_total_interest(amount, emi, duration),
        total_amount=calculate_total_amount(amount, emi, duration),
    )


def relationship_rate_discount(bank: Bank, relationship: BankRelationship) -> float:
    """Best rate discount (percentage points) the relationship earns at ``bank``."""
    if not bank.loan_types:
        return 0.0
    best = max(lt.relationship_discount for lt in bank.loan_types)
    return relationship.score * best


# Unlock table
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class UnlockRule:
    """
    One row of the progression table.

    ``trigger`` is ``"level"`` (player level reached ``threshold``) or
    ``"properties"`` (owned property count reached ``threshold``). Exactly one
    of ``bank`` / ``loan_type`` names what gets unlocked.
    """

    trigger: str
    threshold: int
    bank: str | None = None
    loan_type: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> UnlockRule:
        return cls(
            trigger=str(data["trigger"]),
            threshold=int(data["threshold"]),
            bank=data.get("bank"),
            loan_type=data.get("loan_type"),
        )


def gated_loan_types(rules: Iterable[UnlockRule]) -> set[str]:
    """Loan-type ids that start locked because some rule unlocks them."""
    return {r.loan_type for r in rules if r.loan_type is not None}
