"""
Configuration dataclass for finance parameters.

This module defines the Config dataclass, which groups all finance rule
parameters in one immutable object. Config instances are created by
Finance.init() after merging defaults, user config, and kwargs.

Design Notes
------------
- Immutable (frozen=True) to prevent accidental modification
- Memory-efficient (slots=True)
- Simple dataclass, no methods - validation happens in ConfigValidator

See Also
--------
ConfigValidator : Centralized validation for configuration parameters
tycoon.finance.Finance.init : Creates Config from merged parameters
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from tycoon.catalog import UnlockRule


@dataclass(slots=True, frozen=True)
class StarterLoan:
    """Loan granted automatically to a brand-new, penniless player."""

    bank_id: str
    loan_type_id: str
    amount: float
    duration: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StarterLoan:
        return cls(
            bank_id=str(data["bank_id"]),
            loan_type_id=str(data["loan_type_id"]),
            amount=float(data["amount"]),
            duration=int(data["duration"]),
        )


@dataclass(slots=True, frozen=True)
class Config:
    """
    Immutable configuration for the finance rules.

    Parameters
    ----------
    emi_interval : float
        Game time (ms) between automatic installments.
    late_fee_rate : float
        Share of the EMI added to the outstanding principal on a missed
        installment (0 to 1).
    pre_close_penalty_pct : float
        Early payoff surcharge in percent of the outstanding principal.
    min_interest_rate : float
        Floor for personalised annual rates (percent).
    level_rate_discount : float
        Annual rate reduction per player level (percentage points).
    missed_payment_threshold : int
        Consecutive misses at which the credit-score penalty kicks in.
    relationship_init : int
        Score seeded when a bank is unlocked (0 to 100).
    relationship_origination_bonus, relationship_payment_bonus,
    relationship_completion_bonus, relationship_pre_close_bonus : int
        Relationship gains on those lifecycle transitions.
    relationship_missed_penalty : int
        Relationship loss on a missed installment.
    credit_score_init : int
        Starting credit score (300 to 850).
    credit_completion_bonus, credit_pre_close_bonus : int
        Credit gains on full-term and early completion.
    credit_missed_penalty : int
        Credit loss once misses reach ``missed_payment_threshold``.
    initial_banks : tuple[str, ...]
        Banks unlocked at game start.
    unlocks : tuple[UnlockRule, ...]
        Progression table.
    starter_loan : StarterLoan or None, optional
        Automatic first loan; None disables it.

    Examples
    --------
    >>> import tycoon as ty
    >>> fin = ty.Finance.init()
    >>> fin.config.late_fee_rate
    0.02

    Notes
    -----
    Config is a simple data container with no validation logic. All
    validation happens in ConfigValidator before Config creation.
    """

    # Tick accounting
    emi_interval: float

    # Pricing
    late_fee_rate: float
    pre_close_penalty_pct: float
    min_interest_rate: float
    level_rate_discount: float
    missed_payment_threshold: int

    # Relationship deltas
    relationship_init: int
    relationship_origination_bonus: int
    relationship_payment_bonus: int
    relationship_completion_bonus: int
    relationship_pre_close_bonus: int
    relationship_missed_penalty: int

    # Credit-score deltas
    credit_score_init: int
    credit_completion_bonus: int
    credit_pre_close_bonus: int
    credit_missed_penalty: int

    # Progression
    initial_banks: tuple[str, ...] = ("city_bank",)
    unlocks: tuple[UnlockRule, ...] = ()

    # Optional parameters
    starter_loan: StarterLoan | None = None

    @classmethod
    def from_mapping(cls, p: Mapping[str, Any]) -> Config:
        """Build a Config from an already validated parameter mapping."""
        starter = p.get("starter_loan")
        return cls(
            emi_interval=float(p["emi_interval"]),
            late_fee_rate=float(p["late_fee_rate"]),
            pre_close_penalty_pct=float(p["pre_close_penalty_pct"]),
            min_interest_rate=float(p["min_interest_rate"]),
            level_rate_discount=float(p["level_rate_discount"]),
            missed_payment_threshold=int(p["missed_payment_threshold"]),
            relationship_init=int(p["relationship_init"]),
            relationship_origination_bonus=int(p["relationship_origination_bonus"]),
            relationship_payment_bonus=int(p["relationship_payment_bonus"]),
            relationship_completion_bonus=int(p["relationship_completion_bonus"]),
            relationship_pre_close_bonus=int(p["relationship_pre_close_bonus"]),
            relationship_missed_penalty=int(p["relationship_missed_penalty"]),
            credit_score_init=int(p["credit_score_init"]),
            credit_completion_bonus=int(p["credit_completion_bonus"]),
            credit_pre_close_bonus=int(p["credit_pre_close_bonus"]),
            credit_missed_penalty=int(p["credit_missed_penalty"]),
            initial_banks=tuple(p.get("initial_banks", ())),
            unlocks=tuple(UnlockRule.from_mapping(u) for u in p.get("unlocks", ())),
            starter_loan=StarterLoan.from_mapping(starter) if starter else None,
        )
