"""
Reusable builders for finance records in unit / property tests.

* They construct the **full** dataclasses from `tycoon.state` / `tycoon.config`.
* All fields are initialised with small, deterministic defaults.
* You can override any field via keyword arguments.

Example
-------
>>> loan  = mock_loan(remaining_amount=5_000.0, emi_amount=5_100.0)
>>> state = mock_state(loan=loan)
>>> game  = mock_game(balance=5_100.0)
"""

from __future__ import annotations

from typing import Any

from tycoon.amortization import calculate_emi, calculate_pre_closure_amount
from tycoon.catalog import BankCatalog, LoanCategory
from tycoon.config import Config
from tycoon.finance import _package_defaults
from tycoon.state import (
    NO_LOAN,
    ActiveLoan,
    BankRelationship,
    FinanceState,
    GameState,
    Loan,
)

# ───────────────────────── default dictionaries ────────────────────────── #


def _loan_defaults() -> dict[str, Any]:
    amount, rate, months = 100_000.0, 8.5, 12
    emi = calculate_emi(amount, rate, months)
    return dict(
        bank_id="city_bank",
        bank_name="City Bank",
        loan_type_id="quick_loan",
        loan_type_name="Quick Loan",
        category=LoanCategory.STARTER,
        original_amount=amount,
        remaining_amount=amount,
        interest_rate=rate,
        duration=months,
        remaining_months=months,
        emi_amount=emi,
        total_interest=emi * months - amount,
        pre_close_amount=calculate_pre_closure_amount(amount),
        start_date=0.0,
    )


# ───────────────────────────── builders ───────────────────────────────── #


def mock_config(**overrides: Any) -> Config:
    """Config built from the packaged defaults, with *overrides* applied."""
    params = _package_defaults()
    params.update(overrides)
    return Config.from_mapping(params)


def mock_catalog() -> BankCatalog:
    return BankCatalog.default()


def mock_loan(**overrides: Any) -> Loan:
    cfg = _loan_defaults()
    cfg.update(overrides)
    return Loan(**cfg)


def mock_relationship(score: int = 50, **overrides: Any) -> BankRelationship:
    return BankRelationship(score=score, first_unlocked=0.0, **overrides)


def mock_state(*, loan: Loan | None = None, **overrides: Any) -> FinanceState:
    """
    FinanceState with City Bank unlocked and a relationship seeded at 50.

    Pass ``loan`` to put it in the active slot.
    """
    cfg: dict[str, Any] = dict(
        unlocked_banks={"city_bank"},
        unlocked_loan_types={
            "quick_loan",
            "property_loan",
            "starter_loan",
            "growth_loan",
            "enterprise_loan",
            "bridge_loan",
            "premium_loan",
        },
        credit_score=750,
        relationships={"city_bank": mock_relationship()},
    )
    cfg.update(overrides)
    state = FinanceState(**cfg)
    state.slot = ActiveLoan(loan) if loan is not None else NO_LOAN
    return state


def mock_game(**overrides: Any) -> GameState:
    cfg: dict[str, Any] = dict(balance=0.0, level=1, property_count=0)
    cfg.update(overrides)
    return GameState(**cfg)
