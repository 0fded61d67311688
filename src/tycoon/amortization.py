# src/tycoon/amortization.py
"""
Amortization engine – pure loan arithmetic.

Every function here is stateless: no game state is read or written, so the
lifecycle, the catalog quotes and the UI can all call them freely.

Rule
----
    EMI = P · r · (1 + r)^n / ((1 + r)^n − 1)
    r   = annual_rate_pct / 12 / 100

`P: Principal, r: Monthly Rate, n: Number of Monthly Installments`
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from tycoon.helpers import floor_at_zero
from tycoon.logging import getLogger

log = getLogger(__name__)

CREDIT_SCORE_MIN = 300
CREDIT_SCORE_MAX = 850


@dataclass(slots=True, frozen=True)
class ScheduleEntry:
    """One month of an amortization schedule."""

    month: int
    emi: float
    principal_paid: float
    interest_paid: float
    remaining_balance: float


def monthly_rate(annual_rate_pct: float) -> float:
    """Convert an annual percentage rate into a monthly decimal rate."""
    return annual_rate_pct / 12.0 / 100.0


def calculate_emi(principal: float, annual_rate_pct: float, months: int) -> float:
    """
    Equated monthly installment for a fully amortizing loan.

    Returns
    -------
    float
        The installment, or ``0.0`` when any input is non-positive or the
        result is not finite. Callers must treat ``0.0`` as a rejection.
    """
    if principal <= 0 or annual_rate_pct <= 0 or months <= 0:
        log.warning(
            f"  Cannot compute EMI: principal={principal}, "
            f"rate={annual_rate_pct}%, months={months}"
        )
        return 0.0

    r = monthly_rate(annual_rate_pct)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        growth = np.power(1.0 + r, months, dtype=np.float64)
        emi = principal * r * growth / (growth - 1.0)

    if not np.isfinite(emi) or emi <= 0.0:
        log.warning(f"  EMI computation produced an invalid value: {emi}")
        return 0.0
    return float(emi)


def calculate_total_interest(principal: float, emi: float, months: int) -> float:
    """Interest paid over the full term: ``emi · months − principal``."""
    return emi * months - principal


def calculate_total_amount(principal: float, emi: float, months: int) -> float:
    """Total repaid over the full term: ``emi · months``."""
    return emi * months


def generate_amortization_schedule(
    principal: float, annual_rate_pct: float, months: int
) -> list[ScheduleEntry]:
    """
    Month-by-month principal/interest split.

    The balance path is computed in closed form,

        B_k = P·g^k − EMI·(g^k − 1)/r,   g = 1 + r

    which is identical to iterating ``B_k = B_{k-1} − (EMI − r·B_{k-1})``.
    Balances are floored at zero so rounding drift never leaves a residual.
    An empty list is returned when the EMI cannot be computed.
    """
    emi = calculate_emi(principal, annual_rate_pct, months)
    if emi <= 0.0:
        return []

    r = monthly_rate(annual_rate_pct)
    k = np.arange(1, months + 1, dtype=np.int64)
    growth = np.power(1.0 + r, k)

    balance = principal * growth - emi * (growth - 1.0) / r
    opening = np.concatenate(([principal], balance[:-1]))
    interest = opening * r
    principal_paid = emi - interest
    floor_at_zero(balance)

    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            f"  Schedule for {principal:,.2f} @ {annual_rate_pct:.2f}% x {months}: "
            f"EMI={emi:,.2f}, total interest={interest.sum():,.2f}"
        )

    return [
        ScheduleEntry(
            month=int(m),
            emi=emi,
            principal_paid=float(p),
            interest_paid=float(i),
            remaining_balance=float(b),
        )
        for m, p, i, b in zip(k, principal_paid, interest, balance)
    ]


def credit_score_adjustment(credit_score: int) -> float:
    """
    Rate adjustment (percentage points) implied by a credit score.

    Rule
    ----
        < 580 → +2,  < 670 → +1,  < 740 → 0,  < 800 → −0.5,  else −1
    """
    if credit_score < 580:
        return 2.0
    if credit_score < 670:
        return 1.0
    if credit_score < 740:
        return 0.0
    if credit_score < 800:
        return -0.5
    return -1.0


def calculate_adjusted_interest_rate(
    base_rate: float,
    player_level: int,
    credit_score: int,
    relationship_score: float,
    relationship_discount: float,
    *,
    level_discount: float = 0.2,
    floor: float = 3.0,
) -> float:
    """
    Personalised annual rate offered to the player.

    Rule
    ----
        rate = base − level·λ − score_rel·δ + adj(credit)
        rate = max(rate, floor)

    `λ: Level Discount, δ: Relationship Discount per Point`
    """
    rate = (
        base_rate
        - player_level * level_discount
        - relationship_score * relationship_discount
        + credit_score_adjustment(credit_score)
    )
    return max(floor, rate)


def calculate_pre_closure_amount(
    remaining_principal: float, penalty_pct: float = 2.5
) -> float:
    """Early payoff amount: outstanding principal plus the penalty."""
    return remaining_principal * (1.0 + penalty_pct / 100.0)


# Affordability
# ---------------------------------------------------------------------------
def debt_to_income_ratio(monthly_debt: float, monthly_income: float) -> float:
    """Share of monthly income consumed by debt service (``inf`` if no income)."""
    if monthly_income <= 0:
        return float("inf")
    return monthly_debt / monthly_income


def max_affordable_loan(
    monthly_income: float,
    annual_rate_pct: float,
    months: int,
    *,
    max_dti: float = 0.4,
    existing_monthly_debt: float = 0.0,
) -> float:
    """
    Largest principal whose EMI fits the debt-to-income budget.

    Rule
    ----
        EMI_max = I·dti − D
        P_max   = EMI_max · ((1 + r)^n − 1) / (r · (1 + r)^n)
    """
    budget = monthly_income * max_dti - existing_monthly_debt
    if budget <= 0 or annual_rate_pct <= 0 or months <= 0:
        return 0.0
    r = monthly_rate(annual_rate_pct)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        growth = np.power(1.0 + r, months, dtype=np.float64)
        principal = budget * (growth - 1.0) / (r * growth)
    return float(principal) if np.isfinite(principal) else 0.0


def loan_to_value_ratio(loan_amount: float, collateral_value: float) -> float:
    """Loan amount over collateral value (``inf`` without collateral value)."""
    if collateral_value <= 0:
        return float("inf")
    return loan_amount / collateral_value
