"""Tests for the pure amortization engine."""

import logging
import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tycoon.amortization import (
    calculate_adjusted_interest_rate,
    calculate_emi,
    calculate_pre_closure_amount,
    calculate_total_amount,
    calculate_total_interest,
    credit_score_adjustment,
    debt_to_income_ratio,
    generate_amortization_schedule,
    loan_to_value_ratio,
    max_affordable_loan,
    monthly_rate,
)

principal_strategy = st.floats(min_value=1_000.0, max_value=5_000_000.0)
rate_strategy = st.floats(min_value=0.5, max_value=30.0)
months_strategy = st.integers(min_value=1, max_value=120)


class TestCalculateEmi:
    def test_reference_loan(self):
        """100 000 at 8.5 % over 12 months: monthly rate ≈ 0.7083 %, EMI ≈ 8722."""
        assert monthly_rate(8.5) == pytest.approx(0.0070833, rel=1e-4)
        assert calculate_emi(100_000, 8.5, 12) == pytest.approx(8722.0, abs=1.0)

    def test_single_month_is_principal_plus_one_month_interest(self):
        emi = calculate_emi(10_000, 12.0, 1)
        assert emi == pytest.approx(10_100.0)

    @pytest.mark.parametrize(
        "principal, rate, months",
        [(0, 8.5, 12), (-1, 8.5, 12), (1000, 0, 12), (1000, -2, 12), (1000, 8.5, 0)],
    )
    def test_invalid_inputs_return_zero(self, principal, rate, months, caplog):
        """Non-positive inputs give the 0.0 sentinel and a warning."""
        with caplog.at_level(logging.WARNING, logger="tycoon"):
            assert calculate_emi(principal, rate, months) == 0.0
        assert "Cannot compute EMI" in caplog.text

    def test_non_finite_result_returns_zero(self):
        assert calculate_emi(1e308, 1e6, 1200) == 0.0

    @given(p=principal_strategy, r=rate_strategy, n=months_strategy)
    @settings(max_examples=200, deadline=None)
    def test_positive_for_valid_inputs(self, p, r, n):
        emi = calculate_emi(p, r, n)
        assert emi > 0
        # An amortizing installment always covers the straight-line share
        assert emi >= p / n - 1e-6


class TestTotals:
    def test_total_interest_and_amount(self):
        assert calculate_total_interest(1000, 100, 12) == 200
        assert calculate_total_amount(1000, 100, 12) == 1200


class TestSchedule:
    def test_reference_schedule_ends_at_zero(self):
        schedule = generate_amortization_schedule(100_000, 8.5, 12)
        assert len(schedule) == 12
        assert [e.month for e in schedule] == list(range(1, 13))
        assert schedule[-1].remaining_balance == pytest.approx(0.0, abs=1.0)

    def test_first_month_split(self):
        first = generate_amortization_schedule(100_000, 12.0, 12)[0]
        assert first.interest_paid == pytest.approx(1000.0)
        assert first.principal_paid == pytest.approx(first.emi - 1000.0)
        assert first.remaining_balance == pytest.approx(100_000 - first.principal_paid)

    def test_invalid_inputs_give_empty_schedule(self):
        assert generate_amortization_schedule(0, 8.5, 12) == []
        assert generate_amortization_schedule(1000, 8.5, 0) == []

    def test_recomputed_on_each_call(self):
        a = generate_amortization_schedule(50_000, 7.0, 24)
        b = generate_amortization_schedule(50_000, 7.0, 24)
        assert a == b
        assert a is not b

    @given(p=principal_strategy, r=rate_strategy, n=months_strategy)
    @settings(max_examples=200, deadline=None)
    def test_schedule_properties(self, p, r, n):
        """Exactly n rows, balance never negative and ends within 1 unit of 0."""
        schedule = generate_amortization_schedule(p, r, n)
        assert len(schedule) == n
        assert all(e.remaining_balance >= 0 for e in schedule)
        assert schedule[-1].remaining_balance <= 1.0
        paid = sum(e.principal_paid for e in schedule)
        assert paid == pytest.approx(p, rel=1e-6, abs=1.0)


class TestRateAdjustment:
    @pytest.mark.parametrize(
        "score, adj",
        [(300, 2.0), (579, 2.0), (580, 1.0), (669, 1.0), (670, 0.0), (739, 0.0),
         (740, -0.5), (799, -0.5), (800, -1.0), (850, -1.0)],
    )
    def test_credit_score_bands(self, score, adj):
        assert credit_score_adjustment(score) == adj

    def test_adjusted_rate(self):
        """8.5 − 2·0.2 − 50·0.01 + (−0.5) = 7.1."""
        rate = calculate_adjusted_interest_rate(8.5, 2, 750, 50, 0.01)
        assert rate == pytest.approx(7.1)

    def test_adjusted_rate_is_floored(self):
        rate = calculate_adjusted_interest_rate(5.0, 20, 850, 100, 0.025)
        assert rate == 3.0

    def test_custom_floor_and_level_discount(self):
        rate = calculate_adjusted_interest_rate(
            10.0, 5, 700, 0, 0.0, level_discount=0.5, floor=8.0
        )
        assert rate == 8.0


class TestPreClosure:
    def test_default_penalty(self):
        assert calculate_pre_closure_amount(10_000) == pytest.approx(10_250.0)

    def test_custom_penalty(self):
        assert calculate_pre_closure_amount(10_000, 5.0) == pytest.approx(10_500.0)


class TestAffordability:
    def test_debt_to_income(self):
        assert debt_to_income_ratio(400, 1000) == pytest.approx(0.4)
        assert math.isinf(debt_to_income_ratio(400, 0))

    def test_max_affordable_loan_inverts_emi(self):
        principal = max_affordable_loan(10_000, 8.5, 12)
        assert calculate_emi(principal, 8.5, 12) == pytest.approx(4_000.0)

    def test_existing_debt_reduces_headroom(self):
        full = max_affordable_loan(10_000, 8.5, 12)
        partial = max_affordable_loan(10_000, 8.5, 12, existing_monthly_debt=1_000)
        assert 0 < partial < full

    def test_no_headroom(self):
        assert max_affordable_loan(1_000, 8.5, 12, existing_monthly_debt=500) == 0.0

    def test_loan_to_value(self):
        assert loan_to_value_ratio(80_000, 100_000) == pytest.approx(0.8)
        assert math.isinf(loan_to_value_ratio(80_000, 0))
