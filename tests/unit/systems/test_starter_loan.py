"""Unit tests for the starter-loan system."""

import logging

import pytest

from tycoon.amortization import calculate_adjusted_interest_rate
from tycoon.events import LoanOriginated
from tycoon.finance import Finance
from tycoon.state import ActiveLoan
from tycoon.systems import GrantStarterLoan
from tests.helpers.factories import mock_loan

STARTER = {
    "bank_id": "city_bank",
    "loan_type_id": "quick_loan",
    "amount": 100_000,
    "duration": 12,
}


@pytest.fixture
def starter_fin() -> Finance:
    return Finance.init(starter_loan=STARTER)


def test_disabled_when_null(fin):
    GrantStarterLoan().execute(fin)
    assert fin.active_loan is None
    assert fin.drain_events() == []


def test_fresh_game_gets_starter_loan_by_default():
    fin = Finance.init()
    fin.step(16.0)

    loan = fin.active_loan
    assert loan is not None
    assert (loan.bank_id, loan.loan_type_id) == ("city_bank", "quick_loan")
    assert loan.original_amount == 100_000.0
    assert loan.duration == 12
    assert fin.balance == 100_000.0
    assert [e.kind for e in fin.drain_events()] == ["loan-originated"]


def test_grants_on_fresh_game(starter_fin):
    GrantStarterLoan().execute(starter_fin)

    loan = starter_fin.active_loan
    assert loan is not None
    assert loan.original_amount == 100_000.0
    assert loan.duration == 12
    assert starter_fin.balance == 100_000.0
    (event,) = starter_fin.drain_events()
    assert isinstance(event, LoanOriginated)


def test_uses_personalised_rate(starter_fin):
    GrantStarterLoan().execute(starter_fin)

    expected = calculate_adjusted_interest_rate(8.5, 1, 750, 50, 0.01)
    assert starter_fin.active_loan.interest_rate == pytest.approx(expected)


def test_checked_only_once(starter_fin):
    system = GrantStarterLoan()
    starter_fin.game.balance = 10.0
    system.execute(starter_fin)
    assert system.checked

    starter_fin.game.balance = 0.0
    system.execute(starter_fin)
    assert starter_fin.active_loan is None


@pytest.mark.parametrize("setup", ["balance", "active_loan", "history"])
def test_not_granted_to_established_player(starter_fin, setup):
    if setup == "balance":
        starter_fin.game.balance = 1.0
    elif setup == "active_loan":
        starter_fin.state.slot = ActiveLoan(mock_loan(original_amount=5.0))
    else:
        starter_fin.state.loan_history.append(object())

    GrantStarterLoan().execute(starter_fin)

    assert starter_fin.drain_events() == []
    if setup != "active_loan":
        assert starter_fin.active_loan is None


def test_refused_starter_is_logged_not_raised(caplog):
    """A starter product the player cannot take is refused quietly."""
    fin = Finance.init(
        starter_loan={**STARTER, "loan_type_id": "property_loan", "amount": 60_000}
    )
    with caplog.at_level(logging.WARNING, logger="tycoon"):
        GrantStarterLoan().execute(fin)

    assert fin.active_loan is None
    assert "Starter loan refused" in caplog.text


def test_first_tick_grants_through_pipeline(starter_fin):
    starter_fin.step(16.0)
    assert starter_fin.active_loan is not None
    starter_fin.step(16.0)
    assert len([e for e in starter_fin.drain_events() if e.kind == "loan-originated"]) == 1
