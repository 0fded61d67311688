# tests/__init__.py

from tests.helpers.factories import mock_config, mock_game, mock_loan, mock_state
from tests.helpers.invariants import assert_basic_invariants

__all__ = [
    "assert_basic_invariants",
    "mock_config",
    "mock_game",
    "mock_loan",
    "mock_state",
]
