"""
Player intents – the only mutation entry points the UI may use.

Intents are queued on :class:`~tycoon.finance.Finance` with ``dispatch()``
and processed in FIFO order by the ``process_intents`` system.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

__all__ = ["Intent", "PayEmi", "PreCloseLoan", "TakeLoan", "ViewFinance"]


@dataclass(slots=True, frozen=True)
class TakeLoan:
    bank_id: str
    loan_type_id: str
    amount: float
    interest_rate: float
    duration: int
    collateral_id: str | None = None


@dataclass(slots=True, frozen=True)
class PayEmi:
    """Pay the next installment now."""


@dataclass(slots=True, frozen=True)
class PreCloseLoan:
    """Pay off the active loan early, penalty included."""


@dataclass(slots=True, frozen=True)
class ViewFinance:
    """Open the finance screen."""


Intent: TypeAlias = TakeLoan | PayEmi | PreCloseLoan | ViewFinance
