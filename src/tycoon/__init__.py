"""
Tycoon Engine - finance core for a tick-driven property-tycoon game
====================================================================

Tycoon Engine models the banking side of a property-tycoon game: loan
origination, amortized monthly repayment (EMI), bank unlock progression,
relationship and credit scores, and missed-payment penalties. Rendering,
input and persistence belong to the host game.

Quick Start
-----------
>>> import tycoon as ty
>>> fin = ty.Finance.init(balance_init=0.0)
>>> q = fin.quote("city_bank", "quick_loan", amount=100_000, duration=12)
>>> fin.take_loan("city_bank", "quick_loan", 100_000, q.interest_rate, 12)
>>> fin.run(n_ticks=1805, dt=1000 / 60)   # just over 30 s: first EMI collected
>>> [e.kind for e in fin.drain_events()]
['loan-originated', 'emi-payment']

Custom configuration via YAML file or kwargs:

>>> fin = ty.Finance.init(config="my_finance.yml", late_fee_rate=0.05)

Key Concepts
------------
**Lifecycle**
  One active loan per player. ``tycoon.lifecycle`` holds the only code that
  mutates the loan slot, history, relationships and credit score.

**System Pipeline**
  Each tick executes the systems listed in default_pipeline.yml in order:
  starter loan → EMI aging → bank unlocks → loan-type unlocks → intents.

**Events and Intents**
  The UI dispatches frozen intent records and drains frozen event records.

Public API
----------
Finance
    Facade owning the finance state and driving it tick by tick.
System, system
    Base class / decorator for custom tick systems.
Pipeline
    Ordered system list, editable with insert_after / remove / replace.
BankCatalog
    Static bank and loan-type data.
logging
    Custom logging with DEEP_DEBUG level and per-system log configuration.

Notes
-----
- Time unit: milliseconds of game time; one EMI every ``emi_interval`` ms
- Configuration precedence: defaults.yml → user config → kwargs
"""

from __future__ import annotations

__version__: str = "0.1.0"

from . import logging  # noqa: E402 (circular-safe)
from .amortization import (  # noqa: E402
    ScheduleEntry,
    calculate_adjusted_interest_rate,
    calculate_emi,
    calculate_pre_closure_amount,
    calculate_total_amount,
    calculate_total_interest,
    generate_amortization_schedule,
)
from .catalog import (  # noqa: E402
    Bank,
    BankCatalog,
    LoanCategory,
    LoanQuote,
    LoanType,
    UnlockRule,
    get_available_banks,
)
from .config import Config  # noqa: E402
from .core import Pipeline, System, get_system, list_systems, system  # noqa: E402
from .finance import Finance  # noqa: E402
from .lifecycle import RejectReason, Rejection  # noqa: E402
from .state import (  # noqa: E402
    BankRelationship,
    Completion,
    FinanceState,
    GameState,
    Loan,
    LoanRecord,
)

__all__ = [
    "Bank",
    "BankCatalog",
    "BankRelationship",
    "Completion",
    "Config",
    "Finance",
    "FinanceState",
    "GameState",
    "Loan",
    "LoanCategory",
    "LoanQuote",
    "LoanRecord",
    "LoanType",
    "Pipeline",
    "RejectReason",
    "Rejection",
    "ScheduleEntry",
    "System",
    "UnlockRule",
    "calculate_adjusted_interest_rate",
    "calculate_emi",
    "calculate_pre_closure_amount",
    "calculate_total_amount",
    "calculate_total_interest",
    "generate_amortization_schedule",
    "get_available_banks",
    "get_system",
    "list_systems",
    "logging",
    "system",
]
