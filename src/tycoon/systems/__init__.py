"""
Built-in finance systems.

Importing this package registers every system below under its snake_case
name, which is how the pipeline YAML refers to them.
"""

from tycoon.systems.emi import CollectScheduledEmi
from tycoon.systems.intents import ProcessIntents, open_finance_view, resolve_intent
from tycoon.systems.progression import UnlockBanksByLevel, UnlockLoanTypesByProperties
from tycoon.systems.starter import GrantStarterLoan

__all__ = [
    "CollectScheduledEmi",
    "GrantStarterLoan",
    "ProcessIntents",
    "UnlockBanksByLevel",
    "UnlockLoanTypesByProperties",
    "open_finance_view",
    "resolve_intent",
]
