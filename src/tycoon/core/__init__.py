"""Core system infrastructure for Tycoon Engine."""

from typing import Any, Callable

from tycoon.core.decorators import system as system_decorator
from tycoon.core.pipeline import Pipeline
from tycoon.core.registry import get_system, list_systems
from tycoon.core.system import System

# Export the decorator under its intended name, overriding the submodule name
system: Callable[..., Any] = system_decorator

__all__ = [
    "Pipeline",
    "System",
    "get_system",
    "list_systems",
    "system",
]
