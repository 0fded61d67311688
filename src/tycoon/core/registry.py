"""Registry of finance systems."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from tycoon.core.system import System

S = TypeVar("S", bound="System")

# Global registry storage
_SYSTEM_REGISTRY: dict[str, type[System]] = {}


def get_system(name: str) -> type[System]:
    """
    Retrieve a system class from the registry by name.

    Parameters
    ----------
    name : str
        Name of the system to retrieve.

    Returns
    -------
    type[System]
        The registered system class.

    Raises
    ------
    KeyError
        If the system name is not found in the registry.
    """
    if name not in _SYSTEM_REGISTRY:
        available = ", ".join(sorted(_SYSTEM_REGISTRY.keys()))
        raise KeyError(
            f"System '{name}' not found in registry. Available systems: {available}"
        )
    return _SYSTEM_REGISTRY[name]


def list_systems() -> list[str]:
    """Return sorted list of all registered system names."""
    return sorted(_SYSTEM_REGISTRY.keys())


def clear_registry() -> None:
    """
    Clear all registrations (useful for testing).

    WARNING: This is a destructive operation. Only use in test teardown.
    """
    _SYSTEM_REGISTRY.clear()
