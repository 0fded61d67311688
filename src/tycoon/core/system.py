"""System base class definition."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from tycoon.finance import Finance


def _camel_to_snake(name: str) -> str:
    """Convert CamelCase to snake_case."""
    # Insert underscore before uppercase letters (except first)
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    # Insert underscore before uppercase letters followed by lowercase
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


@dataclass(slots=True)
class System(ABC):
    """
    Base class for all per-tick finance systems.

    A System encapsulates one step of the finance tick: EMI aging, unlock
    progression, intent processing. Systems mutate finance state in place,
    only through :mod:`tycoon.lifecycle`, and are executed by the Pipeline
    in the exact order specified.

    Design Guidelines
    -----------------
    - Inherit from System and implement `execute()` method
    - Use `name` class variable for unique identification
    - Systems receive the full Finance instance

    Notes
    -----
    Systems are registered automatically via __init_subclass__ hook.
    """

    # Class variable for system name (set by subclass)
    name: ClassVar[str] = ""

    def __init_subclass__(cls, name: str = "", **kwargs: Any) -> None:
        """
        Auto-register System subclasses in the global registry.

        Parameters
        ----------
        name : str, optional
            Custom name for the system.
            If not provided, uses the class name converted to snake_case.
        **kwargs
            Additional keyword arguments passed to parent __init_subclass__.
        """
        super(System, cls).__init_subclass__(**kwargs)

        # @dataclass(slots=True) builds a new class and triggers this hook a
        # second time without the custom name, so keep an existing one.
        if name != "":
            cls.name = name
        elif "name" not in cls.__dict__:
            cls.name = _camel_to_snake(cls.__name__)

        from tycoon.core.registry import _SYSTEM_REGISTRY

        _SYSTEM_REGISTRY[cls.name] = cls

    def get_logger(self) -> logging.Logger:
        """
        Get logger for this system with per-system log level applied.

        Notes
        -----
        Logger name format: 'tycoon.systems.{system_name}'
        Per-system log levels can be configured via defaults.yml or kwargs:

        logging:
          systems:
            collect_scheduled_emi: DEBUG
            process_intents: WARNING
        """
        return logging.getLogger(f"tycoon.systems.{self.name}")

    @abstractmethod
    def execute(self, fin: Finance) -> None:
        """
        Execute the system's logic for one tick.

        Parameters
        ----------
        fin : Finance
            The finance instance holding state, game slice and config.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
