# src/tycoon/core/decorators.py
"""
Decorator for simplified System definition.

Instead of:
    from dataclasses import dataclass
    from tycoon.core import System

    @dataclass(slots=True)
    class CollectScheduledEmi(System):
        def execute(self, fin: Finance) -> None: ...

You can write:
    from tycoon.core import system

    @system
    class CollectScheduledEmi:
        def execute(self, fin: Finance) -> None: ...
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

T = TypeVar("T")


def system(
    cls: type[T] | None = None,
    *,
    name: str | None = None,
    **dataclass_kwargs: Any,
) -> type[T] | Callable[[type[T]], type[T]]:
    """Decorator to define a System with automatic inheritance and dataclass.

    1. Makes the class inherit from System (if not already)
    2. Applies @dataclass(slots=True)
    3. Registration happens through System.__init_subclass__

    Parameters
    ----------
    cls : type | None
        The class to decorate (provided automatically when used without parens)
    name : str | None
        Optional custom name for the system. If None, uses class name
        (snake_case).
    **dataclass_kwargs : Any
        Additional keyword arguments to pass to @dataclass.

    Examples
    --------
    Simplest usage:
        @system
        class UnlockBanksByLevel:
            def execute(self, fin: Finance) -> None:
                ...

    With custom name:
        @system(name="bank_unlocks")
        class UnlockBanksByLevel:
            def execute(self, fin: Finance) -> None:
                ...

    Notes
    -----
    frozen=True is not supported (System base class is not frozen).
    """
    from tycoon.core.system import System

    dataclass_kwargs.setdefault("slots", True)

    def decorator(cls: type[T]) -> type[T]:
        from dataclasses import dataclass

        if not issubclass(cls, System):
            # Rebuild the class with System as its only base so slots work
            namespace = {
                "__module__": cls.__module__,
                "__qualname__": cls.__qualname__,
                "__annotations__": getattr(cls, "__annotations__", {}),
                "__doc__": cls.__doc__,
            }
            for attr_name in dir(cls):
                if not attr_name.startswith("__"):
                    namespace[attr_name] = getattr(cls, attr_name)

            # Custom name must be known before __init_subclass__ runs
            if name is not None:
                namespace["name"] = name

            cls = type(cls.__name__, (System,), namespace)  # type: ignore[assignment]
        elif name is not None:
            cls.name = name  # type: ignore[attr-defined]

        return dataclass(**dataclass_kwargs)(cls)

    if cls is None:
        return decorator
    return decorator(cls)
