"""System pipeline with explicit execution order."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from tycoon.core.registry import get_system
from tycoon.core.system import System

if TYPE_CHECKING:
    from tycoon.finance import Finance


@dataclass(slots=True)
class Pipeline:
    """
    Ordered list of systems executed once per tick.

    Attributes
    ----------
    systems : list[System]
        Ordered list of system instances to execute.
    _system_map : dict[str, System]
        Internal mapping from system names to instances for quick lookup.

    See Also
    --------
    Pipeline.from_system_list : Build pipeline from system name list
    """

    systems: list[System] = field(default_factory=list)
    _system_map: dict[str, System] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._system_map = {s.name: s for s in self.systems}

    @classmethod
    def from_system_list(cls, system_names: list[str]) -> Pipeline:
        """
        Build pipeline from ordered list of system names.

        Systems are executed in the exact order provided.

        Raises
        ------
        KeyError
            If a system name is not found in the registry.
        """
        return cls(systems=[get_system(name.strip())() for name in system_names])

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> Pipeline:
        """
        Build pipeline from YAML configuration file.

        The YAML file must have a 'systems' key with a list of system names.

        Raises
        ------
        ValueError
            If the YAML has no 'systems' key.

        Examples
        --------
        >>> pipeline = Pipeline.from_yaml("my_pipeline.yml")
        """
        yaml_path = Path(yaml_path)
        with open(yaml_path) as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict) or "systems" not in config:
            raise ValueError(f"YAML file must have 'systems' key: {yaml_path}")

        return cls.from_system_list(list(config["systems"]))

    def execute(self, fin: Finance) -> None:
        """Execute all systems in pipeline order."""
        for s in self.systems:
            s.execute(fin)

    def insert_after(self, after: str, new_system: System | str) -> None:
        """
        Insert system after specified system.

        Raises
        ------
        ValueError
            If 'after' system not found in pipeline.
        """
        if after not in self._system_map:
            raise ValueError(f"System '{after}' not found in pipeline")

        if isinstance(new_system, str):
            new_system = get_system(new_system)()

        idx = self.systems.index(self._system_map[after])
        self.systems.insert(idx + 1, new_system)
        self._system_map[new_system.name] = new_system

    def remove(self, system_name: str) -> None:
        """
        Remove system from pipeline.

        Raises
        ------
        ValueError
            If system not found in pipeline.
        """
        if system_name not in self._system_map:
            raise ValueError(f"System '{system_name}' not found in pipeline")

        self.systems.remove(self._system_map.pop(system_name))

    def replace(self, old_name: str, new_system: System | str) -> None:
        """
        Replace system with another system.

        Raises
        ------
        ValueError
            If old system not found in pipeline.
        """
        if old_name not in self._system_map:
            raise ValueError(f"System '{old_name}' not found in pipeline")

        if isinstance(new_system, str):
            new_system = get_system(new_system)()

        idx = self.systems.index(self._system_map[old_name])
        self.systems[idx] = new_system

        del self._system_map[old_name]
        self._system_map[new_system.name] = new_system

    def names(self) -> list[str]:
        """System names in execution order."""
        return [s.name for s in self.systems]

    def __len__(self) -> int:
        return len(self.systems)

    def __repr__(self) -> str:
        return f"Pipeline(n_systems={len(self.systems)})"
