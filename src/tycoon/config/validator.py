"""Centralized configuration validation for Tycoon Engine."""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING, Any, Mapping

from tycoon.catalog import LoanCategory

if TYPE_CHECKING:
    from tycoon.catalog import BankCatalog


class ConfigValidator:
    """
    Centralized validation for finance configuration and catalog data.

    All validation happens once at Finance.init() to ensure:
    - Type correctness
    - Valid parameter ranges
    - Well-formed unlock table and starter loan
    - Cross-references into the bank catalog resolve
    - Clear error messages with actionable feedback
    """

    # Valid log levels for logging configuration
    VALID_LOG_LEVELS = {"DEEP_DEBUG", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    VALID_TRIGGERS = {"level", "properties"}

    @staticmethod
    def validate_config(cfg: dict[str, Any]) -> None:
        """
        Validate all configuration parameters.

        Parameters
        ----------
        cfg : dict
            Configuration dictionary to validate.

        Raises
        ------
        ValueError
            If any validation check fails.
        """
        ConfigValidator._validate_types(cfg)
        ConfigValidator._validate_ranges(cfg)
        ConfigValidator._validate_relationships(cfg)

        if "unlocks" in cfg:
            ConfigValidator._validate_unlocks(cfg["unlocks"])

        if cfg.get("starter_loan") is not None:
            ConfigValidator._validate_starter_loan(cfg["starter_loan"])

        if "logging" in cfg:
            ConfigValidator._validate_logging(cfg["logging"])

    @staticmethod
    def _validate_types(cfg: dict[str, Any]) -> None:
        """
        Ensure correct types for configuration parameters.

        Raises
        ------
        ValueError
            If any parameter has incorrect type.
        """
        int_params = [
            "missed_payment_threshold",
            "relationship_init",
            "relationship_origination_bonus",
            "relationship_payment_bonus",
            "relationship_completion_bonus",
            "relationship_pre_close_bonus",
            "relationship_missed_penalty",
            "credit_score_init",
            "credit_completion_bonus",
            "credit_pre_close_bonus",
            "credit_missed_penalty",
            "level_init",
            "property_count_init",
        ]

        float_params = [
            "emi_interval",
            "late_fee_rate",
            "pre_close_penalty_pct",
            "min_interest_rate",
            "level_rate_discount",
            "balance_init",
        ]

        for key in int_params:
            if key not in cfg:
                continue
            val = cfg[key]
            if isinstance(val, bool) or not isinstance(val, int):
                raise ValueError(
                    f"Config parameter '{key}' must be int, got {type(val).__name__}"
                )

        # Accept int or float
        for key in float_params:
            if key not in cfg:
                continue
            val = cfg[key]
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                raise ValueError(
                    f"Config parameter '{key}' must be float, got {type(val).__name__}"
                )

        for key in ("catalog_path", "pipeline_path"):
            if key in cfg:
                val = cfg[key]
                if val is not None and not isinstance(val, str):
                    raise ValueError(
                        f"Config parameter '{key}' must be str or None, "
                        f"got {type(val).__name__}"
                    )

        if "initial_banks" in cfg:
            banks = cfg["initial_banks"]
            if not isinstance(banks, (list, tuple)) or not all(
                isinstance(b, str) for b in banks
            ):
                raise ValueError("Config parameter 'initial_banks' must be a list of str")

        if "unlocks" in cfg and not isinstance(cfg["unlocks"], (list, tuple)):
            raise ValueError(
                f"Config parameter 'unlocks' must be a list, "
                f"got {type(cfg['unlocks']).__name__}"
            )

    @staticmethod
    def _validate_ranges(cfg: dict[str, Any]) -> None:
        """
        Ensure parameters are in valid ranges.

        Raises
        ------
        ValueError
            If any parameter is out of valid range.
        """
        # (min_val, max_val); None means unbounded
        constraints = {
            "emi_interval": (0.0, None),
            "late_fee_rate": (0.0, 1.0),
            "pre_close_penalty_pct": (0.0, 100.0),
            "min_interest_rate": (0.0, None),
            "level_rate_discount": (0.0, None),
            "missed_payment_threshold": (1, None),
            "relationship_init": (0, 100),
            "relationship_origination_bonus": (0, 100),
            "relationship_payment_bonus": (0, 100),
            "relationship_completion_bonus": (0, 100),
            "relationship_pre_close_bonus": (0, 100),
            "relationship_missed_penalty": (0, 100),
            "credit_score_init": (300, 850),
            "credit_completion_bonus": (0, 550),
            "credit_pre_close_bonus": (0, 550),
            "credit_missed_penalty": (0, 550),
            "balance_init": (0.0, None),
            "level_init": (1, None),
            "property_count_init": (0, None),
        }

        for key, (min_val, max_val) in constraints.items():
            if key not in cfg:
                continue

            val = cfg[key]
            if val is None:
                continue

            if min_val is not None and val < min_val:
                raise ValueError(
                    f"Config parameter '{key}' must be >= {min_val}, got {val}"
                )

            if max_val is not None and val > max_val:
                raise ValueError(
                    f"Config parameter '{key}' must be <= {max_val}, got {val}"
                )

        if "emi_interval" in cfg and cfg["emi_interval"] == 0:
            raise ValueError("Config parameter 'emi_interval' must be > 0, got 0")

    @staticmethod
    def _validate_relationships(cfg: dict[str, Any]) -> None:
        """Validate cross-parameter constraints (warnings only)."""
        bonus = cfg.get("credit_pre_close_bonus", 0)
        full = cfg.get("credit_completion_bonus", 0)
        if bonus > full:
            warnings.warn(
                f"credit_pre_close_bonus ({bonus}) > credit_completion_bonus ({full}). "
                "Paying off early will be worth more than serving the full term.",
                UserWarning,
                stacklevel=3,
            )

        if cfg.get("late_fee_rate", 0.0) == 0.0:
            warnings.warn(
                "late_fee_rate is 0: missed installments will not grow the debt.",
                UserWarning,
                stacklevel=3,
            )

    @staticmethod
    def _validate_unlocks(unlocks: Any) -> None:
        """
        Validate the declarative unlock table.

        Raises
        ------
        ValueError
            If a row is malformed.
        """
        for i, row in enumerate(unlocks):
            if not isinstance(row, Mapping):
                raise ValueError(
                    f"Unlock rule at index {i} must be a mapping, "
                    f"got {type(row).__name__}"
                )
            trigger = row.get("trigger")
            if trigger not in ConfigValidator.VALID_TRIGGERS:
                raise ValueError(
                    f"Unlock rule at index {i} has invalid trigger {trigger!r}. "
                    f"Must be one of {sorted(ConfigValidator.VALID_TRIGGERS)}"
                )
            threshold = row.get("threshold")
            if isinstance(threshold, bool) or not isinstance(threshold, int):
                raise ValueError(f"Unlock rule at index {i} needs an int 'threshold'")
            if threshold < 0:
                raise ValueError(
                    f"Unlock rule at index {i} threshold must be >= 0, got {threshold}"
                )
            targets = [k for k in ("bank", "loan_type") if row.get(k) is not None]
            if len(targets) != 1:
                raise ValueError(
                    f"Unlock rule at index {i} must name exactly one of "
                    f"'bank' or 'loan_type'"
                )

    @staticmethod
    def _validate_starter_loan(starter: Any) -> None:
        if not isinstance(starter, Mapping):
            raise ValueError(
                f"starter_loan must be a mapping or null, got {type(starter).__name__}"
            )
        for key in ("bank_id", "loan_type_id", "amount", "duration"):
            if key not in starter:
                raise ValueError(f"starter_loan is missing '{key}'")
        if starter["amount"] <= 0 or starter["duration"] <= 0:
            raise ValueError("starter_loan amount and duration must be positive")

    @staticmethod
    def _validate_logging(log_config: dict[str, Any]) -> None:
        """
        Validate logging configuration.

        Parameters
        ----------
        log_config : dict
            Logging configuration dictionary with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG')
            - systems: dict[str, str] (per-system overrides)

        Raises
        ------
        ValueError
            If logging configuration is invalid.
        """
        if "default_level" in log_config:
            level = log_config["default_level"]
            if not isinstance(level, str):
                raise ValueError(
                    f"Logging default_level must be str, got {type(level).__name__}"
                )

            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}'. "
                    f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                )

        if "systems" in log_config:
            systems = log_config["systems"]
            if not isinstance(systems, dict):
                raise ValueError(
                    f"Logging systems must be dict, got {type(systems).__name__}"
                )

            for system_name, level in systems.items():
                if not isinstance(system_name, str):
                    raise ValueError(
                        f"System name must be str, got {type(system_name).__name__}"
                    )

                if not isinstance(level, str):
                    raise ValueError(
                        f"Log level for system '{system_name}' must be str, "
                        f"got {type(level).__name__}"
                    )

                if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                    raise ValueError(
                        f"Invalid log level '{level}' for system '{system_name}'. "
                        f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                    )

    # Catalog
    # ---------------------------------------------------------------------
    @staticmethod
    def validate_catalog(data: Mapping[str, Any]) -> None:
        """
        Validate raw bank catalog data (as loaded from YAML).

        Raises
        ------
        ValueError
            If the structure is invalid, ids collide or bounds are inverted.
        """
        if not isinstance(data, Mapping) or "banks" not in data:
            raise ValueError("Catalog must be a mapping with a 'banks' key")

        banks = data["banks"]
        if not isinstance(banks, list) or not banks:
            raise ValueError("Catalog 'banks' must be a non-empty list")

        seen_banks: set[str] = set()
        for bank in banks:
            for key in ("id", "name", "loan_types"):
                if key not in bank:
                    raise ValueError(f"Bank entry is missing '{key}': {bank!r}")
            bank_id = bank["id"]
            if bank_id in seen_banks:
                raise ValueError(f"Duplicate bank id '{bank_id}'")
            seen_banks.add(bank_id)

            if not 0 <= bank.get("min_relationship", 0) <= 100:
                raise ValueError(
                    f"Bank '{bank_id}' min_relationship must be within [0, 100]"
                )

            seen_types: set[str] = set()
            for lt in bank["loan_types"]:
                ConfigValidator._validate_loan_type(bank_id, lt)
                if lt["id"] in seen_types:
                    raise ValueError(
                        f"Duplicate loan type id '{lt['id']}' in bank '{bank_id}'"
                    )
                seen_types.add(lt["id"])

    @staticmethod
    def _validate_loan_type(bank_id: str, lt: Mapping[str, Any]) -> None:
        required = (
            "id",
            "name",
            "category",
            "min_amount",
            "max_amount",
            "base_rate",
            "min_duration",
            "max_duration",
        )
        for key in required:
            if key not in lt:
                raise ValueError(f"Loan type in bank '{bank_id}' is missing '{key}'")

        where = f"loan type '{lt['id']}' of bank '{bank_id}'"
        valid_categories = {c.value for c in LoanCategory}
        if lt["category"] not in valid_categories:
            raise ValueError(
                f"Invalid category {lt['category']!r} for {where}. "
                f"Must be one of {sorted(valid_categories)}"
            )
        if not 0 < lt["min_amount"] <= lt["max_amount"]:
            raise ValueError(f"Amount bounds of {where} must satisfy 0 < min <= max")
        if not 0 < lt["min_duration"] <= lt["max_duration"]:
            raise ValueError(f"Duration bounds of {where} must satisfy 0 < min <= max")
        if lt["base_rate"] <= 0:
            raise ValueError(f"base_rate of {where} must be positive")
        if lt.get("relationship_discount", 0.0) < 0:
            raise ValueError(f"relationship_discount of {where} must be >= 0")

    @staticmethod
    def validate_against_catalog(cfg: dict[str, Any], catalog: BankCatalog) -> None:
        """
        Ensure every bank / loan type named in the config exists.

        Raises
        ------
        ValueError
            If a reference does not resolve.
        """
        bank_ids = set(catalog.bank_ids())
        type_ids = catalog.loan_type_ids()

        for bank_id in cfg.get("initial_banks", ()):
            if bank_id not in bank_ids:
                raise ValueError(
                    f"initial_banks references unknown bank '{bank_id}'. "
                    f"Available banks: {sorted(bank_ids)}"
                )

        for row in cfg.get("unlocks", ()):
            if row.get("bank") is not None and row["bank"] not in bank_ids:
                raise ValueError(f"Unlock rule references unknown bank '{row['bank']}'")
            if row.get("loan_type") is not None and row["loan_type"] not in type_ids:
                raise ValueError(
                    f"Unlock rule references unknown loan type '{row['loan_type']}'"
                )

        starter = cfg.get("starter_loan")
        if starter is not None:
            if catalog.get_loan_type(starter["bank_id"], starter["loan_type_id"]) is None:
                raise ValueError(
                    f"starter_loan references unknown product "
                    f"'{starter['bank_id']}/{starter['loan_type_id']}'"
                )

    # Pipeline
    # ---------------------------------------------------------------------
    @staticmethod
    def validate_pipeline_path(pipeline_path: str) -> None:
        """
        Validate pipeline path exists and is readable.

        Raises
        ------
        ValueError
            If path does not exist or is not a file.
        """
        from pathlib import Path

        path = Path(pipeline_path)

        if not path.exists():
            raise ValueError(f"Pipeline path '{pipeline_path}' does not exist")

        if not path.is_file():
            raise ValueError(f"Pipeline path '{pipeline_path}' is not a file")

        if path.suffix not in [".yml", ".yaml"]:
            warnings.warn(
                f"Pipeline path '{pipeline_path}' does not have .yml/.yaml extension",
                UserWarning,
                stacklevel=2,
            )

    @staticmethod
    def validate_pipeline_yaml(yaml_path: str) -> None:
        """
        Validate pipeline YAML file structure and system references.

        Raises
        ------
        ValueError
            If YAML structure is invalid or references unknown systems.
        """
        from pathlib import Path

        import yaml

        from tycoon.core.registry import list_systems

        path = Path(yaml_path)
        with open(path) as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict):
            raise ValueError(
                f"Pipeline YAML must be a dictionary, got {type(config).__name__}"
            )

        if "systems" not in config:
            raise ValueError(f"Pipeline YAML must have 'systems' key: {yaml_path}")

        specs = config["systems"]
        if not isinstance(specs, list):
            raise ValueError(
                f"Pipeline 'systems' must be a list, got {type(specs).__name__}"
            )

        registered = set(list_systems())
        for i, spec in enumerate(specs):
            if not isinstance(spec, str):
                raise ValueError(
                    f"System spec at index {i} must be str, got {type(spec).__name__}"
                )
            if spec.strip() not in registered:
                raise ValueError(
                    f"System '{spec}' not found in registry. "
                    f"Available systems: {sorted(registered)}"
                )
