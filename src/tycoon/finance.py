# src/tycoon/finance.py
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

import yaml

import tycoon.systems  # noqa: F401 - needed to register systems
from tycoon import logging as tlogging
from tycoon.catalog import (
    Bank,
    BankCatalog,
    LoanQuote,
    gated_loan_types,
    get_available_banks,
    quote_loan,
)
from tycoon.config import Config, ConfigValidator
from tycoon.core.default_pipeline import create_default_pipeline
from tycoon.core.pipeline import Pipeline
from tycoon.events import FinanceEvent, OpenFinance
from tycoon.intents import Intent, PayEmi, PreCloseLoan, TakeLoan, ViewFinance
from tycoon.lifecycle import (
    Origination,
    PaymentOutcome,
    PreClosure,
    Rejection,
    seed_relationship,
)
from tycoon.state import BankRelationship, FinanceState, GameState, Loan, LoanRecord
from tycoon.systems.intents import resolve_intent

__all__ = ["Finance"]

log = tlogging.getLogger(__name__)


# helpers
# ---------------------------------------------------------------------------
def _read_yaml(obj: str | Path | Mapping[str, Any] | None) -> Dict[str, Any]:
    """Return a plain dict – {} if *obj* is None."""
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    p = Path(obj)
    with p.open("rt", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"config root must be mapping, got {type(data)!r}")
    return dict(data)


def _package_defaults() -> Dict[str, Any]:
    """Load tycoon/defaults.yml"""
    txt = resources.files("tycoon").joinpath("defaults.yml").read_text()
    return yaml.safe_load(txt) or {}


# Finance
# ---------------------------------------------------------------------
@dataclass(slots=True)
class Finance:
    """
    Facade that owns one player's finance state and drives it tick by tick.

    One call to `run` → *n* calls to `step`. Player intents either go
    through the queue (`dispatch`, processed by the ``process_intents``
    system on the next tick) or through the synchronous methods
    (`take_loan`, `pay_emi`, `pre_close_loan`, `open_finance`); both paths
    share the same code. Notifications accumulate in an outbox drained with
    `drain_events`. The outbox is unbounded: the host must drain it, typically
    once per frame, or it grows for as long as the game runs.

    The UI should read through the read-only views (`active_loan`,
    `loan_history`, `relationships`, ...) and never write ``state`` directly;
    all mutations go through :mod:`tycoon.lifecycle`.
    """

    # core state
    state: FinanceState
    game: GameState
    catalog: BankCatalog

    # configuration
    config: Config

    # system pipeline
    pipeline: Pipeline

    # clock
    t: int = 0  # ticks executed
    clock: float = 0.0  # ms of game time elapsed
    dt: float = 0.0  # length of the current tick (ms)

    # intent queue / event outbox
    intents: deque[Intent] = field(default_factory=deque)
    outbox: list[FinanceEvent] = field(default_factory=list)

    # Constructor
    # ---------------------------------------------------------------------
    @classmethod
    def init(
        cls,
        config: str | Path | Mapping[str, Any] | None = None,
        **overrides: Any,  # anything here wins last
    ) -> Finance:
        """
        Build a Finance instance.

        Order of precedence (later overrides earlier):

            1. package defaults  (tycoon/defaults.yml)
            2. *config*  (Path / str / Mapping / None)
            3. explicit keyword arguments (**overrides)

        Raises
        ------
        ValueError
            If the merged configuration, the bank catalog or the pipeline
            file is invalid.
        """
        cfg_dict: Dict[str, Any] = _package_defaults()
        cfg_dict.update(_read_yaml(config))
        cfg_dict.update(overrides)

        ConfigValidator.validate_config(cfg_dict)

        pipeline_path = cfg_dict.get("pipeline_path")
        if pipeline_path is not None:
            ConfigValidator.validate_pipeline_path(pipeline_path)
            ConfigValidator.validate_pipeline_yaml(pipeline_path)

        catalog_path = cfg_dict.get("catalog_path")
        catalog = (
            BankCatalog.from_yaml(catalog_path)
            if catalog_path is not None
            else BankCatalog.default()
        )
        ConfigValidator.validate_against_catalog(cfg_dict, catalog)

        return cls._from_params(catalog=catalog, **cfg_dict)

    @staticmethod
    def _configure_logging(log_config: Dict[str, Any]) -> None:
        tlogging.configure(log_config)

    @classmethod
    def _from_params(cls, *, catalog: BankCatalog, **p: Any) -> Finance:
        cfg = Config.from_mapping(p)

        game = GameState(
            balance=float(p["balance_init"]),
            level=int(p["level_init"]),
            property_count=int(p["property_count_init"]),
        )

        state = FinanceState(
            unlocked_banks=set(cfg.initial_banks),
            unlocked_loan_types=catalog.loan_type_ids() - gated_loan_types(cfg.unlocks),
            credit_score=cfg.credit_score_init,
            emi_interval=cfg.emi_interval,
            last_checked_level=game.level,
            last_property_count=game.property_count,
        )

        # Checkpoints already met by the initial game state unlock silently
        for rule in cfg.unlocks:
            if rule.trigger == "level" and game.level >= rule.threshold:
                if rule.bank is not None:
                    state.unlocked_banks.add(rule.bank)
            elif rule.trigger == "properties" and game.property_count >= rule.threshold:
                if game.property_count > 0 and rule.loan_type is not None:
                    state.unlocked_loan_types.add(rule.loan_type)

        for bank_id in sorted(state.unlocked_banks):
            seed_relationship(state, bank_id, cfg)

        pipeline_path = p.get("pipeline_path")
        pipeline = (
            Pipeline.from_yaml(pipeline_path)
            if pipeline_path is not None
            else create_default_pipeline()
        )

        if "logging" in p:
            cls._configure_logging(p["logging"])

        log.info(
            f"Finance initialised: {len(catalog)} banks in catalog, "
            f"{len(state.unlocked_banks)} unlocked, credit score {state.credit_score}"
        )
        return cls(
            state=state,
            game=game,
            catalog=catalog,
            config=cfg,
            pipeline=pipeline,
        )

    # tick driver
    # ---------------------------------------------------------------------
    def step(self, dt: float) -> None:
        """
        Advance the finance subsystem by one tick of ``dt`` milliseconds.

        Executes every system in the pipeline in order. Never raises for
        business failures; those surface as ``IntentRejected`` events.
        """
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")

        self.t += 1
        self.dt = float(dt)
        self.clock += self.dt

        if log.isEnabledFor(tlogging.DEEP_DEBUG):
            log.deep(f"Tick {self.t}: dt={self.dt:.1f} ms, clock={self.clock:.1f} ms")

        self.pipeline.execute(self)

    def run(self, n_ticks: int, dt: float = 1000.0 / 60.0) -> None:
        """Advance the finance subsystem *n_ticks* steps of ``dt`` ms each."""
        for _ in range(int(n_ticks)):
            self.step(dt)

    # intents
    # ---------------------------------------------------------------------
    def dispatch(self, intent: Intent) -> None:
        """Queue ``intent``; the ``process_intents`` system handles it next tick."""
        self.intents.append(intent)

    def take_loan(
        self,
        bank_id: str,
        loan_type_id: str,
        amount: float,
        interest_rate: float,
        duration: int,
        collateral_id: str | None = None,
    ) -> Origination | Rejection:
        result = resolve_intent(
            self,
            TakeLoan(
                bank_id=bank_id,
                loan_type_id=loan_type_id,
                amount=amount,
                interest_rate=interest_rate,
                duration=duration,
                collateral_id=collateral_id,
            ),
        )
        assert isinstance(result, (Origination, Rejection))
        return result

    def pay_emi(self) -> PaymentOutcome | Rejection:
        result = resolve_intent(self, PayEmi())
        assert isinstance(result, (PaymentOutcome, Rejection))
        return result

    def pre_close_loan(self) -> PreClosure | Rejection:
        result = resolve_intent(self, PreCloseLoan())
        assert isinstance(result, (PreClosure, Rejection))
        return result

    def open_finance(self) -> OpenFinance:
        result = resolve_intent(self, ViewFinance())
        assert isinstance(result, OpenFinance)
        return result

    # events
    # ---------------------------------------------------------------------
    def emit(self, event: FinanceEvent) -> None:
        """Append ``event`` to the outbox."""
        if log.isEnabledFor(logging.DEBUG):
            log.debug(f"  emit {event.kind}")
        self.outbox.append(event)

    def drain_events(self) -> list[FinanceEvent]:
        """Return all pending events (oldest first) and clear the outbox."""
        events, self.outbox = self.outbox, []
        return events

    # read-only views
    # ---------------------------------------------------------------------
    @property
    def active_loan(self) -> Loan | None:
        loan = self.state.active_loan
        return loan.snapshot() if loan is not None else None

    @property
    def loan_history(self) -> tuple[LoanRecord, ...]:
        return tuple(self.state.loan_history)

    @property
    def relationships(self) -> Mapping[str, BankRelationship]:
        return MappingProxyType(
            {k: r.snapshot() for k, r in self.state.relationships.items()}
        )

    @property
    def credit_score(self) -> int:
        return self.state.credit_score

    @property
    def balance(self) -> float:
        return self.game.balance

    @property
    def unlocked_banks(self) -> frozenset[str]:
        return frozenset(self.state.unlocked_banks)

    @property
    def unlocked_loan_types(self) -> frozenset[str]:
        return frozenset(self.state.unlocked_loan_types)

    def available_banks(self) -> list[Bank]:
        """Banks and loan types the player may currently borrow from."""
        return get_available_banks(
            self.catalog,
            self.state.unlocked_banks,
            self.game.level,
            self.state.relationships,
            unlocked_loan_types=self.state.unlocked_loan_types,
        )

    def quote(
        self, bank_id: str, loan_type_id: str, amount: float, duration: int
    ) -> LoanQuote | None:
        """Price an offer at the player's personalised rate (None if unknown)."""
        bank = self.catalog.get_bank(bank_id)
        loan_type = self.catalog.get_loan_type(bank_id, loan_type_id)
        if bank is None or loan_type is None:
            return None
        return quote_loan(
            bank,
            loan_type,
            amount=amount,
            duration=duration,
            player_level=self.game.level,
            credit_score=self.state.credit_score,
            relationship=self.state.relationships.get(bank_id),
            level_discount=self.config.level_rate_discount,
            min_rate=self.config.min_interest_rate,
        )

    def __repr__(self) -> str:
        loan = self.state.active_loan
        return (
            f"Finance(t={self.t}, balance={self.game.balance:,.2f}, "
            f"credit_score={self.state.credit_score}, "
            f"active_loan={loan.loan_type_id if loan else None!r})"
        )
