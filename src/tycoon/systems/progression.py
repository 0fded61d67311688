"""Progression: unlock banks and loan types from the declarative unlock table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tycoon.core.decorators import system
from tycoon.events import BankUnlocked, LoanTypeUnlocked
from tycoon.lifecycle import seed_relationship

if TYPE_CHECKING:
    from tycoon.finance import Finance


@system
class UnlockBanksByLevel:
    """
    Unlock every bank whose level checkpoint the player has reached.

    Rule
    ----
        level > last_checked_level →
            ∀ rule(trigger=level, threshold ≤ level, bank ∉ unlocked):
                unlock bank, seed relationship, emit BankUnlocked

    Notes
    -----
    Several checkpoints crossed in one tick all fire, in table order.
    """

    def execute(self, fin: Finance) -> None:
        log = self.get_logger()
        state, level = fin.state, fin.game.level

        if level <= state.last_checked_level:
            return
        state.last_checked_level = level

        for rule in fin.config.unlocks:
            if rule.trigger != "level" or rule.bank is None:
                continue
            if level < rule.threshold or rule.bank in state.unlocked_banks:
                continue

            state.unlocked_banks.add(rule.bank)
            seed_relationship(state, rule.bank, fin.config, now=fin.clock)

            bank = fin.catalog.get_bank(rule.bank)
            bank_name = bank.name if bank is not None else rule.bank
            log.info(f"  Level {level}: unlocked {bank_name}")
            fin.emit(
                BankUnlocked(
                    bank_id=rule.bank,
                    message=f"New bank unlocked: {bank_name}!",
                )
            )


@system
class UnlockLoanTypesByProperties:
    """
    Unlock loan types gated on the number of owned properties.

    Rule
    ----
        count ≠ last_property_count ∧ count > 0 →
            ∀ rule(trigger=properties, threshold ≤ count, type ∉ unlocked):
                unlock type, emit LoanTypeUnlocked
    """

    def execute(self, fin: Finance) -> None:
        log = self.get_logger()
        state, count = fin.state, fin.game.property_count

        if count == state.last_property_count:
            return
        state.last_property_count = count
        if count <= 0:
            return

        for rule in fin.config.unlocks:
            if rule.trigger != "properties" or rule.loan_type is None:
                continue
            if count < rule.threshold or rule.loan_type in state.unlocked_loan_types:
                continue

            state.unlocked_loan_types.add(rule.loan_type)
            log.info(f"  {count} properties owned: unlocked '{rule.loan_type}' loans")
            fin.emit(
                LoanTypeUnlocked(
                    loan_type_id=rule.loan_type,
                    message=f"New loan type unlocked: {rule.loan_type}",
                )
            )
