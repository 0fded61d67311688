"""Tests for the bank catalog and availability filter."""

import pytest

from tycoon.catalog import (
    Bank,
    BankCatalog,
    LoanCategory,
    LoanType,
    UnlockRule,
    gated_loan_types,
    get_available_banks,
    quote_loan,
    relationship_rate_discount,
)
from tests.helpers.factories import mock_relationship


def _loan_type(**overrides) -> dict:
    lt = dict(
        id="quick_loan",
        name="Quick Loan",
        category="starter",
        min_amount=1000,
        max_amount=5000,
        base_rate=8.0,
        min_duration=6,
        max_duration=12,
    )
    lt.update(overrides)
    return lt


class TestDefaultCatalog:
    def test_loads_packaged_banks_in_order(self):
        catalog = BankCatalog.default()
        assert catalog.bank_ids() == [
            "city_bank",
            "national_bank",
            "venture",
            "investment_bank",
        ]
        assert len(catalog) == 4

    def test_lookups(self):
        catalog = BankCatalog.default()
        lt = catalog.get_loan_type("city_bank", "quick_loan")
        assert lt is not None and lt.category is LoanCategory.STARTER
        assert catalog.get_bank("nope") is None
        assert catalog.get_loan_type("city_bank", "nope") is None
        assert catalog.get_loan_type("nope", "quick_loan") is None

    def test_same_loan_type_id_at_several_banks(self):
        catalog = BankCatalog.default()
        national = catalog.get_loan_type("national_bank", "development")
        venture = catalog.get_loan_type("venture", "development")
        assert national is not None and venture is not None
        assert national.requires_collateral and venture.requires_collateral
        assert national.max_amount != venture.max_amount

    def test_max_amount_grows_with_level(self):
        lt = BankCatalog.default().get_loan_type("city_bank", "quick_loan")
        assert lt.max_amount_for(1) == lt.max_amount
        assert lt.max_amount_for(3) == lt.max_amount + 2 * lt.max_amount_per_level


class TestCatalogFromMapping:
    def test_minimal_catalog(self):
        catalog = BankCatalog.from_mapping(
            {"banks": [{"id": "b", "name": "B", "loan_types": [_loan_type()]}]}
        )
        bank = catalog.get_bank("b")
        assert bank.unlock_level == 1 and bank.min_relationship == 0
        assert bank.loan_types[0].requires_collateral is False

    def test_duplicate_bank_rejected(self):
        bank = {"id": "b", "name": "B", "loan_types": [_loan_type()]}
        with pytest.raises(ValueError, match="Duplicate bank id"):
            BankCatalog.from_mapping({"banks": [bank, dict(bank)]})

    def test_inverted_bounds_rejected(self):
        bad = _loan_type(min_amount=9000, max_amount=100)
        with pytest.raises(ValueError, match="Amount bounds"):
            BankCatalog.from_mapping(
                {"banks": [{"id": "b", "name": "B", "loan_types": [bad]}]}
            )

    def test_unknown_category_rejected(self):
        bad = _loan_type(category="payday")
        with pytest.raises(ValueError, match="Invalid category"):
            BankCatalog.from_mapping(
                {"banks": [{"id": "b", "name": "B", "loan_types": [bad]}]}
            )

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "banks.yml"
        path.write_text(
            "banks:\n"
            "  - id: b\n"
            "    name: B\n"
            "    loan_types:\n"
            "      - {id: q, name: Q, category: business, min_amount: 1, "
            "max_amount: 2, base_rate: 5, min_duration: 1, max_duration: 2}\n"
        )
        catalog = BankCatalog.from_yaml(path)
        assert catalog.loan_type_ids() == {"q"}


class TestGetAvailableBanks:
    def test_filters_by_unlock_and_level(self, catalog):
        banks = get_available_banks(
            catalog, {"city_bank", "national_bank"}, player_level=1, relationships={}
        )
        assert [b.id for b in banks] == ["city_bank"]

    def test_level_gate_applies_even_if_unlocked(self, catalog):
        """A bank above the player's level stays hidden even when unlocked."""
        banks = get_available_banks(
            catalog, ["venture"], 2, {"venture": mock_relationship(50)}
        )
        assert banks == []

    def test_relationship_gate(self, catalog):
        unlocked = {"city_bank", "investment_bank"}
        low = {"investment_bank": mock_relationship(59)}
        ok = {"investment_bank": mock_relationship(60)}
        assert [b.id for b in get_available_banks(catalog, unlocked, 8, low)] == [
            "city_bank"
        ]
        assert [b.id for b in get_available_banks(catalog, unlocked, 8, ok)] == [
            "city_bank",
            "investment_bank",
        ]

    def test_missing_relationship_does_not_hide_bank(self, catalog):
        banks = get_available_banks(catalog, {"investment_bank"}, 8, {})
        assert [b.id for b in banks] == ["investment_bank"]

    def test_loan_types_filtered_by_min_level(self, catalog):
        (city,) = get_available_banks(catalog, {"city_bank"}, 1, {})
        assert [lt.id for lt in city.loan_types] == ["quick_loan"]
        (city,) = get_available_banks(catalog, {"city_bank"}, 2, {})
        assert [lt.id for lt in city.loan_types] == ["quick_loan", "property_loan"]

    def test_locked_loan_types_hidden(self, catalog):
        unlocked_types = catalog.loan_type_ids() - {"development"}
        (national,) = get_available_banks(
            catalog, {"national_bank"}, 3, {}, unlocked_loan_types=unlocked_types
        )
        assert "development" not in [lt.id for lt in national.loan_types]

    def test_catalog_not_mutated(self, catalog):
        get_available_banks(catalog, {"city_bank"}, 1, {})
        assert len(catalog.get_bank("city_bank").loan_types) == 2

    def test_idempotent(self, catalog):
        args = (catalog, {"city_bank", "national_bank"}, 4, {"city_bank": mock_relationship()})
        assert get_available_banks(*args) == get_available_banks(*args)


class TestQuotes:
    def test_quote_uses_personalised_rate(self, catalog):
        bank = catalog.get_bank("city_bank")
        lt = bank.get_loan_type("quick_loan")
        quote = quote_loan(
            bank,
            lt,
            amount=100_000,
            duration=12,
            player_level=1,
            credit_score=750,
            relationship=mock_relationship(50),
        )
        # 8.5 − 0.2 − 50·0.01 − 0.5
        assert quote.interest_rate == pytest.approx(7.3)
        assert quote.total_amount == pytest.approx(quote.emi * 12)
        assert quote.total_interest == pytest.approx(quote.emi * 12 - 100_000)

    def test_relationship_rate_discount_uses_best_coefficient(self, catalog):
        bank = catalog.get_bank("city_bank")
        assert relationship_rate_discount(bank, mock_relationship(40)) == pytest.approx(
            40 * 0.015
        )

    def test_relationship_discount_without_products(self):
        empty = Bank(id="x", name="X", unlock_level=1, min_relationship=0, loan_types=())
        assert relationship_rate_discount(empty, mock_relationship(80)) == 0.0


class TestUnlockRules:
    def test_gated_loan_types(self):
        rules = [
            UnlockRule(trigger="level", threshold=3, bank="national_bank"),
            UnlockRule(trigger="properties", threshold=1, loan_type="development"),
        ]
        assert gated_loan_types(rules) == {"development"}

    def test_from_mapping(self):
        rule = UnlockRule.from_mapping({"trigger": "level", "threshold": 5, "bank": "v"})
        assert rule == UnlockRule("level", 5, bank="v")
        assert rule.loan_type is None


def test_loan_type_from_mapping_defaults():
    lt = LoanType.from_mapping(_loan_type())
    assert lt.min_level == 1
    assert lt.max_amount_per_level == 0.0
    assert lt.relationship_discount == 0.0
