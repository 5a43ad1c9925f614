"""Tests for the totals engine."""

from decimal import Decimal

import pytest

from core.models import DiscountType, InvoiceSettings, LineItem
from core.totals import compute_totals, line_amount


def _items(*pairs):
    return [LineItem(quantity=q, rate=r) for q, r in pairs]


class TestScenarios:

    def test_tax_only(self):
        """2x50 + 1x100 at 10% tax: 200 / 20 / 0 / 220."""
        totals = compute_totals(_items((2, 50), (1, 100)), InvoiceSettings(tax_rate_percent=10))

        assert totals.subtotal == Decimal("200.00")
        assert totals.tax_amount == Decimal("20.00")
        assert totals.discount_amount == Decimal("0.00")
        assert totals.total == Decimal("220.00")

    def test_tax_and_percent_discount(self):
        """Same items with a 10% discount: discount 20, total 200."""
        settings = InvoiceSettings(
            tax_rate_percent=10, discount_type=DiscountType.PERCENT, discount_value=10,
        )
        totals = compute_totals(_items((2, 50), (1, 100)), settings)

        assert totals.discount_amount == Decimal("20.00")
        assert totals.total == Decimal("200.00")

    def test_zero_quantity(self):
        """qty 0 x rate 100 contributes nothing."""
        items = _items((0, 100))
        totals = compute_totals(items)

        assert items[0].amount == Decimal("0.00")
        assert totals.subtotal == Decimal("0.00")


class TestSubtotal:

    def test_sums_quantity_times_rate(self):
        items = _items(("1.5", "10"), ("3", "0.1"))
        assert compute_totals(items).subtotal == Decimal("15.3")

    @pytest.mark.parametrize("bad", ["abc", "", None, "NaN", "-4", "Infinity"])
    def test_invalid_numbers_count_as_zero(self, bad):
        """Non-numeric, non-finite and negative inputs never raise."""
        items = [{"quantity": bad, "rate": "10"}, {"quantity": "2", "rate": "10"}]
        assert compute_totals(items).subtotal == Decimal("20")

    def test_accepts_mappings_and_models_together(self):
        items = [LineItem(quantity=1, rate=5), {"quantity": "2", "rate": "5"}]
        assert compute_totals(items).subtotal == Decimal("15")

    def test_line_amount_of_mapping(self):
        assert line_amount({"quantity": "3", "rate": "2.5"}) == Decimal("7.5")


class TestDiscount:

    def test_fixed_discount_is_taken_as_is(self):
        """Fixed discount equals discount_value regardless of subtotal."""
        settings = InvoiceSettings(discount_type=DiscountType.FIXED, discount_value="15")
        for pairs in [((1, 100),), ((3, 7),), ((0, 0),)]:
            assert compute_totals(_items(*pairs), settings).discount_amount == Decimal("15")

    def test_percent_discount_is_share_of_subtotal(self):
        settings = InvoiceSettings(discount_type=DiscountType.PERCENT, discount_value="12.5")
        totals = compute_totals(_items((4, 20)), settings)
        assert totals.discount_amount == totals.subtotal * Decimal("12.5") / 100

    def test_discount_exceeding_subtotal_gives_negative_total(self):
        """No clamping: total may go below zero."""
        settings = InvoiceSettings(discount_type=DiscountType.FIXED, discount_value=500)
        totals = compute_totals(_items((1, 100)), settings)
        assert totals.total == Decimal("-400")


class TestInvariants:

    @pytest.mark.parametrize("tax,kind,value", [
        ("0", DiscountType.PERCENT, "0"),
        ("7.25", DiscountType.PERCENT, "33"),
        ("20", DiscountType.FIXED, "19.99"),
        ("0", DiscountType.FIXED, "1000"),
    ])
    def test_total_identity(self, tax, kind, value):
        """total == subtotal + tax - discount exactly."""
        settings = InvoiceSettings(tax_rate_percent=tax, discount_type=kind, discount_value=value)
        totals = compute_totals(_items(("2", "19.99"), ("0.5", "80")), settings)
        assert totals.total == totals.subtotal + totals.tax_amount - totals.discount_amount

    def test_idempotent(self):
        """Identical inputs give identical outputs."""
        items = _items(("1.1", "3.3"), ("2", "0.07"))
        settings = InvoiceSettings(tax_rate_percent="8.875")
        first = compute_totals(items, settings)
        second = compute_totals(items, settings)
        assert first == second
        assert str(first.total) == str(second.total)

    def test_settings_mapping_is_accepted(self):
        totals = compute_totals(_items((1, 100)), {"tax_rate_percent": "5"})
        assert totals.tax_amount == Decimal("5")
