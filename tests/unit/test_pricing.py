"""
Tests for the pricing engine.
"""

from decimal import Decimal

from order_console.models import DraftLineItem
from order_console.pricing import compute_pricing, round2


def line(quantity, price, item_id="itm"):
    return DraftLineItem(item_id=item_id, item_name=item_id, category="Restaurant",
                         quantity=quantity, unit_price=Decimal(price))


class TestRound2:

    def test_rounds_half_up(self):
        assert round2(Decimal("1.005")) == Decimal("1.01")
        assert round2(Decimal("1.004")) == Decimal("1.00")

    def test_pads_to_two_places(self):
        assert str(round2(Decimal("45"))) == "45.00"


class TestComputePricing:

    def test_default_rates_example(self):
        """Two lines 2x100 and 1x50 give 250 / 45 / 25 / 320."""
        breakdown = compute_pricing([line(2, "100"), line(1, "50")])

        assert breakdown.subtotal == Decimal("250")
        assert breakdown.tax_amount == Decimal("45.00")
        assert breakdown.service_charge_amount == Decimal("25.00")
        assert breakdown.grand_total == Decimal("320.00")

    def test_empty_draft_prices_to_zero(self):
        breakdown = compute_pricing([])

        assert breakdown.subtotal == 0
        assert breakdown.grand_total == 0

    def test_grand_total_is_sum_of_rounded_parts(self):
        breakdown = compute_pricing([line(3, "33.33")])

        assert breakdown.subtotal == Decimal("99.99")
        assert breakdown.tax_amount == Decimal("18.00")             # 17.9982
        assert breakdown.service_charge_amount == Decimal("10.00")  # 9.999
        assert breakdown.grand_total == breakdown.subtotal + breakdown.tax_amount + breakdown.service_charge_amount
        assert breakdown.grand_total == Decimal("127.99")

    def test_custom_rates(self):
        breakdown = compute_pricing([line(1, "200")], tax_rate=Decimal("0.05"), service_rate=Decimal("0"))

        assert breakdown.tax_amount == Decimal("10.00")
        assert breakdown.service_charge_amount == Decimal("0.00")
        assert breakdown.grand_total == Decimal("210.00")

    def test_is_idempotent(self):
        lines = [line(2, "100"), line(1, "50")]

        assert compute_pricing(lines) == compute_pricing(lines)
        assert len(lines) == 2
