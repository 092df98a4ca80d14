"""
Tests for the draft order builder.
"""

from decimal import Decimal

import pytest

from order_console.builder import OrderBuilder
from order_console.exceptions import IndexOutOfRangeError, InsufficientStockError, InvalidQuantityError
from tests.helpers import make_item


@pytest.fixture
def builder(room_context):
    return OrderBuilder(room_context)


class TestAddItem:

    def test_captures_price_and_category(self, builder, paneer):
        line = builder.add_item(paneer, 2, note="less spicy")

        assert line.item_id == "itm-paneer"
        assert line.unit_price == Decimal("100")
        assert line.category == "Restaurant"
        assert line.total_price == Decimal("200")
        assert line.note == "less spicy"
        assert builder.lines == (line,)

    def test_quantity_above_stock_is_rejected(self, builder, paneer):
        builder.add_item(paneer, 1)

        with pytest.raises(InsufficientStockError) as exc:
            builder.add_item(paneer, 6)

        assert exc.value.requested == 6
        assert exc.value.available == 5
        assert len(builder) == 1

    def test_out_of_stock_item_is_rejected(self, builder):
        with pytest.raises(InsufficientStockError):
            builder.add_item(make_item(stock=0), 1)
        assert builder.is_empty

    def test_quantity_equal_to_stock_is_accepted(self, builder, dal):
        builder.add_item(dal, 3)

        assert builder.lines[0].quantity == 3

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
    def test_non_positive_or_non_integer_quantity_is_rejected(self, builder, paneer, quantity):
        with pytest.raises(InvalidQuantityError):
            builder.add_item(paneer, quantity)
        assert builder.is_empty

    def test_later_catalog_changes_do_not_alter_lines(self, builder, paneer):
        builder.add_item(paneer, 2)
        repriced = make_item(paneer.item_id, paneer.name, "Restaurant", "999", 5)

        builder.add_item(repriced, 1)

        assert [line.unit_price for line in builder.lines] == [Decimal("100"), Decimal("999")]
        assert builder.breakdown.subtotal == Decimal("1199")

    def test_breakdown_follows_every_mutation(self, builder, paneer, dal):
        builder.add_item(paneer, 2)
        builder.add_item(dal, 1)

        assert builder.breakdown.grand_total == Decimal("320.00")

        builder.remove_item(1)

        assert builder.breakdown.subtotal == Decimal("200")


class TestRemoveItem:

    def test_removes_exactly_that_line_and_keeps_order(self, builder, paneer, dal, shirt):
        builder.add_item(paneer, 1)
        builder.add_item(dal, 1)
        builder.add_item(shirt, 1)

        removed = builder.remove_item(1)

        assert removed.item_id == "itm-dal"
        assert [line.item_id for line in builder.lines] == ["itm-paneer", "itm-shirt"]

    @pytest.mark.parametrize("index", [2, 5, -1])
    def test_out_of_range_index_is_rejected(self, builder, paneer, dal, index):
        builder.add_item(paneer, 1)
        builder.add_item(dal, 1)
        before = builder.lines

        with pytest.raises(IndexOutOfRangeError):
            builder.remove_item(index)

        assert builder.lines == before

    def test_remove_from_empty_draft(self, builder):
        with pytest.raises(IndexOutOfRangeError):
            builder.remove_item(0)


class TestClear:

    def test_clear_empties_draft(self, builder, paneer):
        builder.add_item(paneer, 1)

        builder.clear()

        assert builder.is_empty
        assert builder.breakdown.grand_total == 0
