"""
builder.py — Draft Order Builder

Accumulates the line items a staff member selects for one room into a draft.
Stock is checked against the last-known catalog snapshot only; the real race
with other orders is settled by the stock deduction at commit time.
"""

import logging
from typing import Optional, Tuple

from .exceptions import IndexOutOfRangeError, InsufficientStockError, InvalidQuantityError
from .models import CatalogItem, DraftLineItem, OrderContext, PricingBreakdown
from .pricing import compute_pricing

log = logging.getLogger(__name__)


class OrderBuilder:
    """
    Draft order for a single room, owned by a single user.

    Lines are never edited in place; changing a quantity means removing the
    line and adding it again, which also re-captures the price.
    """

    def __init__(self, context: OrderContext):
        self.context = context
        self._lines = []
        self.breakdown = compute_pricing(self._lines)

    @property
    def lines(self) -> Tuple[DraftLineItem, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self):
        return len(self._lines)

    def _reprice(self) -> PricingBreakdown:
        self.breakdown = compute_pricing(self._lines)
        return self.breakdown

    def add_item(self, item: CatalogItem, quantity: int = 1, note: Optional[str] = None) -> DraftLineItem:
        """
        Appends a line for `item`, capturing its current price and category.

        Raises:
            InvalidQuantityError: If quantity is not a positive integer.
            InsufficientStockError: If quantity exceeds the item's snapshot stock.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantityError(quantity)
        if quantity > item.stock:
            log.info(f"[Room: {self.context.room_number}] Nicht genug Bestand für {item.name}: {quantity} > {item.stock}.")
            raise InsufficientStockError(item.item_id, quantity, item.stock)

        line = DraftLineItem(
            item_id=item.item_id,
            item_name=item.name,
            category=item.category,
            quantity=quantity,
            unit_price=item.unit_price,
            note=note,
        )
        self._lines.append(line)
        self._reprice()
        return line

    def remove_item(self, index: int) -> DraftLineItem:
        # Negative indices are rejected rather than counted from the end.
        if not isinstance(index, int) or not 0 <= index < len(self._lines):
            raise IndexOutOfRangeError(index, len(self._lines))
        line = self._lines.pop(index)
        self._reprice()
        return line

    def clear(self):
        self._lines = []
        self._reprice()
