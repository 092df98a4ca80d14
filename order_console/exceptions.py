"""
exceptions.py — Error Taxonomy of the Order Console

Validation errors are raised synchronously, before any network effect.
Collaborator failures during a commit are NOT raised; they are recorded as
data on the CommitResult (see models.InventoryCallFailure / OrderCreationFailure).
"""


class OrderConsoleError(Exception):
    """Base class for all errors raised by the order console."""


class InsufficientStockError(OrderConsoleError):
    """Requested quantity exceeds the last-known stock of a catalog item."""

    def __init__(self, item_id: str, requested: int, available: int):
        self.item_id = item_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for item {item_id}: requested {requested}, only {available} available."
        )


class IndexOutOfRangeError(OrderConsoleError, IndexError):
    """A draft line index does not refer to an existing line."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Line index {index} out of range for draft with {size} line(s).")


class InvalidQuantityError(OrderConsoleError, ValueError):
    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}.")


class EmptyOrderError(OrderConsoleError):
    def __init__(self):
        super().__init__("Cannot commit an order without line items.")


class CatalogItemNotFoundError(OrderConsoleError, LookupError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Catalog item {item_id} not found.")


class InvalidTransitionError(OrderConsoleError):
    """A status change that the transition table (or the backend) does not allow."""

    def __init__(self, current, new, detail: str = None):
        self.current = current
        self.new = new
        self.detail = detail
        message = f"Invalid status transition: {getattr(current, 'value', current)} -> {getattr(new, 'value', new)}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
