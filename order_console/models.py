"""
models.py — Data Models for Order Composition and Fulfillment

This module defines the data structures used while a guest order is composed,
priced, committed and tracked. It uses Pydantic models to ensure type safety
and automatic validation of both backend records and API payloads.

Models:
    - CatalogItem: An orderable item in the catalog snapshot.
    - DraftLineItem: One catalog item at a chosen quantity within a draft.
    - OrderContext: Room/guest identity and service type shared by all lines.
    - PricingBreakdown: Derived subtotal, tax, service charge and grand total.
    - CommittedOrder: The persisted result of a commit.
    - InventoryCallFailure / OrderCreationFailure: Recorded collaborator failures.
    - CommitResult: Aggregate outcome of a commit.
    - NewDraftRequest / AddItemRequest / StatusChangeRequest: API request payloads.
"""

import re
import uuid
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_CATEGORY = "Restaurant"


class ServiceType(str, Enum):
    ROOM_SERVICE = "room_service"
    LAUNDRY = "laundry"


class Destination(str, Enum):
    """Downstream system a group of line items is routed to."""
    RESTAURANT = "restaurant"
    LAUNDRY = "laundry"
    LOCAL = "local"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PICKED_UP = "picked_up"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CommitOutcome(str, Enum):
    COMMITTED = "committed"
    PARTIALLY_COMMITTED = "partially_committed"
    REJECTED = "rejected"


class CatalogItem(BaseModel):
    """
    Represents an orderable item in the catalog snapshot.

    The snapshot is advisory: the inventory backend owns the authoritative stock.

    Attributes:
        item_id (str): Backend identifier of the item.
        name (str): Display name.
        category (str): Routing category, e.g. "Restaurant" or "Laundry".
        unit_price (Decimal): Current selling price. Never negative.
        stock (int): Last-known stock level. Never negative.
    """
    model_config = ConfigDict(frozen=True)

    item_id: str
    name: str
    category: str = DEFAULT_CATEGORY
    unit_price: Decimal = Field(Decimal("0"), ge=0)
    stock: int = Field(0, ge=0)

    @classmethod
    def from_backend(cls, record: dict) -> "CatalogItem":
        """
        Builds a CatalogItem from an inventory record.

        The inventory API is not consistent in its field names, so the usual
        aliases are accepted: `_id`/`id`, `itemName`/`name`,
        `sellingPrice`/`price` and `currentStock`.

        Raises:
            ValueError: If the record has no id or a malformed price or stock
                (pydantic's ValidationError is a ValueError as well).
        """
        raw_id = record.get("_id") or record.get("id")
        if not raw_id:
            raise ValueError(f"Inventory record without _id/id: {record!r}")
        price = record.get("sellingPrice") or record.get("price") or 0
        stock = record.get("currentStock") or 0
        try:
            unit_price = Decimal(str(price))
            stock = max(int(stock), 0)
        except (ArithmeticError, TypeError) as e:
            raise ValueError(f"Inventory record {raw_id} has malformed price/stock: {e}") from e
        return cls(
            item_id=str(raw_id),
            name=record.get("itemName") or record.get("name") or "",
            category=record.get("category") or DEFAULT_CATEGORY,
            unit_price=unit_price,
            stock=stock,
        )


class DraftLineItem(BaseModel):
    """
    One catalog item at a chosen quantity within a draft order.

    Price and category are captured when the line is added; later catalog
    refreshes never alter an existing line.
    """
    model_config = ConfigDict(frozen=True)

    item_id: str
    item_name: str
    category: str
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    note: Optional[str] = None

    @computed_field
    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderContext(BaseModel):
    """
    Room/guest identity shared by every line of an order.

    Attributes:
        service_type (ServiceType): Room service or laundry.
        room_number (str): Room the order is for.
        guest_name (str, optional): Name on the booking.
        guest_phone (str, optional): Mobile number on the booking.
        booking_id (str, optional): Backend booking identifier.
        grc_no (str, optional): Guest registration card number.
        staff_name (str): Staff member or desk placing the order.
    """
    service_type: ServiceType = ServiceType.ROOM_SERVICE
    room_number: str
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None
    booking_id: Optional[str] = None
    grc_no: Optional[str] = None
    staff_name: str = "Room Service"

    def label(self) -> str:
        return "Laundry" if self.service_type == ServiceType.LAUNDRY else "Room Service"

    def reason(self) -> str:
        """Reason string attached to every stock movement of this order."""
        return f"{self.label()} - Room {self.room_number}"

    def notes(self) -> str:
        return f"Order by {self.guest_name or 'Guest'}"

    def table_no(self) -> str:
        """Pseudo table number the restaurant uses for room orders, e.g. room 7 -> R007."""
        digits = re.sub(r"\D", "", str(self.room_number))
        return f"R{digits.zfill(3)}"


class PricingBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    tax_amount: Decimal
    service_charge_amount: Decimal
    grand_total: Decimal


class InventoryCallFailure(BaseModel):
    """A stock-deduction call that did not succeed during a commit."""
    item_id: str
    reason: str
    status_code: Optional[int] = None


class OrderCreationFailure(BaseModel):
    """A group order-creation call that did not succeed during a commit."""
    category: str
    destination: Destination
    reason: str
    status_code: Optional[int] = None


class CommittedOrder(BaseModel):
    """
    The result of a (fully or partially) successful commit.

    Attributes:
        reference (str): Console-side reference used in logs and stock notes.
        context (OrderContext): Room/guest context of the order.
        lines (List[DraftLineItem]): Line items that were routed.
        breakdown (PricingBreakdown): Authoritative pricing computed at commit time.
        group_orders (Dict[Destination, str]): Backend order id per destination group created.
        status (OrderStatus): Lifecycle state; the backend is the system of record afterwards.
    """
    reference: str = Field(default_factory=lambda: f"ord-{uuid.uuid4().hex[:12]}")
    context: OrderContext
    lines: List[DraftLineItem]
    breakdown: PricingBreakdown
    group_orders: Dict[Destination, str] = Field(default_factory=dict)
    status: OrderStatus = OrderStatus.PENDING


class CommitResult(BaseModel):
    """
    Aggregate outcome of a commit.

    A PARTIALLY_COMMITTED result lists every failed call in the order it was
    issued. Calls that did succeed are not rolled back.
    """
    outcome: CommitOutcome
    order: Optional[CommittedOrder] = None
    inventory_failures: List[InventoryCallFailure] = Field(default_factory=list)
    order_failures: List[OrderCreationFailure] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.outcome == CommitOutcome.COMMITTED

    @property
    def failed_item_ids(self) -> List[str]:
        return [failure.item_id for failure in self.inventory_failures]

    @property
    def failed_categories(self) -> List[str]:
        return [failure.category for failure in self.order_failures]


# --- API payloads ---

class NewDraftRequest(BaseModel):
    """
    Opens a new draft order for a room.

    Attributes:
        serviceType (ServiceType): "room_service" or "laundry".
        roomNumber (str): Room number.
        guestName / guestPhone / bookingId / grcNo (str, optional): Booking details.
        staffName (str): Staff member placing the order.
    """
    serviceType: ServiceType = ServiceType.ROOM_SERVICE
    roomNumber: str
    guestName: Optional[str] = None
    guestPhone: Optional[str] = None
    bookingId: Optional[str] = None
    grcNo: Optional[str] = None
    staffName: str = "Room Service"

    def to_context(self) -> OrderContext:
        return OrderContext(
            service_type=self.serviceType,
            room_number=self.roomNumber,
            guest_name=self.guestName,
            guest_phone=self.guestPhone,
            booking_id=self.bookingId,
            grc_no=self.grcNo,
            staff_name=self.staffName,
        )


class AddItemRequest(BaseModel):
    itemId: str
    quantity: int = 1  # range checked by the order builder
    note: Optional[str] = None


class StatusChangeRequest(BaseModel):
    currentStatus: OrderStatus
    newStatus: OrderStatus
    staffName: str
