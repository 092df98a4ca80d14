"""
status.py — Lifecycle of Committed Orders

    pending -> picked_up -> ready -> delivered
    pending | picked_up | ready -> cancelled

`delivered` and `cancelled` are terminal. Transitions are never inferred:
each one is an explicit staff action, checked against the table below and
then reported to the backend, which has the final word.
"""

import logging
from typing import Dict, FrozenSet

import httpx

from .clients import OrderServiceClient
from .exceptions import InvalidTransitionError
from .models import OrderStatus

log = logging.getLogger(__name__)

TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PICKED_UP, OrderStatus.CANCELLED}),
    OrderStatus.PICKED_UP: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATES: FrozenSet[OrderStatus] = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)


def can_transition(current, new) -> bool:
    return OrderStatus(new) in TRANSITIONS[OrderStatus(current)]


def validate_transition(current, new):
    """Raises InvalidTransitionError unless current -> new is in the transition table."""
    current, new = OrderStatus(current), OrderStatus(new)
    if new not in TRANSITIONS[current]:
        detail = "terminal state" if current in TERMINAL_STATES else None
        raise InvalidTransitionError(current, new, detail)


class OrderStatusMachine:
    """Local view of one order's status."""

    def __init__(self, status: OrderStatus = OrderStatus.PENDING):
        self.status = OrderStatus(status)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def transition(self, new_status) -> OrderStatus:
        """Applies new_status; on an illegal move the status is left unchanged."""
        validate_transition(self.status, new_status)
        self.status = OrderStatus(new_status)
        return self.status


def advance_order_status(
        client: OrderServiceClient,
        order_id: str,
        current,
        new,
        staff_name: str
) -> OrderStatus:
    """
    Performs a staff-triggered status change of a committed order.

    The transition is checked locally first; only a legal transition is sent
    to the backend. A 4xx answer means the backend refused the transition
    (for example because its own current status differs) and is reported as
    InvalidTransitionError.

    Args:
        client (OrderServiceClient): Client of the order's service (restaurant or laundry).
        order_id (str): Backend id of the order.
        current (OrderStatus): Status the staff member sees.
        new (OrderStatus): Requested status.
        staff_name (str): Staff member performing the action (audit log).

    Returns:
        OrderStatus: The new status.

    Raises:
        InvalidTransitionError: If the table or the backend rejects the transition.
        httpx.HTTPError: If the backend fails (5xx) or cannot be reached.
    """
    machine = OrderStatusMachine(current)
    log_prefix = f"[Order: {order_id}]"
    try:
        validate_transition(machine.status, new)
    except InvalidTransitionError:
        log.warning(f"{log_prefix} Statuswechsel {machine.status.value} -> {OrderStatus(new).value} durch {staff_name} abgelehnt.")
        raise

    try:
        client.update_status(order_id, new)
    except httpx.HTTPStatusError as e:
        if e.response.status_code < 500:
            raise InvalidTransitionError(machine.status, new, f"rejected by backend: {e.response.status_code}") from e
        raise

    machine.transition(new)
    log.info(f"{log_prefix} Status {OrderStatus(current).value} -> {machine.status.value} durch {staff_name}.")
    return machine.status
