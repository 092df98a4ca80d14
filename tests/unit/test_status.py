"""
Tests for the order status machine.
"""

from unittest.mock import Mock

import httpx
import pytest

from order_console.clients import LaundryOrderClient
from order_console.exceptions import InvalidTransitionError
from order_console.models import OrderStatus
from order_console.status import (
    TERMINAL_STATES,
    OrderStatusMachine,
    advance_order_status,
    can_transition,
    validate_transition,
)
from tests.helpers import connect_error, http_status_error

LEGAL = {
    (OrderStatus.PENDING, OrderStatus.PICKED_UP),
    (OrderStatus.PICKED_UP, OrderStatus.READY),
    (OrderStatus.READY, OrderStatus.DELIVERED),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.PICKED_UP, OrderStatus.CANCELLED),
    (OrderStatus.READY, OrderStatus.CANCELLED),
}

ALL_PAIRS = [(current, new) for current in OrderStatus for new in OrderStatus]


class TestTransitionTable:

    @pytest.mark.parametrize("current,new", ALL_PAIRS)
    def test_only_listed_pairs_are_legal(self, current, new):
        if (current, new) in LEGAL:
            validate_transition(current, new)
            assert can_transition(current, new)
        else:
            with pytest.raises(InvalidTransitionError):
                validate_transition(current, new)
            assert not can_transition(current, new)

    def test_pending_to_delivered_is_rejected(self):
        with pytest.raises(InvalidTransitionError):
            validate_transition(OrderStatus.PENDING, OrderStatus.DELIVERED)

    def test_terminal_states(self):
        assert TERMINAL_STATES == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

    def test_accepts_plain_strings(self):
        assert can_transition("pending", "picked_up")


class TestOrderStatusMachine:

    def test_full_lifecycle(self):
        machine = OrderStatusMachine()

        for status in (OrderStatus.PICKED_UP, OrderStatus.READY, OrderStatus.DELIVERED):
            machine.transition(status)

        assert machine.status == OrderStatus.DELIVERED
        assert machine.is_terminal

    def test_failed_transition_leaves_state_unchanged(self):
        machine = OrderStatusMachine(OrderStatus.DELIVERED)

        with pytest.raises(InvalidTransitionError):
            machine.transition(OrderStatus.CANCELLED)

        assert machine.status == OrderStatus.DELIVERED


class TestAdvanceOrderStatus:

    @pytest.fixture
    def client(self):
        return Mock(spec=LaundryOrderClient)

    def test_reports_legal_transition_to_backend(self, client):
        status = advance_order_status(client, "o-1", OrderStatus.PENDING, OrderStatus.PICKED_UP, "Ravi")

        assert status == OrderStatus.PICKED_UP
        client.update_status.assert_called_once_with("o-1", OrderStatus.PICKED_UP)

    def test_illegal_transition_never_reaches_backend(self, client):
        with pytest.raises(InvalidTransitionError):
            advance_order_status(client, "o-1", OrderStatus.CANCELLED, OrderStatus.READY, "Ravi")

        client.update_status.assert_not_called()

    def test_backend_refusal_is_invalid_transition(self, client):
        client.update_status.side_effect = http_status_error(409, "PATCH")

        with pytest.raises(InvalidTransitionError) as exc:
            advance_order_status(client, "o-1", OrderStatus.READY, OrderStatus.DELIVERED, "Ravi")

        assert "409" in str(exc.value)

    def test_backend_outage_propagates(self, client):
        client.update_status.side_effect = http_status_error(503, "PATCH")

        with pytest.raises(httpx.HTTPStatusError):
            advance_order_status(client, "o-1", OrderStatus.READY, OrderStatus.DELIVERED, "Ravi")

    def test_unreachable_backend_propagates(self, client):
        client.update_status.side_effect = connect_error()

        with pytest.raises(httpx.ConnectError):
            advance_order_status(client, "o-1", OrderStatus.PENDING, OrderStatus.CANCELLED, "Ravi")
