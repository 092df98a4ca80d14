"""
Global test configuration.

Provides catalog/context fixtures, collaborator doubles for unit tests and a
console wired to the in-process mock backend for integration tests.
"""
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from mock_services import mock_inventory_service, mock_order_service
from mock_services.mock_backend import app as mock_backend_app
from order_console import config
from order_console.catalog import CatalogIndex
from order_console.clients import InventoryClient, LaundryOrderClient, RestaurantOrderClient
from order_console.models import Destination, OrderContext, ServiceType
from tests.helpers import make_item


@pytest.fixture
def room_context():
    return OrderContext(
        service_type=ServiceType.ROOM_SERVICE,
        room_number="204",
        guest_name="Jane Doe",
        guest_phone="9000000001",
        booking_id="bk-1",
        grc_no="GRC-2053",
    )


@pytest.fixture
def paneer():
    return make_item("itm-paneer", "Paneer Tikka", "Restaurant", "100", 5)


@pytest.fixture
def dal():
    return make_item("itm-dal", "Dal Makhani", "Restaurant", "50", 3)


@pytest.fixture
def shirt():
    return make_item("itm-shirt", "Shirt Wash & Iron", "Laundry", "60", 100)


@pytest.fixture
def towel():
    return make_item("itm-towel", "Bath Towel", "Housekeeping", "150", 12)


@pytest.fixture
def inventory_double():
    """InventoryClient double: every call succeeds unless a side_effect is set."""
    client = Mock(spec=InventoryClient)
    client.list_items.return_value = []
    return client


@pytest.fixture
def order_client_doubles():
    restaurant = Mock(spec=RestaurantOrderClient)
    restaurant.create_group_order.return_value = "rest-1"
    laundry = Mock(spec=LaundryOrderClient)
    laundry.create_group_order.return_value = "laun-1"
    return {Destination.RESTAURANT: restaurant, Destination.LAUNDRY: laundry}


@pytest.fixture
def catalog_double(inventory_double):
    return CatalogIndex(inventory_double)


@pytest.fixture
def mock_backend():
    """In-process mock hotel backend with freshly seeded state."""
    mock_inventory_service.reset_inventory()
    mock_order_service.reset_orders()
    with TestClient(mock_backend_app) as client:
        yield client


@pytest.fixture(autouse=True)
def session_token(monkeypatch):
    monkeypatch.setattr(config, "API_TOKEN", "test-token")
    return "test-token"
