"""
Tests for the mock hotel backend scenarios the console tests rely on.
"""

from mock_services import mock_inventory_service


class TestMockInventory:

    def test_requires_bearer_token(self, mock_backend):
        assert mock_backend.get("/api/inventory/items").status_code == 401

    def test_stock_never_goes_negative(self, mock_backend):
        response = mock_backend.put(
            "/api/inventory/items/itm-towel/stock",
            json={"quantity": -13, "type": "OUT", "reason": "Room Service - Room 1"},
            headers={"Authorization": "Bearer t"},
        )

        assert response.status_code == 400
        assert mock_inventory_service.ITEMS["itm-towel"]["currentStock"] == 12

    def test_fail_marker(self, mock_backend):
        response = mock_backend.put(
            "/api/inventory/items/itm-FAIL-cake/stock",
            json={"quantity": -1, "type": "OUT", "reason": "r"},
            headers={"Authorization": "Bearer t"},
        )

        assert response.status_code == 500


class TestMockOrders:

    def test_illegal_status_change_is_conflict(self, mock_backend):
        headers = {"Authorization": "Bearer t"}
        order = mock_backend.post("/api/laundry/orders", json={"requestedByName": "Sam"}, headers=headers).json()

        response = mock_backend.patch(f"/api/laundry/orders/{order['_id']}/status",
                                      json={"laundryStatus": "delivered"}, headers=headers)

        assert response.status_code == 409
