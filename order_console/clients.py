"""
This module provides communication clients for the hotel backend used by the order console:
- Inventory Service (catalog items, stock movements)
- Restaurant Order Service (KOT / restaurant orders)
- Laundry Order Service (laundry orders)
All of them are REST endpoints on the same backend and share the bearer token of the
current session. Each class encapsulates its payload format, error logging and connection
management; errors are logged and re-raised for the caller to classify.
"""

import logging
from typing import Callable, List, Optional

import httpx

from . import config
from .models import DraftLineItem, OrderContext, OrderStatus

log = logging.getLogger(__name__)


def session_token() -> str:
    """Bearer token of the current console session."""
    return config.API_TOKEN


def _money(amount) -> float:
    return float(amount)


def _extract_id(body) -> Optional[str]:
    """Pulls the created order id out of the backend's (inconsistent) create responses."""
    if not isinstance(body, dict):
        return None
    if isinstance(body.get("order"), dict):
        return _extract_id(body["order"])
    for key in ("_id", "id", "orderId"):
        if body.get(key):
            return str(body[key])
    return None


class BackendClient:
    """
    Base client for the hotel backend (REST API).
    Holds the HTTP session, timeout configuration and bearer authentication.
    """
    def __init__(
            self,
            http: httpx.Client = None,
            base_url: str = None,
            token_provider: Callable[[], str] = session_token
    ):
        """
        Initializes the HTTP client with proper timeout configuration.

        Args:
            http (httpx.Client, optional): Pre-built session (tests, shared connection pools).
            base_url (str, optional): Backend base URL, defaults to config.API_BASE_URL.
            token_provider (Callable[[], str]): Returns the bearer token for each request.
        """
        self._owns_http = http is None
        if http is None:
            timeout_config = httpx.Timeout(config.HTTP_CONNECT_TIMEOUT, read=config.HTTP_READ_TIMEOUT)
            http = httpx.Client(base_url=base_url or config.API_BASE_URL, timeout=timeout_config)
        self.client = http
        self._token_provider = token_provider

    def close(self):
        """Closes the HTTP client session if this client created it."""
        if self._owns_http:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self._token_provider()}"}

    def _request(self, method: str, path: str, log_prefix: str, **kwargs) -> httpx.Response:
        """
        Sends a request and raises on any non-2xx status.

        Raises:
            httpx.TimeoutException: If the backend does not answer within the configured timeout.
            httpx.TransportError: If the backend cannot be reached.
            httpx.HTTPStatusError: If the backend returns an error status (4xx or 5xx).
        """
        try:
            response = self.client.request(method, path, headers=self._headers(), **kwargs)
            response.raise_for_status()  # Löst HTTPStatusError bei 4xx/5xx aus
            return response
        except httpx.TimeoutException:
            log.error(f"{log_prefix} Backend Timeout bei {method} {path}. Ergebnis unbekannt.")
            raise
        except httpx.HTTPStatusError as e:
            if e.response.status_code < 500:
                log.warning(f"{log_prefix} Anfrage abgelehnt ({e.response.status_code}) bei {method} {path}: {e.response.text}")
            else:
                log.error(f"{log_prefix} Server-Fehler ({e.response.status_code}) bei {method} {path}.")
            raise
        except httpx.TransportError as e:
            log.error(f"{log_prefix} Backend nicht erreichbar bei {method} {path}: {e}")
            raise


# --- Inventory Client ---
class InventoryClient(BackendClient):
    """
    Client for the inventory endpoints.
    Reads the item catalog and records stock movements.
    """

    def list_items(self) -> List[dict]:
        """
        Fetches all inventory items.
        Returns:
            list[dict]: Raw inventory records (see CatalogItem.from_backend for the accepted fields).
        """
        body = self._request("GET", "/api/inventory/items", "[Inventory]").json()
        if isinstance(body, dict):
            body = body.get("items", [])
        return body if isinstance(body, list) else []

    def adjust_stock(self, item_id: str, delta: int, reason: str, notes: str = "") -> None:
        """
        Records a stock movement for one item.
        Args:
            item_id (str): Inventory item id.
            delta (int): Signed quantity; negative values are deductions ("OUT").
            reason (str): Reason shown in the stock ledger, e.g. "Room Service - Room 204".
            notes (str): Free-text note, e.g. "Order by Jane Doe".
        Raises:
            httpx.HTTPError: If the movement was not accepted.
        """
        payload = {
            "quantity": delta,
            "type": "OUT" if delta < 0 else "IN",
            "reason": reason,
            "notes": notes,
        }
        self._request("PUT", f"/api/inventory/items/{item_id}/stock", f"[Item: {item_id}]", json=payload)
        log.info(f"[Item: {item_id}] Bestand um {delta} angepasst ({reason}).")


# --- Order Clients ---
class OrderServiceClient(BackendClient):
    """
    Shared CRUD and status operations of the order endpoints.
    Subclasses define the collection path, the status field and the create payload.
    """
    collection_path = ""
    create_path = ""
    status_field = "status"

    def build_payload(self, lines: List[DraftLineItem], context: OrderContext, subtotal) -> dict:
        raise NotImplementedError

    def create_group_order(self, lines: List[DraftLineItem], context: OrderContext, subtotal) -> str:
        """
        Creates one downstream order for a group of line items.
        Args:
            lines (list[DraftLineItem]): Lines routed to this service.
            context (OrderContext): Room/guest context.
            subtotal (Decimal): Subtotal of this group only.
        Returns:
            str: Backend id of the created order ("" if the backend did not return one).
        Raises:
            httpx.HTTPError: If the order was not created.
        """
        payload = self.build_payload(lines, context, subtotal)
        log_prefix = f"[Room: {context.room_number}]"
        response = self._request("POST", self.create_path or self.collection_path, log_prefix, json=payload)
        try:
            order_id = _extract_id(response.json()) if response.content else None
        except ValueError:
            # Created, but the body is not JSON; the id has to be looked up by hand.
            log.warning(f"{log_prefix} Antwort von {self.collection_path} ist kein JSON, Auftrags-ID unbekannt.")
            order_id = None
        log.info(f"{log_prefix} Auftrag bei {self.collection_path} angelegt (ID: {order_id}).")
        return order_id or ""

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        self._request(
            "PATCH",
            f"{self.collection_path}/{order_id}/status",
            f"[Order: {order_id}]",
            json={self.status_field: OrderStatus(status).value},
        )

    def get_order(self, order_id: str) -> dict:
        return self._request("GET", f"{self.collection_path}/{order_id}", f"[Order: {order_id}]").json()

    def list_orders(self, **filters) -> List[dict]:
        params = {key: value for key, value in filters.items() if value is not None}
        body = self._request("GET", self.collection_path, "[Orders]", params=params).json()
        if isinstance(body, dict):
            body = body.get("orders", [])
        return body if isinstance(body, list) else []

    def delete_order(self, order_id: str) -> None:
        self._request("DELETE", f"{self.collection_path}/{order_id}", f"[Order: {order_id}]")


class RestaurantOrderClient(OrderServiceClient):
    """Client for restaurant orders (kitchen order tickets for room service)."""
    collection_path = "/api/restaurant-orders"
    create_path = "/api/restaurant-orders/create"

    def build_payload(self, lines, context, subtotal) -> dict:
        return {
            "staffName": context.staff_name,
            "phoneNumber": context.guest_phone or "",
            "tableNo": context.table_no(),
            "items": [
                {"itemId": line.item_id, "quantity": line.quantity, "price": _money(line.unit_price)}
                for line in lines
            ],
            "notes": f"{context.label()} - {context.guest_name or 'Guest'}",
            "amount": _money(subtotal),
            "discount": 0,
            "isMembership": False,
            "isLoyalty": False,
            "bookingId": context.booking_id,
            "grcNo": context.grc_no,
            "roomNumber": context.room_number,
            "guestName": context.guest_name,
            "guestPhone": context.guest_phone,
        }


class LaundryOrderClient(OrderServiceClient):
    """Client for laundry orders."""
    collection_path = "/api/laundry/orders"
    status_field = "laundryStatus"

    def build_payload(self, lines, context, subtotal) -> dict:
        return {
            "grcNo": context.grc_no,
            "roomNumber": context.room_number,
            "bookingId": context.booking_id,
            "requestedByName": context.guest_name,
            "serviceType": context.service_type.value,
            "items": [
                {
                    "itemId": line.item_id,
                    "itemName": line.item_name,
                    "quantity": line.quantity,
                    "price": _money(line.unit_price),
                    "notes": line.note or "",
                }
                for line in lines
            ],
            "totalAmount": _money(subtotal),
            "laundryStatus": OrderStatus.PENDING.value,
        }
