"""
mock_order_service.py — Mock Implementation of the Restaurant and Laundry Order Services (REST API)

This module provides simulated order endpoints for testing the order console.
Orders are kept in memory; status changes are validated like the real backend
does, so illegal transitions are refused with HTTP 409.

Simulation Scenarios:
    • Successful order creation (restaurant and laundry)
    • Guest name "REJECT" → Server failure (HTTP 500)
    • Status change against the stored status (HTTP 409 when illegal)

Endpoints:
    POST   /api/restaurant-orders/create
    GET    /api/restaurant-orders, /api/restaurant-orders/{id}
    PATCH  /api/restaurant-orders/{id}/status
    DELETE /api/restaurant-orders/{id}
    POST   /api/laundry/orders
    GET    /api/laundry/orders, /api/laundry/orders/{id}
    PATCH  /api/laundry/orders/{id}/status
    DELETE /api/laundry/orders/{id}

Port:
    Default: 8003 (HTTP)
"""

import logging
import uuid

from fastapi import APIRouter, Body, FastAPI, Header, HTTPException

log = logging.getLogger(__name__)

ALLOWED = {
    "pending": {"picked_up", "cancelled"},
    "picked_up": {"ready", "cancelled"},
    "ready": {"delivered", "cancelled"},
    "delivered": set(),
    "cancelled": set(),
}

RESTAURANT_ORDERS = {}
LAUNDRY_ORDERS = {}


def reset_orders():
    RESTAURANT_ORDERS.clear()
    LAUNDRY_ORDERS.clear()


def _require_token(authorization):
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token.")


def _create(store: dict, payload: dict, guest: str, status_field: str) -> dict:
    if guest == "REJECT":
        log.error(f"[OS] Simulierter Fehler bei Auftrag für {guest}.")
        raise HTTPException(status_code=500, detail={"errorCode": "order_failed"})
    order_id = uuid.uuid4().hex[:24]
    store[order_id] = {"_id": order_id, status_field: "pending", **payload}
    log.info(f"[OS] Auftrag {order_id} angelegt.")
    return store[order_id]


def _get(store: dict, order_id: str) -> dict:
    if order_id not in store:
        raise HTTPException(status_code=404, detail={"errorCode": "order_not_found"})
    return store[order_id]


def _change_status(store: dict, order_id: str, status_field: str, new_status: str) -> dict:
    order = _get(store, order_id)
    current = order.get(status_field, "pending")
    if new_status not in ALLOWED.get(current, set()):
        log.warning(f"[OS] Statuswechsel {current} -> {new_status} für {order_id} abgelehnt.")
        raise HTTPException(status_code=409, detail={"errorCode": "invalid_transition"})
    order[status_field] = new_status
    return order


router = APIRouter()


# --- Restaurant orders ---
@router.post("/api/restaurant-orders/create", status_code=201)
def create_restaurant_order(payload: dict = Body(...), authorization: str = Header(None)):
    _require_token(authorization)
    return {"success": True, "order": _create(RESTAURANT_ORDERS, payload, payload.get("guestName"), "status")}


@router.get("/api/restaurant-orders")
def list_restaurant_orders(status: str = None, authorization: str = Header(None)):
    _require_token(authorization)
    return [o for o in RESTAURANT_ORDERS.values() if status is None or o.get("status") == status]


@router.get("/api/restaurant-orders/{order_id}")
def get_restaurant_order(order_id: str, authorization: str = Header(None)):
    _require_token(authorization)
    return _get(RESTAURANT_ORDERS, order_id)


@router.patch("/api/restaurant-orders/{order_id}/status")
def update_restaurant_status(order_id: str, payload: dict = Body(...), authorization: str = Header(None)):
    _require_token(authorization)
    return _change_status(RESTAURANT_ORDERS, order_id, "status", payload.get("status"))


@router.delete("/api/restaurant-orders/{order_id}")
def delete_restaurant_order(order_id: str, authorization: str = Header(None)):
    _require_token(authorization)
    _get(RESTAURANT_ORDERS, order_id)
    del RESTAURANT_ORDERS[order_id]
    return {"success": True}


# --- Laundry orders ---
@router.post("/api/laundry/orders", status_code=201)
def create_laundry_order(payload: dict = Body(...), authorization: str = Header(None)):
    _require_token(authorization)
    payload.pop("laundryStatus", None)
    return _create(LAUNDRY_ORDERS, payload, payload.get("requestedByName"), "laundryStatus")


@router.get("/api/laundry/orders")
def list_laundry_orders(status: str = None, authorization: str = Header(None)):
    _require_token(authorization)
    orders = [o for o in LAUNDRY_ORDERS.values() if status is None or o.get("laundryStatus") == status]
    return {"orders": orders}


@router.get("/api/laundry/orders/{order_id}")
def get_laundry_order(order_id: str, authorization: str = Header(None)):
    _require_token(authorization)
    return _get(LAUNDRY_ORDERS, order_id)


@router.patch("/api/laundry/orders/{order_id}/status")
def update_laundry_status(order_id: str, payload: dict = Body(...), authorization: str = Header(None)):
    _require_token(authorization)
    return _change_status(LAUNDRY_ORDERS, order_id, "laundryStatus", payload.get("laundryStatus"))


@router.delete("/api/laundry/orders/{order_id}")
def delete_laundry_order(order_id: str, authorization: str = Header(None)):
    _require_token(authorization)
    _get(LAUNDRY_ORDERS, order_id)
    del LAUNDRY_ORDERS[order_id]
    return {"success": True}


app = FastAPI(title="Mock Order Service")
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8003)
