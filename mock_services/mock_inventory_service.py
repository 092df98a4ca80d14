"""
mock_inventory_service.py — Mock Implementation of the Inventory Service (REST API)

This module provides a simulated Inventory Service for testing the order console.
It serves the same endpoints as the hotel backend's inventory API, backed by an
in-memory item table.

The mock simulates common inventory-related scenarios:
    • Listing items with the backend's field names (_id, itemName, sellingPrice, currentStock)
    • Successful stock movements
    • Stock that would drop below zero (HTTP 400)
    • Unknown item (HTTP 404)
    • Backend failure for any item id containing "FAIL" (HTTP 500)

Endpoints:
    GET /api/inventory/items              — Lists all items.
    PUT /api/inventory/items/{id}/stock   — Records a stock movement.

Port:
    Default: 8002 (HTTP)
"""

import copy
import logging

from fastapi import APIRouter, FastAPI, Header, HTTPException
from pydantic import BaseModel

log = logging.getLogger(__name__)

SEED_ITEMS = [
    {"_id": "itm-paneer", "itemName": "Paneer Tikka", "category": "Restaurant", "sellingPrice": 280, "currentStock": 25},
    {"_id": "itm-dal", "itemName": "Dal Makhani", "category": "Restaurant", "sellingPrice": 220, "currentStock": 40},
    {"_id": "itm-water", "itemName": "Mineral Water", "sellingPrice": 40, "currentStock": 200},
    {"_id": "itm-shirt", "itemName": "Shirt Wash & Iron", "category": "Laundry", "sellingPrice": 60, "currentStock": 500},
    {"_id": "itm-towel", "itemName": "Bath Towel", "category": "Housekeeping", "sellingPrice": 150, "currentStock": 12},
    {"_id": "itm-FAIL-cake", "itemName": "Chocolate Cake", "category": "Restaurant", "sellingPrice": 180, "currentStock": 8},
]

ITEMS = {}
MOVEMENTS = []


def reset_inventory(items=None):
    """Restores the item table (and clears the movement log) for a fresh scenario."""
    ITEMS.clear()
    for item in copy.deepcopy(items if items is not None else SEED_ITEMS):
        ITEMS[item["_id"]] = item
    MOVEMENTS.clear()


reset_inventory()


class StockMovement(BaseModel):
    """
    Represents a stock movement request payload.

    Attributes:
        quantity (int): Signed quantity; negative for deductions.
        type (str): "OUT" for deductions, "IN" for receipts.
        reason (str): Reason shown in the stock ledger.
        notes (str): Free-text note.
    """
    quantity: int
    type: str
    reason: str
    notes: str = ""


def _require_token(authorization):
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token.")


router = APIRouter()


@router.get("/api/inventory/items")
def list_items(authorization: str = Header(None)):
    _require_token(authorization)
    return list(ITEMS.values())


@router.put("/api/inventory/items/{item_id}/stock")
def adjust_stock(item_id: str, movement: StockMovement, authorization: str = Header(None)):
    """
    Records a stock movement.

    Raises:
        HTTPException(500): Item id contains "FAIL".
        HTTPException(404): Unknown item.
        HTTPException(400): Stock would become negative.
    """
    _require_token(authorization)
    log.info(f"[IS] Bestandsbewegung für {item_id}: {movement.quantity} ({movement.reason})")

    # Scenario simulation
    if "FAIL" in item_id:
        log.error(f"[IS] Simulierter Server-Fehler für {item_id}.")
        raise HTTPException(status_code=500, detail={"errorCode": "internal_error"})

    item = ITEMS.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail={"errorCode": "item_not_found"})

    new_stock = item.get("currentStock", 0) + movement.quantity
    if new_stock < 0:
        log.warning(f"[IS] {item_id} nicht ausreichend auf Lager ({item.get('currentStock', 0)}).")
        raise HTTPException(status_code=400, detail={"errorCode": "insufficient_stock"})

    item["currentStock"] = new_stock
    MOVEMENTS.append({"itemId": item_id, **movement.model_dump()})
    return {"itemId": item_id, "currentStock": new_stock}


app = FastAPI(title="Mock Inventory Service")
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8002)
