"""
main.py — FastAPI Entry Point for the Order Console

This module provides the REST API the console screens use to compose and commit
room-service and laundry orders and to advance their status.

Responsibilities:
    • Serve the catalog snapshot (filtered by category / search text)
    • Hold one draft order per open order screen
    • Commit drafts through the fulfillment workflow
    • Forward staff status changes to the backend
    • Provide system health information
"""

import uuid
from typing import Dict, Optional

import httpx
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse

from .builder import OrderBuilder
from .catalog import CatalogIndex
from .clients import InventoryClient, LaundryOrderClient, OrderServiceClient, RestaurantOrderClient
from .exceptions import (
    CatalogItemNotFoundError,
    IndexOutOfRangeError,
    InsufficientStockError,
    InvalidQuantityError,
    InvalidTransitionError,
)
from .logging_config import get_logger, setup_logging
from .models import AddItemRequest, CommitOutcome, CommitResult, Destination, NewDraftRequest, StatusChangeRequest
from .status import advance_order_status
from .workflow import FulfillmentOrchestrator

log = get_logger(__name__)

COMMIT_STATUS_CODES = {
    CommitOutcome.COMMITTED: 200,
    CommitOutcome.PARTIALLY_COMMITTED: 207,
    CommitOutcome.REJECTED: 422,
}


class Console:
    """
    Process-wide state of the console: backend clients, the catalog snapshot
    and the open drafts (one per order screen, keyed by draft id).
    """

    def __init__(self, http: httpx.Client = None):
        self.inventory = InventoryClient(http)
        self.order_clients: Dict[Destination, OrderServiceClient] = {
            Destination.RESTAURANT: RestaurantOrderClient(http),
            Destination.LAUNDRY: LaundryOrderClient(http),
        }
        self.catalog = CatalogIndex(self.inventory)
        self.orchestrator = FulfillmentOrchestrator(self.inventory, self.order_clients, self.catalog)
        self.drafts: Dict[str, OrderBuilder] = {}
        # Drafts that went through a (partial) commit; never committed again.
        self.commit_results: Dict[str, CommitResult] = {}

    def draft(self, draft_id: str) -> OrderBuilder:
        try:
            return self.drafts[draft_id]
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Draft {draft_id} not found.")

    def order_client(self, kind: str) -> OrderServiceClient:
        try:
            destination = Destination(kind)
        except ValueError:
            destination = None
        if destination not in self.order_clients:
            raise HTTPException(status_code=404, detail=f"Unknown order kind '{kind}'.")
        return self.order_clients[destination]


_console: Optional[Console] = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console()
    return _console


def _draft_view(draft_id: str, builder: OrderBuilder) -> dict:
    return {
        "draftId": draft_id,
        "context": builder.context.model_dump(mode="json"),
        "lines": [line.model_dump(mode="json") for line in builder.lines],
        "breakdown": builder.breakdown.model_dump(mode="json"),
    }


def _backend_unavailable(e: httpx.HTTPError) -> HTTPException:
    return HTTPException(status_code=502, detail=f"Backend error: {e}")


# Initialization
setup_logging()
app = FastAPI(title="Hotel Order Console")


@app.on_event("startup")
def on_startup():
    """
    Loads the catalog snapshot once when the console starts.

    A backend that is not reachable yet is logged, not fatal: the catalog stays
    empty until the next POST /v1/catalog/refresh.
    """
    log.info("Order Console startet...")
    try:
        get_console().catalog.refresh()
    except httpx.HTTPError as e:
        log.warning(f"Katalog konnte beim Start nicht geladen werden: {e}")


# --- Catalog ---
@app.post("/v1/catalog/refresh")
def refresh_catalog(console: Console = Depends(get_console)):
    try:
        count = console.catalog.refresh()
    except httpx.HTTPError as e:
        raise _backend_unavailable(e)
    return {"items": count}


@app.get("/v1/catalog")
def list_catalog(category: str = None, search: str = None, console: Console = Depends(get_console)):
    return [item.model_dump(mode="json") for item in console.catalog.filter(category, search)]


@app.get("/v1/catalog/categories")
def list_categories(console: Console = Depends(get_console)):
    return console.catalog.categories()


# --- Drafts ---
@app.post("/v1/drafts", status_code=201)
def open_draft(request: NewDraftRequest, console: Console = Depends(get_console)):
    draft_id = f"draft-{uuid.uuid4().hex[:12]}"
    console.drafts[draft_id] = OrderBuilder(request.to_context())
    log.info(f"[Room: {request.roomNumber}] Neuer Entwurf {draft_id} ({request.serviceType.value}).")
    return _draft_view(draft_id, console.drafts[draft_id])


@app.get("/v1/drafts/{draft_id}")
def get_draft(draft_id: str, console: Console = Depends(get_console)):
    return _draft_view(draft_id, console.draft(draft_id))


@app.post("/v1/drafts/{draft_id}/items")
def add_draft_item(draft_id: str, request: AddItemRequest, console: Console = Depends(get_console)):
    """
    Adds a catalog item to a draft.

    Raises:
        HTTPException(404): Unknown draft or catalog item.
        HTTPException(409): Quantity exceeds the snapshot stock.
        HTTPException(422): Quantity is not a positive integer.
    """
    builder = console.draft(draft_id)
    try:
        item = console.catalog.find(request.itemId)
        if item is None:
            raise CatalogItemNotFoundError(request.itemId)
        builder.add_item(item, request.quantity, request.note)
    except CatalogItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidQuantityError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _draft_view(draft_id, builder)


@app.delete("/v1/drafts/{draft_id}/items/{index}")
def remove_draft_item(draft_id: str, index: int, console: Console = Depends(get_console)):
    builder = console.draft(draft_id)
    try:
        builder.remove_item(index)
    except IndexOutOfRangeError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _draft_view(draft_id, builder)


@app.delete("/v1/drafts/{draft_id}", status_code=204)
def cancel_draft(draft_id: str, console: Console = Depends(get_console)):
    console.draft(draft_id).clear()
    del console.drafts[draft_id]
    log.info(f"Entwurf {draft_id} verworfen.")


@app.post("/v1/drafts/{draft_id}/commit")
def commit_draft(draft_id: str, console: Console = Depends(get_console)):
    """
    Commits a draft through the fulfillment workflow.

    Returns:
        JSONResponse: The CommitResult with status
            - 200 when everything was committed,
            - 207 when some calls failed,
            - 422 when the draft was empty (the draft stays open),
            - 409 when the draft was already committed; the body repeats the
              earlier result so the failed calls can be re-issued by hand.

    After a 200 or 207 the draft is closed: calls that went through cannot be
    rolled back, so committing the same draft again would duplicate them.
    """
    if draft_id in console.commit_results:
        earlier = console.commit_results[draft_id]
        log.warning(f"Entwurf {draft_id} wurde bereits übermittelt ({earlier.outcome.value}); erneuter Commit abgelehnt.")
        return JSONResponse(
            status_code=409,
            content={"detail": f"Draft {draft_id} was already committed.", "result": earlier.model_dump(mode="json")},
        )

    builder = console.draft(draft_id)
    result = console.orchestrator.commit(builder)
    if result.outcome != CommitOutcome.REJECTED:
        del console.drafts[draft_id]
        console.commit_results[draft_id] = result
    return JSONResponse(status_code=COMMIT_STATUS_CODES[result.outcome], content=result.model_dump(mode="json"))


# --- Committed orders ---
@app.patch("/v1/orders/{kind}/{order_id}/status")
def change_order_status(
        kind: str,
        order_id: str,
        request: StatusChangeRequest,
        console: Console = Depends(get_console)
):
    client = console.order_client(kind)
    try:
        status = advance_order_status(client, order_id, request.currentStatus, request.newStatus, request.staffName)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except httpx.HTTPError as e:
        raise _backend_unavailable(e)
    return {"orderId": order_id, "status": status.value}


@app.get("/v1/orders/{kind}")
def list_orders(kind: str, status: str = None, console: Console = Depends(get_console)):
    try:
        return console.order_client(kind).list_orders(status=status)
    except httpx.HTTPError as e:
        raise _backend_unavailable(e)


@app.get("/v1/orders/{kind}/{order_id}")
def get_order(kind: str, order_id: str, console: Console = Depends(get_console)):
    try:
        return console.order_client(kind).get_order(order_id)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            raise HTTPException(status_code=404, detail=f"Order {order_id} not found.")
        raise _backend_unavailable(e)
    except httpx.HTTPError as e:
        raise _backend_unavailable(e)


@app.delete("/v1/orders/{kind}/{order_id}", status_code=204)
def delete_order(kind: str, order_id: str, console: Console = Depends(get_console)):
    try:
        console.order_client(kind).delete_order(order_id)
    except httpx.HTTPError as e:
        raise _backend_unavailable(e)
    log.info(f"[Order: {order_id}] Auftrag ({kind}) gelöscht.")


# Health Check Endpoint
@app.get("/health")
def health_check():
    """
    Simple health check endpoint for monitoring and container orchestrators.

    Returns:
        dict: A basic JSON object indicating service availability.
    """
    return {"status": "ok"}
