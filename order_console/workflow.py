"""
workflow.py — Core Orchestration Logic for Order Fulfillment

This module turns a draft order into persisted effects on the hotel backend.
It coordinates the inventory and order services in a fixed sequence.

Workflow Overview:
1. Reject empty drafts before any network call
2. Recompute pricing authoritatively
3. Deduct stock for every line via the Inventory Service (sequential, continue on error)
4. Route lines by category and create one downstream order per destination group
5. Aggregate all outcomes into a CommitResult

There is no compensation step: deductions and orders that went through stay
in place when a later call fails. The result lists exactly what failed so
staff can re-issue it by hand.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Mapping, Tuple

import httpx

from .builder import OrderBuilder
from .catalog import CatalogIndex
from .clients import InventoryClient, OrderServiceClient
from .exceptions import EmptyOrderError
from .models import (
    CommitOutcome,
    CommitResult,
    CommittedOrder,
    Destination,
    DraftLineItem,
    InventoryCallFailure,
    OrderCreationFailure,
)
from .pricing import compute_pricing

log = logging.getLogger(__name__)

# Category -> downstream system. Categories not listed stay local (no order call).
ROUTING_TABLE: Mapping[str, Destination] = {
    "Restaurant": Destination.RESTAURANT,
    "Laundry": Destination.LAUNDRY,
}


def route_for(category: str) -> Destination:
    return ROUTING_TABLE.get(category, Destination.LOCAL)


def partition_by_destination(lines) -> Dict[Destination, List[DraftLineItem]]:
    """Groups lines by destination, keeping the draft order inside each group."""
    groups: Dict[Destination, List[DraftLineItem]] = {}
    for line in lines:
        groups.setdefault(route_for(line.category), []).append(line)
    return groups


def _describe_failure(e: httpx.HTTPError) -> Tuple[str, int]:
    if isinstance(e, httpx.HTTPStatusError):
        return f"HTTP {e.response.status_code}", e.response.status_code
    if isinstance(e, httpx.TimeoutException):
        return f"timeout ({type(e).__name__})", None
    return f"unreachable ({type(e).__name__})", None


class FulfillmentOrchestrator:
    """
    Commits draft orders against the inventory and order services.

    Args:
        inventory_client (InventoryClient): Stock deductions.
        order_clients (Mapping[Destination, OrderServiceClient]): One client per remote destination.
        catalog (CatalogIndex): Refreshed after a fully successful commit.
    """

    def __init__(
            self,
            inventory_client: InventoryClient,
            order_clients: Mapping[Destination, OrderServiceClient],
            catalog: CatalogIndex
    ):
        self.inventory = inventory_client
        self.order_clients = dict(order_clients)
        self.catalog = catalog

    def commit(self, builder: OrderBuilder) -> CommitResult:
        """
        Executes the complete commit of one draft order.

        Calls are issued strictly one after the other so every failure in the
        result can be attributed to one line item or one group order. A failed
        call is recorded and the remaining calls are still issued.

        Args:
            builder (OrderBuilder): The draft to commit. Cleared on full success only.

        Returns:
            CommitResult:
                - REJECTED: the draft was empty; nothing was sent.
                - COMMITTED: every deduction and every group order succeeded.
                - PARTIALLY_COMMITTED: at least one call failed; see
                  inventory_failures / order_failures.
        """
        context = builder.context
        lines = builder.lines

        # --- 1. Validation ---
        if not lines:
            error = EmptyOrderError()
            log.warning(f"[Room: {context.room_number}] Commit abgelehnt: {error}")
            return CommitResult(outcome=CommitOutcome.REJECTED, error=str(error))

        # --- 2. Pricing (authoritative) ---
        breakdown = compute_pricing(lines)
        order = CommittedOrder(context=context, lines=list(lines), breakdown=breakdown)
        log_prefix = f"[Order: {order.reference}]"
        log.info(f"{log_prefix} Starte Commit für Zimmer {context.room_number}: "
                 f"{len(lines)} Position(en), Gesamt {breakdown.grand_total}.")

        # --- 3. Inventory (stock deduction per line) ---
        inventory_failures = self._deduct_stock(lines, order)

        # --- 4. Downstream orders (one per destination group) ---
        order_failures = self._create_group_orders(lines, order)

        # --- 5. Aggregation ---
        if inventory_failures or order_failures:
            log.error(f"{log_prefix} Teilweise ausgeführt: {len(inventory_failures)} Bestandsbuchung(en) und "
                      f"{len(order_failures)} Auftrag/Aufträge fehlgeschlagen. MANUELLE NACHBEARBEITUNG NÖTIG!")
            return CommitResult(
                outcome=CommitOutcome.PARTIALLY_COMMITTED,
                order=order,
                inventory_failures=inventory_failures,
                order_failures=order_failures,
            )

        # --- 6. Cleanup ---
        builder.clear()
        try:
            self.catalog.refresh()
        except httpx.HTTPError as e:
            log.warning(f"{log_prefix} Katalog konnte nach Commit nicht aktualisiert werden: {e}")

        log.info(f"{log_prefix} Commit erfolgreich abgeschlossen.")
        return CommitResult(outcome=CommitOutcome.COMMITTED, order=order)

    def _deduct_stock(self, lines, order: CommittedOrder) -> List[InventoryCallFailure]:
        context = order.context
        failures = []
        for line in lines:
            try:
                self.inventory.adjust_stock(line.item_id, -line.quantity, context.reason(), context.notes())
            except httpx.HTTPError as e:
                reason, status_code = _describe_failure(e)
                log.error(f"[Order: {order.reference}] Bestandsbuchung für {line.item_id} fehlgeschlagen: {reason}")
                failures.append(InventoryCallFailure(item_id=line.item_id, reason=reason, status_code=status_code))
        return failures

    def _create_group_orders(self, lines, order: CommittedOrder) -> List[OrderCreationFailure]:
        failures = []
        for destination, group in partition_by_destination(lines).items():
            client = self.order_clients.get(destination)
            if destination == Destination.LOCAL:
                log.info(f"[Order: {order.reference}] {len(group)} Position(en) ohne Zielsystem ({group[0].category}), lokal verbucht.")
                continue
            if client is None:
                log.error(f"[Order: {order.reference}] Kein Client für Zielsystem {destination.value} konfiguriert.")
                failures.append(OrderCreationFailure(
                    category=group[0].category,
                    destination=destination,
                    reason="no order client configured",
                ))
                continue

            subtotal = sum((line.total_price for line in group), Decimal("0"))
            try:
                order.group_orders[destination] = client.create_group_order(group, order.context, subtotal)
            except httpx.HTTPError as e:
                reason, status_code = _describe_failure(e)
                log.error(f"[Order: {order.reference}] Auftrag an {destination.value} fehlgeschlagen: {reason}")
                failures.append(OrderCreationFailure(
                    category=group[0].category,
                    destination=destination,
                    reason=reason,
                    status_code=status_code,
                ))
        return failures
