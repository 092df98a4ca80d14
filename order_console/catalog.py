"""
catalog.py — Catalog Index of Orderable Items

Holds a read-only snapshot of the inventory. The snapshot is swapped in a
single assignment on refresh and its items are frozen, so a reader never sees
a half-updated catalog. Stock is never changed here; deductions go through
the inventory backend at commit time.
"""

import logging
from typing import Iterator, List, Optional, Tuple

from .clients import InventoryClient
from .models import CatalogItem

log = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


class _Snapshot:
    __slots__ = ("items", "by_id")

    def __init__(self, items: Tuple[CatalogItem, ...]):
        self.items = items
        self.by_id = {item.item_id: item for item in items}


class CatalogView:
    """
    Lazy, restartable view over one catalog snapshot.

    Every iteration starts over from the first item of the snapshot the view
    was created from, even if the index has been refreshed in between.
    """

    def __init__(self, items: Tuple[CatalogItem, ...], category: Optional[str], search_text: Optional[str]):
        self._items = items
        self._category = None if category in (None, "", ALL_CATEGORIES) else category
        self._needle = (search_text or "").lower()

    def _matches(self, item: CatalogItem) -> bool:
        if self._category is not None and item.category != self._category:
            return False
        return self._needle in item.name.lower()

    def __iter__(self) -> Iterator[CatalogItem]:
        return (item for item in self._items if self._matches(item))


class CatalogIndex:
    """
    Process-wide catalog snapshot sourced from the inventory backend.

    Lifecycle: created empty, filled by refresh() on startup, replaced by
    refresh() after every successful commit or on demand.
    """

    def __init__(self, inventory_client: InventoryClient):
        self._inventory = inventory_client
        self._snapshot = _Snapshot(())

    def refresh(self) -> int:
        """
        Replaces the snapshot with the latest item list.

        Records the catalog cannot represent (no id, negative price, malformed
        stock) are logged and left out of the snapshot.

        Returns:
            int: Number of items in the new snapshot.

        Raises:
            httpx.HTTPError: If the inventory backend cannot be read. The
                previous snapshot stays in place.
        """
        records = self._inventory.list_items()
        items = []
        for record in records:
            try:
                items.append(CatalogItem.from_backend(record))
            except (ValueError, AttributeError) as e:
                log.warning(f"Katalog: ungültiger Inventar-Datensatz übersprungen: {e}")
        items = tuple(items)
        self._snapshot = _Snapshot(items)
        log.info(f"Katalog aktualisiert: {len(items)} Artikel geladen.")
        return len(items)

    def find(self, item_id: str) -> Optional[CatalogItem]:
        return self._snapshot.by_id.get(item_id)

    def filter(self, category: str = None, search_text: str = None) -> CatalogView:
        return CatalogView(self._snapshot.items, category, search_text)

    def categories(self) -> List[str]:
        seen = []
        for item in self._snapshot.items:
            if item.category not in seen:
                seen.append(item.category)
        return seen

    def __len__(self):
        return len(self._snapshot.items)
