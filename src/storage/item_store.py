# src/storage/item_store.py

"""Write-through store of tracked items keyed by (item_id, variant_id)."""

import logging
import threading
import time
from dataclasses import replace
from typing import Protocol

from src.config.settings import Settings
from src.models.errors import AlreadyTracked
from src.models.tracked_item import TrackedItem
from src.storage.json_backend import JsonFileBackend
from src.storage.sqlite_backend import SqliteBackend

logger = logging.getLogger("market_watch.store")

_UPDATABLE_FIELDS: frozenset[str] = frozenset({
    "name", "last_price", "last_stock", "last_sold_time",
})


class StoreBackend(Protocol):
    """Durable home for the full record set."""

    def load(self) -> list[TrackedItem]: ...

    def save(self, items: list[TrackedItem]) -> None: ...

    def close(self) -> None: ...


class ItemStore:
    """In-memory map of tracked items, persisted after every mutation.

    All operations take a single table-wide lock: the HTTP API, the CLI
    and the price monitor's worker threads may call in concurrently.
    Persistence is best-effort. A failed save is logged and the
    in-memory change stands.
    """

    def __init__(self, backend: StoreBackend) -> None:
        self._backend = backend
        self._lock = threading.Lock()
        self._items: dict[tuple[int, int], TrackedItem] = {
            item.key: item for item in backend.load()
        }

    def close(self) -> None:
        """Release the persistence backend."""
        self._backend.close()

    # ── Reads ────────────────────────────────────────────

    def list(self) -> list[TrackedItem]:
        """Return a copy of every tracked item (no particular order)."""
        with self._lock:
            return [replace(item) for item in self._items.values()]

    def get(self, item_id: int, variant_id: int) -> TrackedItem | None:
        """Return the record for a pair, or ``None`` if untracked."""
        with self._lock:
            item = self._items.get((item_id, variant_id))
            return replace(item) if item else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # ── Mutations ────────────────────────────────────────

    def add(
        self,
        item_id: int,
        variant_id: int,
        name: str,
        price: int,
        stock: int,
        last_sold_time: int,
    ) -> TrackedItem:
        """Start tracking a pair; raises ``AlreadyTracked`` if present."""
        with self._lock:
            key = (item_id, variant_id)
            if key in self._items:
                raise AlreadyTracked(item_id, variant_id)
            item = TrackedItem(
                item_id=item_id,
                variant_id=variant_id,
                name=name,
                last_price=price,
                last_stock=stock,
                last_sold_time=last_sold_time,
                added_at=int(time.time() * 1000),
            )
            self._items[key] = item
            self._persist()
        logger.info(
            "Tracking %s (id=%d, sid=%d) at %d",
            name, item_id, variant_id, price,
        )
        return replace(item)

    def remove(self, item_id: int, variant_id: int | None = None) -> bool:
        """Remove one pair, or every variant of *item_id* if no variant.

        Returns whether anything was removed.
        """
        with self._lock:
            if variant_id is not None:
                keys = [(item_id, variant_id)] if (
                    (item_id, variant_id) in self._items
                ) else []
            else:
                keys = [k for k in self._items if k[0] == item_id]
            if not keys:
                return False
            for key in keys:
                del self._items[key]
            self._persist()
        logger.info(
            "Removed %d tracked record(s) for id=%d", len(keys), item_id,
        )
        return True

    def update(
        self, item_id: int, variant_id: int, **fields: object,
    ) -> TrackedItem | None:
        """Apply a partial update; ``None`` if the pair is not tracked."""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Cannot update field(s): {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        with self._lock:
            existing = self._items.get((item_id, variant_id))
            if existing is None:
                return None
            updated = replace(existing, **fields)  # type: ignore[arg-type]
            self._items[existing.key] = updated
            self._persist()
        return replace(updated)

    def _persist(self) -> None:
        """Write the full record set; caller holds the lock."""
        try:
            self._backend.save(list(self._items.values()))
        except Exception:
            logger.error(
                "Failed to persist %d tracked items",
                len(self._items),
                exc_info=True,
            )


def create_store(backend_name: str | None = None) -> ItemStore:
    """Build an :class:`ItemStore` on the configured backend."""
    name = (backend_name or Settings.STORE_BACKEND).lower()
    if name == "sqlite":
        backend: StoreBackend = SqliteBackend()
    elif name == "json":
        backend = JsonFileBackend()
    else:
        valid = ", ".join(Settings.STORE_BACKENDS)
        msg = f"Unknown store backend '{name}' (expected one of: {valid})"
        raise ValueError(msg)
    logger.debug("Using %s store backend", name)
    return ItemStore(backend)
