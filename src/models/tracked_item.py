# src/models/tracked_item.py

"""Tracked marketplace item and the ephemeral records built around it."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


@dataclass
class TrackedItem:
    """A watched (item, variant) pair with its last observed market state."""

    item_id: int
    variant_id: int
    name: str
    last_price: int = 0
    last_stock: int = 0
    last_sold_time: int = 0     # unix seconds, 0 = never sold
    added_at: int = 0           # unix millis, set once at creation

    @property
    def key(self) -> tuple[int, int]:
        """Composite identity of the record."""
        return (self.item_id, self.variant_id)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape shared by storage and the API."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackedItem":
        """Rebuild a record from :meth:`to_dict` output."""
        return cls(
            item_id=int(data["item_id"]),
            variant_id=int(data["variant_id"]),
            name=str(data.get("name", "")),
            last_price=int(data.get("last_price", 0)),
            last_stock=int(data.get("last_stock", 0)),
            last_sold_time=int(data.get("last_sold_time", 0)),
            added_at=int(data.get("added_at", 0)),
        )


@dataclass
class RemoteSnapshot:
    """Freshly fetched market state for one (item, variant) pair."""

    item_id: int
    variant_id: int
    name: str
    current_price: int
    current_stock: int
    last_sold_time: int
    base_price: int = 0
    price_min: int = 0
    price_max: int = 0
    total_trades: int = 0
    min_enhance: int = 0
    max_enhance: int = 0


class PriceDirection(str, Enum):
    """Which way a tracked price moved."""

    INCREASE = "increase"
    DECREASE = "decrease"


@dataclass
class ChangeEvent:
    """A notification-worthy price move, consumed by the notifier."""

    item_id: int
    variant_id: int
    item_name: str
    old_price: int
    new_price: int
    direction: PriceDirection
    stock: int
    last_sold_time: int
