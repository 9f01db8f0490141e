# src/notifications/embeds.py

"""Discord embed builders and display helpers for market alerts."""

import time
from datetime import datetime, timezone
from typing import Any

from src.config.settings import Settings
from src.models.tracked_item import (
    ChangeEvent,
    PriceDirection,
    RemoteSnapshot,
)

COLOR_SUCCESS = 0x57F287
COLOR_ERROR = 0xED4245
COLOR_INFO = 0x5865F2
COLOR_PRICE_INCREASE = COLOR_SUCCESS
COLOR_PRICE_DECREASE = COLOR_ERROR

_PEN_LABELS: dict[int, str] = {
    16: " (PRI)",
    17: " (DUO)",
    18: " (TRI)",
    19: " (TET)",
    20: " (PEN)",
}

# (upper bound in seconds, unit seconds, unit name)
_RELATIVE_UNITS: list[tuple[int, int, str]] = [
    (3600, 60, "minute"),
    (86400, 3600, "hour"),
    (2592000, 86400, "day"),
    (31536000, 2592000, "month"),
]


def format_silver(amount: int) -> str:
    """Render a silver amount with thousands separators."""
    return f"{amount:,}"


def format_relative_time(
    epoch_seconds: int, now: float | None = None,
) -> str:
    """Human label for how long ago *epoch_seconds* was."""
    if not epoch_seconds:
        return "Never"
    current = int(now if now is not None else time.time())
    diff = current - epoch_seconds
    if diff < 60:
        return "Just now"
    for upper, unit, name in _RELATIVE_UNITS:
        if diff < upper:
            count = diff // unit
            return f"{count} {name}{'s' if count != 1 else ''} ago"
    years = diff // 31536000
    return f"{years} year{'s' if years != 1 else ''} ago"


def enhancement_label(variant_id: int) -> str:
    """Suffix describing an enhancement level, empty for base items."""
    if variant_id == 0:
        return ""
    if variant_id <= 15:
        return f" (+{variant_id})"
    return _PEN_LABELS.get(variant_id, f" (+{variant_id})")


def item_icon_url(item_id: int) -> str:
    """Marketplace icon for an item."""
    return f"{Settings.ITEM_ICON_BASE}/{item_id}.png"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _field(name: str, value: str, inline: bool = True) -> dict[str, Any]:
    return {"name": name, "value": value, "inline": inline}


def build_price_alert_embed(
    event: ChangeEvent, region: str,
) -> dict[str, Any]:
    """Embed announcing a price move for a tracked item."""
    is_increase = event.direction is PriceDirection.INCREASE
    label = "Price increase" if is_increase else "Price decrease"
    item_name = event.item_name + enhancement_label(event.variant_id)
    return {
        "title": f'"{item_name}" {region.upper()} - {label}',
        "color": (
            COLOR_PRICE_INCREASE if is_increase else COLOR_PRICE_DECREASE
        ),
        "thumbnail": {"url": item_icon_url(event.item_id)},
        "fields": [
            _field("New Price", format_silver(event.new_price)),
            _field("Old Price", format_silver(event.old_price)),
            _field("Stock", str(event.stock)),
            _field("Last Sold", format_relative_time(event.last_sold_time)),
        ],
        "timestamp": _timestamp(),
    }


def build_item_added_embed(snapshot: RemoteSnapshot) -> dict[str, Any]:
    """Embed confirming that an item is now tracked."""
    item_name = snapshot.name + enhancement_label(snapshot.variant_id)
    return {
        "title": "Item Added",
        "description": (
            f"Now tracking **{item_name}**\n"
            f"(ID: {snapshot.item_id}, SID: {snapshot.variant_id})"
        ),
        "color": COLOR_SUCCESS,
        "thumbnail": {"url": item_icon_url(snapshot.item_id)},
        "fields": [
            _field("Current Price", format_silver(snapshot.current_price)),
            _field("Stock", str(snapshot.current_stock)),
        ],
        "timestamp": _timestamp(),
    }


def build_item_removed_embed(item_name: str) -> dict[str, Any]:
    """Embed confirming that an item is no longer tracked."""
    return {
        "title": "Item Removed",
        "description": f"Stopped tracking **{item_name}**",
        "color": COLOR_INFO,
        "timestamp": _timestamp(),
    }


def build_test_alert_embed(region: str) -> dict[str, Any]:
    """Sample price alert used to verify the webhook connection."""
    return {
        "title": f'"Seleth Longsword" {region.upper()} - Price increase',
        "description": "Test alert to verify webhook connection",
        "color": COLOR_PRICE_INCREASE,
        "thumbnail": {"url": item_icon_url(10007)},
        "fields": [
            _field("New Price", format_silver(1500000)),
            _field("Old Price", format_silver(1428500)),
            _field("Stock", "1"),
            _field("Last Sold", "Just now"),
        ],
        "timestamp": _timestamp(),
    }
