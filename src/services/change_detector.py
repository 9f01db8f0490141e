# src/services/change_detector.py

"""Decides whether a fresh snapshot is a notification-worthy price move."""

from src.models.tracked_item import (
    ChangeEvent,
    PriceDirection,
    RemoteSnapshot,
    TrackedItem,
)


def detect(old: TrackedItem, fresh: RemoteSnapshot) -> ChangeEvent | None:
    """Compare the stored baseline against a fresh snapshot.

    Any nonzero delta qualifies, but only against a nonzero baseline:
    a stored price of 0 means "not observed yet" and never alerts.
    A fetched price of 0 is an ordinary decrease.
    """
    if fresh.current_price == old.last_price or old.last_price <= 0:
        return None

    direction = (
        PriceDirection.INCREASE
        if fresh.current_price > old.last_price
        else PriceDirection.DECREASE
    )
    return ChangeEvent(
        item_id=old.item_id,
        variant_id=old.variant_id,
        item_name=fresh.name or old.name,
        old_price=old.last_price,
        new_price=fresh.current_price,
        direction=direction,
        stock=fresh.current_stock,
        last_sold_time=fresh.last_sold_time,
    )
