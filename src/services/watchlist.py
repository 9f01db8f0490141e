# src/services/watchlist.py

"""Add/remove flows shared by the HTTP API and the CLI."""

import logging

from src.config.settings import Settings
from src.models.errors import AlreadyTracked, ItemNotFound
from src.models.tracked_item import TrackedItem
from src.notifications.webhook_notifier import WebhookNotifier
from src.sources.market_client import MarketClient
from src.storage.item_store import ItemStore

logger = logging.getLogger("market_watch.watchlist")


def track_item(
    store: ItemStore,
    client: MarketClient,
    item_id: int,
    variant_id: int = 0,
    notifier: WebhookNotifier | None = None,
) -> TrackedItem:
    """Start tracking a pair, seeded with its current market state.

    Raises ``AlreadyTracked`` before touching the network if the pair is
    present, ``ItemNotFound`` if the market cannot resolve it, and lets
    ``FetchFailed`` through to the caller.
    """
    if store.get(item_id, variant_id) is not None:
        raise AlreadyTracked(item_id, variant_id)

    snapshot = client.fetch_item(item_id, variant_id)
    if snapshot is None:
        raise ItemNotFound(item_id, variant_id)

    item = store.add(
        item_id=item_id,
        variant_id=variant_id,
        name=snapshot.name,
        price=snapshot.current_price,
        stock=snapshot.current_stock,
        last_sold_time=snapshot.last_sold_time,
    )
    if notifier is not None and Settings.ANNOUNCE_WATCHLIST_CHANGES:
        notifier.announce_added(snapshot)
    return item


def untrack_item(
    store: ItemStore,
    item_id: int,
    variant_id: int | None = None,
    notifier: WebhookNotifier | None = None,
) -> str:
    """Stop tracking a pair (or every variant of *item_id*).

    Returns the display name of what was removed; raises
    ``ItemNotFound`` when nothing matched.
    """
    if variant_id is not None:
        existing = store.get(item_id, variant_id)
        name = existing.name if existing else f"Item {item_id}"
    else:
        matches = [i for i in store.list() if i.item_id == item_id]
        name = matches[0].name if matches else f"Item {item_id}"

    if not store.remove(item_id, variant_id):
        raise ItemNotFound(item_id, variant_id)

    logger.info("Stopped tracking %s", name)
    if notifier is not None and Settings.ANNOUNCE_WATCHLIST_CHANGES:
        notifier.announce_removed(name)
    return name
