# src/models/errors.py

"""Exception types shared by the store, the market client and the monitor."""


class MarketWatchError(Exception):
    """Base class for market_watch errors."""


class AlreadyTracked(MarketWatchError):
    """Raised when adding an (item, variant) pair that is already tracked."""

    def __init__(self, item_id: int, variant_id: int) -> None:
        super().__init__(
            f"Item {item_id} (sid {variant_id}) is already being tracked"
        )
        self.item_id = item_id
        self.variant_id = variant_id


class ItemNotFound(MarketWatchError):
    """Raised when an item is not tracked, or the market cannot resolve it."""

    def __init__(self, item_id: int, variant_id: int | None = None) -> None:
        where = (
            f"Item {item_id}"
            if variant_id is None
            else f"Item {item_id} (sid {variant_id})"
        )
        super().__init__(f"{where} not found")
        self.item_id = item_id
        self.variant_id = variant_id


class FetchFailed(MarketWatchError):
    """Transient failure talking to the remote price source."""


class DeliveryFailed(MarketWatchError):
    """Webhook transport or API error while delivering a notification."""
