# src/sources/market_client.py

"""Read client for the central-market price API (api.arsha.io)."""

import logging
from typing import Any, cast

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.errors import FetchFailed
from src.models.tracked_item import RemoteSnapshot


def _as_int(value: Any) -> int:
    """Coerce a possibly-missing numeric field, defaulting to 0."""
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class MarketClient:
    """Fetches current price, stock and last-sale time for market items.

    One call per item, no retries: a failed fetch raises
    :class:`FetchFailed` and the caller decides what to skip.
    """

    def __init__(
        self,
        region: str | None = None,
        base_url: str | None = None,
        timeout: int | None = None,
    ) -> None:
        self.settings = Settings()
        self.region = (region or self.settings.MARKET_REGION).lower()
        self.base_url = (base_url or self.settings.MARKET_API_BASE).rstrip("/")
        self.timeout = timeout or self.settings.REQUEST_TIMEOUT
        self.logger = logging.getLogger("market_watch.market")
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def _endpoint(self, path: str) -> str:
        return f"{self.base_url}/v2/{self.region}/{path}"

    def _get_json(
        self, path: str, params: dict[str, Any],
    ) -> Any | None:
        """GET a JSON endpoint; ``None`` on 404, ``FetchFailed`` otherwise."""
        url = self._endpoint(path)
        try:
            resp = self.session.get(
                url, params=params, timeout=self.timeout,
            )
        except Exception as exc:
            raise FetchFailed(f"Request to {url} failed: {exc}") from exc

        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise FetchFailed(
                f"Market API returned HTTP {resp.status_code} for {url}"
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise FetchFailed(f"Malformed JSON from {url}: {exc}") from exc

    @staticmethod
    def _pick_variant(
        data: Any, variant_id: int,
    ) -> dict[str, Any] | None:
        """Select the payload entry for *variant_id*.

        The API answers with one object, or a list with one object per
        enhancement level. Falls back to the first entry.
        """
        if isinstance(data, list):
            entries = [
                e for e in cast(list[Any], data) if isinstance(e, dict)
            ]
            if not entries:
                return None
            for entry in entries:
                if (
                    entry.get("sid") == variant_id
                    or entry.get("minEnhance") == variant_id
                ):
                    return cast(dict[str, Any], entry)
            return cast(dict[str, Any], entries[0])
        if isinstance(data, dict):
            return cast(dict[str, Any], data)
        return None

    def fetch_item(
        self, item_id: int, variant_id: int = 0,
    ) -> RemoteSnapshot | None:
        """Fetch the current market state for one (item, variant) pair.

        Returns ``None`` when the market does not know the item.
        """
        data = self._get_json("item", {"id": item_id, "lang": "en"})
        if not data:
            self.logger.info(
                "Item %d (sid %d) not found in %s market",
                item_id, variant_id, self.region.upper(),
            )
            return None

        entry = self._pick_variant(data, variant_id)
        if entry is None:
            if isinstance(data, list):
                return None
            raise FetchFailed(
                f"Unexpected payload type for item {item_id}: "
                f"{type(data).__name__}"
            )

        snapshot = RemoteSnapshot(
            item_id=_as_int(entry.get("id")) or item_id,
            variant_id=variant_id,
            name=str(entry.get("name") or f"Item {item_id}"),
            current_price=_as_int(entry.get("lastSoldPrice")),
            current_stock=_as_int(entry.get("currentStock")),
            last_sold_time=_as_int(entry.get("lastSoldTime")),
            base_price=_as_int(entry.get("basePrice")),
            price_min=_as_int(entry.get("priceMin")),
            price_max=_as_int(entry.get("priceMax")),
            total_trades=_as_int(entry.get("totalTrades")),
            min_enhance=_as_int(entry.get("minEnhance")),
            max_enhance=_as_int(entry.get("maxEnhance")),
        )
        self.logger.debug(
            "Fetched %s (id=%d, sid=%d): price=%d stock=%d",
            snapshot.name,
            item_id,
            variant_id,
            snapshot.current_price,
            snapshot.current_stock,
        )
        return snapshot

    def fetch_price_history(
        self, item_id: int, variant_id: int = 0,
    ) -> list[int]:
        """Return the recent daily price history for a pair, oldest first."""
        data = self._get_json(
            "history", {"id": item_id, "sid": variant_id, "lang": "en"},
        )
        if not data:
            return []
        if isinstance(data, dict):
            # {"<epoch millis>": price, ...}
            points = sorted(
                cast(dict[str, Any], data).items(),
                key=lambda kv: _as_int(kv[0]),
            )
            return [_as_int(v) for _, v in points]
        if isinstance(data, list):
            return [_as_int(v) for v in cast(list[Any], data)]
        raise FetchFailed(
            f"Unexpected history payload for item {item_id}: "
            f"{type(data).__name__}"
        )
