# src/web/app.py

"""HTTP API for managing tracked items and triggering price checks."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Response
from pydantic import BaseModel, Field

from src.models.errors import AlreadyTracked, FetchFailed, ItemNotFound
from src.notifications.webhook_notifier import WebhookNotifier
from src.services.price_monitor import PriceMonitor
from src.services.watchlist import track_item, untrack_item
from src.sources.item_catalog import search_items
from src.sources.market_client import MarketClient
from src.storage.item_store import ItemStore

logger = logging.getLogger("market_watch.web")


class AddItemRequest(BaseModel):
    """Body of ``POST /api/items``."""

    id: int = Field(gt=0)
    sid: int = Field(default=0, ge=0, le=20)


def create_app(
    store: ItemStore,
    client: MarketClient,
    notifier: WebhookNotifier,
    monitor: PriceMonitor,
    start_monitor: bool = True,
) -> FastAPI:
    """Build the API around already-constructed service objects."""

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if start_monitor:
            await monitor.start()
        try:
            yield
        finally:
            if start_monitor:
                await monitor.stop()

    app = FastAPI(title="market_watch", lifespan=lifespan)

    @app.get("/api/status")
    def status() -> dict[str, Any]:
        last = monitor.last_report
        return {
            "status": "online",
            "tracked_items_count": len(store),
            "region": client.region,
            "check_interval_ms": monitor.interval_ms,
            "monitor_state": monitor.state.value,
            "webhook_configured": notifier.enabled,
            "last_pass": last.summary() if last else None,
        }

    @app.get("/api/items")
    def list_items() -> list[dict[str, Any]]:
        return [item.to_dict() for item in store.list()]

    @app.post("/api/items", status_code=201)
    def add_item(body: AddItemRequest) -> dict[str, Any]:
        try:
            item = track_item(store, client, body.id, body.sid, notifier)
        except AlreadyTracked as exc:
            raise HTTPException(409, "Item already being tracked") from exc
        except ItemNotFound as exc:
            raise HTTPException(
                404, "Item not found in marketplace",
            ) from exc
        except FetchFailed as exc:
            logger.warning("Add failed for %d:%d: %s", body.id, body.sid, exc)
            raise HTTPException(502, "Market API unavailable") from exc
        return item.to_dict()

    @app.delete("/api/items/{item_id}", status_code=204)
    def remove_item(
        item_id: int,
        sid: int | None = Query(default=None, ge=0),
    ) -> Response:
        if item_id <= 0:
            raise HTTPException(422, "Invalid item ID")
        try:
            untrack_item(store, item_id, sid, notifier)
        except ItemNotFound as exc:
            raise HTTPException(404, "Item not found") from exc
        return Response(status_code=204)

    @app.get("/api/search-items")
    def search(q: str = "") -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in search_items(q)]

    @app.get("/api/items/{item_id}/history")
    def item_history(
        item_id: int,
        sid: int = Query(default=0, ge=0),
    ) -> dict[str, Any]:
        try:
            history = client.fetch_price_history(item_id, sid)
        except FetchFailed as exc:
            raise HTTPException(502, "Market API unavailable") from exc
        return {"id": item_id, "sid": sid, "history": history}

    @app.post("/api/check-prices")
    async def check_prices() -> dict[str, Any]:
        report = await monitor.run_pass()
        return {"message": "Price check completed", **report.summary()}

    @app.post("/api/test-alert")
    def test_alert() -> dict[str, str]:
        outcome = notifier.send_test_alert()
        if not outcome.delivered:
            raise HTTPException(
                500,
                "Failed to send test alert. Check that "
                f"DISCORD_WEBHOOK_URL is set correctly ({outcome.detail}).",
            )
        return {"message": "Test alert sent successfully!"}

    return app
