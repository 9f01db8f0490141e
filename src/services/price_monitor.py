# src/services/price_monitor.py

"""Periodic price-check loop: poll, diff, notify, persist."""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.config.settings import Settings
from src.models.errors import FetchFailed
from src.models.tracked_item import ChangeEvent, RemoteSnapshot, TrackedItem
from src.notifications.webhook_notifier import (
    NotificationOutcome,
    WebhookNotifier,
)
from src.services.change_detector import detect
from src.sources.market_client import MarketClient
from src.storage.item_store import ItemStore

logger = logging.getLogger("market_watch.monitor")


class MonitorState(str, Enum):
    """Lifecycle of a :class:`PriceMonitor`."""

    IDLE = "idle"           # timer armed, between passes
    RUNNING = "running"     # mid-pass
    STOPPED = "stopped"     # timer not armed


@dataclass
class ItemResult:
    """Outcome of checking one tracked item during a pass."""

    item_id: int
    variant_id: int
    name: str
    ok: bool
    error: str = ""
    change: ChangeEvent | None = None
    notification: NotificationOutcome | None = None


@dataclass
class PassReport:
    """Aggregate of one full pass over the tracked set."""

    started_at: datetime
    finished_at: datetime | None = None
    results: list[ItemResult] = field(
        default_factory=lambda: list[ItemResult]()
    )

    @property
    def checked(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> list[ItemResult]:
        return [r for r in self.results if not r.ok]

    @property
    def changes(self) -> list[ChangeEvent]:
        return [r.change for r in self.results if r.change is not None]

    @property
    def notifications(self) -> list[NotificationOutcome]:
        return [
            r.notification
            for r in self.results
            if r.notification is not None
        ]

    def summary(self) -> dict[str, object]:
        """Plain-dict view for JSON responses."""
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": (
                self.finished_at.isoformat() if self.finished_at else None
            ),
            "checked": self.checked,
            "succeeded": self.succeeded,
            "failed": [
                {
                    "id": r.item_id,
                    "sid": r.variant_id,
                    "name": r.name,
                    "error": r.error,
                }
                for r in self.failed
            ],
            "changes": [
                {
                    "id": c.item_id,
                    "sid": c.variant_id,
                    "name": c.item_name,
                    "old_price": c.old_price,
                    "new_price": c.new_price,
                    "direction": c.direction.value,
                }
                for c in self.changes
            ],
            "notifications_sent": sum(
                1 for n in self.notifications if n.delivered
            ),
        }


class PriceMonitor:
    """Drives price checks over every tracked item on a fixed interval.

    One instance per process. ``start()`` runs a pass immediately and
    then one every ``interval_ms``; ``run_pass()`` is the manual trigger.
    Passes never overlap: a trigger that arrives mid-pass joins the pass
    already running. A started pass always runs to completion, even
    across ``stop()``.
    """

    def __init__(
        self,
        store: ItemStore,
        client: MarketClient,
        notifier: WebhookNotifier,
        interval_ms: int | None = None,
        pacing_delay: float | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.notifier = notifier
        self.interval_ms = (
            interval_ms
            if interval_ms is not None
            else Settings.PRICE_CHECK_INTERVAL_MS
        )
        self.pacing_delay = (
            pacing_delay
            if pacing_delay is not None
            else Settings.ITEM_PACING_DELAY
        )
        self.state = MonitorState.STOPPED
        self.last_report: PassReport | None = None
        self._armed = False
        self._timer_task: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[PassReport] | None = None

    @property
    def is_running(self) -> bool:
        return self.state is MonitorState.RUNNING

    # ── Lifecycle ────────────────────────────────────────

    async def start(self) -> None:
        """Arm the timer; the first pass starts right away."""
        if self._timer_task is not None and not self._timer_task.done():
            logger.info("Price monitor already started")
            return
        self._armed = True
        if not self.is_running:
            self.state = MonitorState.IDLE
        logger.info(
            "Starting price monitor with %.0fs interval (%s)",
            self.interval_ms / 1000,
            self.client.region.upper(),
        )
        self._timer_task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        """Disarm the timer and let any in-flight pass finish."""
        self._armed = False
        task, self._timer_task = self._timer_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._inflight is not None and not self._inflight.done():
            await asyncio.shield(self._inflight)
        self.state = MonitorState.STOPPED
        logger.info("Price monitor stopped")

    async def wait(self) -> None:
        """Block until the timer is disarmed."""
        if self._timer_task is not None:
            await self._timer_task

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.interval_ms / 1000
        while True:
            started = loop.time()
            try:
                await self.run_pass()
            except Exception:
                logger.error("Price check pass crashed", exc_info=True)
            elapsed = loop.time() - started
            await asyncio.sleep(max(interval - elapsed, 0.0))

    # ── Passes ───────────────────────────────────────────

    async def run_pass(self) -> PassReport:
        """Run one pass now, or join the pass already in progress."""
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self._execute_pass())
        else:
            logger.info("Price check already running, joining it")
        return await asyncio.shield(self._inflight)

    async def _execute_pass(self) -> PassReport:
        self.state = MonitorState.RUNNING
        report = PassReport(started_at=datetime.now())
        region = self.client.region.upper()
        try:
            items = await asyncio.to_thread(self.store.list)
            if not items:
                logger.info("No items to check for %s", region)
            else:
                logger.info(
                    "Checking prices for %d items in %s...",
                    len(items), region,
                )
            for index, item in enumerate(items):
                report.results.append(await self._check_item(item))
                if index < len(items) - 1:
                    await asyncio.sleep(self.pacing_delay)
        finally:
            report.finished_at = datetime.now()
            self.last_report = report
            self.state = (
                MonitorState.IDLE if self._armed else MonitorState.STOPPED
            )

        logger.info(
            "Price check completed for %s: %d/%d ok, %d changed, "
            "%d failed",
            region,
            report.succeeded,
            report.checked,
            len(report.changes),
            len(report.failed),
        )
        return report

    async def _check_item(self, item: TrackedItem) -> ItemResult:
        """Fetch, diff, notify and persist a single item."""
        try:
            fresh = await asyncio.to_thread(
                self.client.fetch_item, item.item_id, item.variant_id,
            )
        except FetchFailed as exc:
            logger.warning(
                "Could not fetch item %d:%d: %s",
                item.item_id, item.variant_id, exc,
            )
            return ItemResult(
                item.item_id, item.variant_id, item.name, False, str(exc),
            )
        except Exception as exc:
            logger.error(
                "Error checking price for item %d:%d",
                item.item_id, item.variant_id,
                exc_info=True,
            )
            return ItemResult(
                item.item_id, item.variant_id, item.name, False, str(exc),
            )

        if fresh is None:
            logger.warning(
                "Item %d:%d no longer found in the market",
                item.item_id, item.variant_id,
            )
            return ItemResult(
                item.item_id, item.variant_id, item.name, False, "not found",
            )

        try:
            return await self._apply_snapshot(item, fresh)
        except Exception as exc:
            logger.error(
                "Error applying price for item %d:%d",
                item.item_id, item.variant_id,
                exc_info=True,
            )
            return ItemResult(
                item.item_id, item.variant_id, item.name, False, str(exc),
            )

    async def _apply_snapshot(
        self, item: TrackedItem, fresh: RemoteSnapshot,
    ) -> ItemResult:
        """Diff, notify and persist one successfully fetched item."""
        event = detect(item, fresh)
        outcome: NotificationOutcome | None = None
        if event is not None:
            logger.info(
                "Price %s detected for %s: %d -> %d",
                event.direction.value,
                event.item_name,
                event.old_price,
                event.new_price,
            )
            outcome = await asyncio.to_thread(self.notifier.notify, event)
            if not outcome.delivered:
                logger.warning(
                    "Alert for %s not delivered (%s)",
                    event.item_name, outcome.status.value,
                )

        name = fresh.name or item.name
        updated = await asyncio.to_thread(
            self.store.update,
            item.item_id,
            item.variant_id,
            name=name,
            last_price=fresh.current_price,
            last_stock=fresh.current_stock,
            last_sold_time=fresh.last_sold_time,
        )
        if updated is None:
            logger.info(
                "Item %d:%d was removed during the pass",
                item.item_id, item.variant_id,
            )
        return ItemResult(
            item.item_id,
            item.variant_id,
            name,
            True,
            change=event,
            notification=outcome,
        )
