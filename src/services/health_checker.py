# src/services/health_checker.py

"""Connectivity health check for the market API and webhook config."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.sources.market_client import MarketClient

logger = logging.getLogger("market_watch.health")

_PROBE_ITEM_ID = 10007      # a long-lived market listing
_SLOW_THRESHOLD_MS = 5000


@dataclass
class HealthResult:
    """Result of a single health probe."""

    target: str
    status: str  # "ok", "slow", "down", "disabled"
    latency_ms: float
    message: str


def probe_market(client: MarketClient) -> HealthResult:
    """Fetch a known item and time the round trip."""
    target = f"market ({client.region.upper()})"
    start = time.monotonic()
    try:
        snapshot = client.fetch_item(_PROBE_ITEM_ID)
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(target, "down", elapsed_ms, str(exc)[:80])

    elapsed_ms = (time.monotonic() - start) * 1000
    if snapshot is None:
        return HealthResult(
            target, "down", elapsed_ms,
            f"probe item {_PROBE_ITEM_ID} not found",
        )
    if elapsed_ms > _SLOW_THRESHOLD_MS:
        return HealthResult(target, "slow", elapsed_ms, "High latency")
    return HealthResult(target, "ok", elapsed_ms, "")


def probe_webhook(webhook_url: str | None) -> HealthResult:
    """Report whether a webhook is configured (nothing is sent)."""
    if not webhook_url:
        return HealthResult(
            "webhook", "disabled", 0.0, "DISCORD_WEBHOOK_URL not set",
        )
    return HealthResult("webhook", "ok", 0.0, "configured")


class HealthChecker:
    """Runs the health probes off the event loop."""

    def __init__(
        self, client: MarketClient, webhook_url: str | None,
    ) -> None:
        self.client = client
        self.webhook_url = webhook_url

    async def check_all(self) -> list[HealthResult]:
        """Probe every target."""
        market = await asyncio.to_thread(probe_market, self.client)
        results = [market, probe_webhook(self.webhook_url)]
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.target,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
