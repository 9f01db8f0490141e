# src/notifications/webhook_notifier.py

"""Fire-and-forget Discord webhook delivery for price alerts."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.errors import DeliveryFailed
from src.models.tracked_item import ChangeEvent, RemoteSnapshot
from src.notifications.embeds import (
    build_item_added_embed,
    build_item_removed_embed,
    build_price_alert_embed,
    build_test_alert_embed,
)

logger = logging.getLogger("market_watch.notifier")


class NotificationStatus(str, Enum):
    """How a delivery attempt ended."""

    SENT = "sent"
    DISABLED = "disabled"
    FAILED = "failed"


@dataclass
class NotificationOutcome:
    """Result of one webhook delivery attempt."""

    status: NotificationStatus
    detail: str = ""

    @property
    def delivered(self) -> bool:
        return self.status is NotificationStatus.SENT


class WebhookNotifier:
    """Posts embeds to a Discord webhook. Never raises, never retries.

    A missing webhook URL is a valid "disabled" configuration.
    """

    def __init__(
        self,
        webhook_url: str | None = None,
        region: str | None = None,
        timeout: int | None = None,
    ) -> None:
        self.settings = Settings()
        self.webhook_url = (
            webhook_url
            if webhook_url is not None
            else self.settings.DISCORD_WEBHOOK_URL
        )
        self.region = region or self.settings.MARKET_REGION
        self.timeout = timeout or self.settings.REQUEST_TIMEOUT
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def notify(self, event: ChangeEvent) -> NotificationOutcome:
        """Deliver a price alert for *event*."""
        embed = build_price_alert_embed(event, self.region)
        return self.send(embed)

    def announce_added(self, snapshot: RemoteSnapshot) -> NotificationOutcome:
        """Announce a newly tracked item."""
        return self.send(build_item_added_embed(snapshot))

    def announce_removed(self, item_name: str) -> NotificationOutcome:
        """Announce that an item is no longer tracked."""
        return self.send(build_item_removed_embed(item_name))

    def send_test_alert(self) -> NotificationOutcome:
        """Send a sample alert to verify the webhook connection."""
        return self.send(build_test_alert_embed(self.region))

    def send(self, embed: dict[str, Any]) -> NotificationOutcome:
        """Post one embed; every failure is folded into the outcome."""
        if not self.webhook_url:
            logger.warning(
                "DISCORD_WEBHOOK_URL not configured, skipping '%s'",
                embed.get("title", ""),
            )
            return NotificationOutcome(
                NotificationStatus.DISABLED, "webhook not configured",
            )
        try:
            self._post(self.webhook_url, {"embeds": [embed]})
        except DeliveryFailed as exc:
            logger.warning("Webhook delivery failed: %s", exc)
            return NotificationOutcome(NotificationStatus.FAILED, str(exc))
        logger.info("Webhook delivered '%s'", embed.get("title", ""))
        return NotificationOutcome(NotificationStatus.SENT)

    def _post(self, url: str, payload: dict[str, Any]) -> None:
        """POST *payload* as JSON; raises ``DeliveryFailed`` on any error."""
        try:
            resp = self.session.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except Exception as exc:
            raise DeliveryFailed(f"transport error: {exc}") from exc
        if not 200 <= resp.status_code < 300:
            raise DeliveryFailed(
                f"HTTP {resp.status_code}: {resp.text[:200]}"
            )
