# tests/test_web_app.py

"""Tests for the FastAPI application."""

import unittest
from unittest.mock import MagicMock

from _factories import make_item, make_snapshot, make_store
from fastapi.testclient import TestClient

from src.models.errors import FetchFailed
from src.notifications.webhook_notifier import (
    NotificationOutcome,
    NotificationStatus,
)
from src.services.price_monitor import PriceMonitor
from src.web.app import create_app


class _ApiTestCase(unittest.TestCase):
    """Builds an app around an in-memory store and mocked I/O."""

    def setUp(self) -> None:
        self.store = make_store(make_item(10007, 0, price=100000))
        self.client = MagicMock()
        self.client.region = "eu"
        self.notifier = MagicMock()
        self.notifier.enabled = True
        self.notifier.notify.return_value = NotificationOutcome(
            NotificationStatus.SENT
        )
        self.monitor = PriceMonitor(
            self.store,
            self.client,
            self.notifier,
            interval_ms=60000,
            pacing_delay=0,
        )
        app = create_app(
            self.store,
            self.client,
            self.notifier,
            self.monitor,
            start_monitor=False,
        )
        self.http = TestClient(app)


class TestStatusAndList(_ApiTestCase):
    """Read-only endpoints."""

    def test_status(self) -> None:
        """Status reports count, region and monitor state."""
        body = self.http.get("/api/status").json()
        self.assertEqual(body["status"], "online")
        self.assertEqual(body["tracked_items_count"], 1)
        self.assertEqual(body["region"], "eu")
        self.assertEqual(body["check_interval_ms"], 60000)
        self.assertEqual(body["monitor_state"], "stopped")
        self.assertTrue(body["webhook_configured"])
        self.assertIsNone(body["last_pass"])

    def test_list_items(self) -> None:
        """Every tracked record is returned."""
        body = self.http.get("/api/items").json()
        self.assertEqual(len(body), 1)
        self.assertEqual(body[0]["item_id"], 10007)
        self.assertEqual(body[0]["last_price"], 100000)


class TestAddItem(_ApiTestCase):
    """POST /api/items."""

    def test_created(self) -> None:
        """A resolvable item is stored and echoed with 201."""
        self.client.fetch_item.return_value = make_snapshot(
            11853, 2, price=5000, name="Black Stone",
        )
        resp = self.http.post("/api/items", json={"id": 11853, "sid": 2})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["name"], "Black Stone")
        self.assertEqual(len(self.store), 2)

    def test_duplicate_conflicts(self) -> None:
        """An already tracked pair is 409."""
        resp = self.http.post("/api/items", json={"id": 10007})
        self.assertEqual(resp.status_code, 409)
        self.client.fetch_item.assert_not_called()

    def test_not_in_market(self) -> None:
        """A market miss is 404."""
        self.client.fetch_item.return_value = None
        resp = self.http.post("/api/items", json={"id": 999999})
        self.assertEqual(resp.status_code, 404)

    def test_market_down(self) -> None:
        """A fetch failure is 502."""
        self.client.fetch_item.side_effect = FetchFailed("HTTP 503")
        resp = self.http.post("/api/items", json={"id": 1})
        self.assertEqual(resp.status_code, 502)

    def test_invalid_body(self) -> None:
        """Non-positive IDs are rejected by validation."""
        resp = self.http.post("/api/items", json={"id": 0})
        self.assertEqual(resp.status_code, 422)
        resp = self.http.post("/api/items", json={"id": 1, "sid": 21})
        self.assertEqual(resp.status_code, 422)


class TestRemoveItem(_ApiTestCase):
    """DELETE /api/items/{id}."""

    def test_removed(self) -> None:
        """Removal answers 204 and empties the store."""
        resp = self.http.delete("/api/items/10007", params={"sid": 0})
        self.assertEqual(resp.status_code, 204)
        self.assertEqual(len(self.store), 0)

    def test_missing(self) -> None:
        """Unknown items are 404."""
        resp = self.http.delete("/api/items/42")
        self.assertEqual(resp.status_code, 404)

    def test_invalid_id(self) -> None:
        """A zero ID is 422."""
        resp = self.http.delete("/api/items/0")
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(len(self.store), 1)


class TestHistory(_ApiTestCase):
    """GET /api/items/{id}/history."""

    def test_history(self) -> None:
        """Recent prices are returned for the pair."""
        self.client.fetch_price_history.return_value = [900, 950, 1000]
        body = self.http.get(
            "/api/items/10007/history", params={"sid": 1}
        ).json()
        self.assertEqual(body, {"id": 10007, "sid": 1,
                                "history": [900, 950, 1000]})
        self.client.fetch_price_history.assert_called_once_with(10007, 1)

    def test_history_market_down(self) -> None:
        """A fetch failure is 502."""
        self.client.fetch_price_history.side_effect = FetchFailed("boom")
        resp = self.http.get("/api/items/10007/history")
        self.assertEqual(resp.status_code, 502)


class TestCheckPrices(_ApiTestCase):
    """POST /api/check-prices."""

    def test_runs_a_pass(self) -> None:
        """A manual check reports changes and updates the store."""
        self.client.fetch_item.return_value = make_snapshot(price=120000)
        resp = self.http.post("/api/check-prices")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["message"], "Price check completed")
        self.assertEqual(body["checked"], 1)
        self.assertEqual(body["changes"][0]["direction"], "increase")
        self.assertEqual(body["notifications_sent"], 1)
        stored = self.store.get(10007, 0)
        assert stored is not None
        self.assertEqual(stored.last_price, 120000)

    def test_status_shows_last_pass(self) -> None:
        """After a pass, status carries its summary."""
        self.client.fetch_item.return_value = make_snapshot(price=100000)
        self.http.post("/api/check-prices")
        body = self.http.get("/api/status").json()
        self.assertEqual(body["last_pass"]["checked"], 1)
        self.assertEqual(body["last_pass"]["changes"], [])


class TestSearchItems(_ApiTestCase):
    """GET /api/search-items."""

    def test_matches(self) -> None:
        """Name fragments return id/name pairs."""
        body = self.http.get(
            "/api/search-items", params={"q": "iron"}
        ).json()
        self.assertEqual(body, [{"id": 10007, "name": "Iron Ore"}])

    def test_short_or_missing_query(self) -> None:
        """Too-short or absent queries return an empty list."""
        self.assertEqual(self.http.get("/api/search-items").json(), [])
        self.assertEqual(
            self.http.get("/api/search-items", params={"q": "i"}).json(),
            [],
        )


class TestTestAlert(_ApiTestCase):
    """POST /api/test-alert."""

    def test_sent(self) -> None:
        """Delivery success is 200."""
        self.notifier.send_test_alert.return_value = NotificationOutcome(
            NotificationStatus.SENT
        )
        resp = self.http.post("/api/test-alert")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json()["message"], "Test alert sent successfully!"
        )

    def test_not_delivered(self) -> None:
        """A disabled or failed webhook is 500."""
        self.notifier.send_test_alert.return_value = NotificationOutcome(
            NotificationStatus.DISABLED, "webhook URL not configured",
        )
        resp = self.http.post("/api/test-alert")
        self.assertEqual(resp.status_code, 500)
        self.assertIn("DISCORD_WEBHOOK_URL", resp.json()["detail"])


if __name__ == "__main__":
    unittest.main()
