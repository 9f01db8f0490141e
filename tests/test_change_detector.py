# tests/test_change_detector.py

"""Tests for the price change detector."""

import unittest

from _factories import make_item, make_snapshot

from src.models.tracked_item import PriceDirection
from src.services.change_detector import detect


class TestDetect(unittest.TestCase):
    """detect() emits events only for real moves off a nonzero baseline."""

    def test_equal_price_is_no_change(self) -> None:
        """Same price yields nothing even if stock and sale time moved."""
        old = make_item(price=100000)
        fresh = make_snapshot(price=100000, stock=99, sold=1800000000)
        self.assertIsNone(detect(old, fresh))

    def test_zero_baseline_is_suppressed(self) -> None:
        """A stored price of 0 never alerts."""
        old = make_item(price=0)
        fresh = make_snapshot(price=50000)
        self.assertIsNone(detect(old, fresh))

    def test_increase(self) -> None:
        """fresh > old > 0 is an increase."""
        old = make_item(price=100000)
        event = detect(old, make_snapshot(price=120000))
        assert event is not None
        self.assertEqual(event.direction, PriceDirection.INCREASE)
        self.assertEqual(event.old_price, 100000)
        self.assertEqual(event.new_price, 120000)

    def test_decrease(self) -> None:
        """fresh < old is a decrease."""
        event = detect(make_item(price=100000), make_snapshot(price=90000))
        assert event is not None
        self.assertEqual(event.direction, PriceDirection.DECREASE)

    def test_drop_to_zero_is_a_decrease(self) -> None:
        """A fetched price of 0 after a real baseline still alerts."""
        event = detect(make_item(price=100000), make_snapshot(price=0))
        assert event is not None
        self.assertEqual(event.direction, PriceDirection.DECREASE)
        self.assertEqual(event.new_price, 0)

    def test_one_silver_delta_qualifies(self) -> None:
        """There is no magnitude threshold."""
        event = detect(make_item(price=100000), make_snapshot(price=100001))
        self.assertIsNotNone(event)

    def test_event_carries_fresh_stock_and_sale_time(self) -> None:
        """Stock and sale time come from the snapshot."""
        event = detect(
            make_item(price=10),
            make_snapshot(price=20, stock=3, sold=1700009999),
        )
        assert event is not None
        self.assertEqual(event.stock, 3)
        self.assertEqual(event.last_sold_time, 1700009999)
        self.assertEqual(event.item_id, 10007)
        self.assertEqual(event.variant_id, 0)

    def test_name_falls_back_to_stored(self) -> None:
        """An empty fresh name keeps the stored one."""
        event = detect(
            make_item(price=10, name="Stored"),
            make_snapshot(price=20, name=""),
        )
        assert event is not None
        self.assertEqual(event.item_name, "Stored")


if __name__ == "__main__":
    unittest.main()
