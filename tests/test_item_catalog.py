# tests/test_item_catalog.py

"""Tests for the curated item-name lookup."""

import unittest

from src.sources.item_catalog import COMMON_ITEMS, MAX_RESULTS, search_items


class TestSearchItems(unittest.TestCase):
    """Substring search over the curated list."""

    def test_case_insensitive_substring(self) -> None:
        """'ORE' finds the four ores, among others."""
        ids = [e.id for e in search_items("ORE")]
        for ore_id in (10007, 10008, 10009, 10010):
            self.assertIn(ore_id, ids)

    def test_short_query_returns_nothing(self) -> None:
        """One character (after trimming) is too short to search."""
        self.assertEqual(search_items("a"), [])
        self.assertEqual(search_items("  i  "), [])

    def test_results_are_capped(self) -> None:
        """At most ten entries come back."""
        broad = [e for e in COMMON_ITEMS if "st" in e.name.lower()]
        self.assertGreater(len(broad), MAX_RESULTS)
        self.assertEqual(search_items("st"), broad[:MAX_RESULTS])

    def test_no_match(self) -> None:
        """An unknown name gives an empty list."""
        self.assertEqual(search_items("kzarka"), [])

    def test_to_dict(self) -> None:
        """Entries serialise to id/name."""
        entry = search_items("iron ore")[0]
        self.assertEqual(entry.to_dict(), {"id": 10007, "name": "Iron Ore"})


if __name__ == "__main__":
    unittest.main()
