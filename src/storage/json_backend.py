# src/storage/json_backend.py

"""Persists the tracked-item map as a single JSON document."""

import json
import logging
import os
from pathlib import Path
from typing import Any, cast

from src.config.settings import Settings
from src.models.tracked_item import TrackedItem

logger = logging.getLogger("market_watch.storage")


def record_key(item_id: int, variant_id: int) -> str:
    """Return the map key used for an (item, variant) pair."""
    return f"{item_id}-{variant_id}"


class JsonFileBackend:
    """Key-value map of tracked items serialised to one JSON file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.JSON_STORE_PATH
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("JsonFileBackend initialised, path=%s", self.path)

    def load(self) -> list[TrackedItem]:
        """Read every stored record; a missing file is an empty store."""
        if not self.path.exists():
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                data: Any = json.load(f)
        except ValueError as exc:
            logger.error(
                "Ignoring unreadable store file %s: %s", self.path, exc,
            )
            return []
        if not isinstance(data, dict):
            logger.warning(
                "Ignoring malformed store file %s (expected an object)",
                self.path,
            )
            return []
        entries = cast(dict[str, Any], data)
        try:
            items = [
                TrackedItem.from_dict(row)
                for row in entries.values()
                if isinstance(row, dict)
            ]
        except (KeyError, TypeError, ValueError) as exc:
            logger.error(
                "Ignoring store file %s with a bad record: %s",
                self.path, exc,
            )
            return []
        logger.info("Loaded %d tracked items from %s", len(items), self.path)
        return items

    def save(self, items: list[TrackedItem]) -> None:
        """Replace the file with the full current record set.

        Writes a sibling temp file first so a crash mid-write leaves the
        previous file intact.
        """
        data = {
            record_key(item.item_id, item.variant_id): item.to_dict()
            for item in items
        }
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)
        logger.debug("Saved %d tracked items to %s", len(items), self.path)

    def close(self) -> None:
        """Nothing to release for a plain file."""
