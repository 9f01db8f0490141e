# src/storage/sqlite_backend.py

"""Single-table SQLite persistence for tracked items."""

import logging
import sqlite3
from pathlib import Path

from src.config.settings import Settings
from src.models.tracked_item import TrackedItem

logger = logging.getLogger("market_watch.storage")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS tracked_items (
    item_id        INTEGER NOT NULL,
    sid            INTEGER NOT NULL,
    name           TEXT    NOT NULL,
    last_price     INTEGER NOT NULL DEFAULT 0,
    last_stock     INTEGER NOT NULL DEFAULT 0,
    last_sold_time INTEGER NOT NULL DEFAULT 0,
    added_at       INTEGER NOT NULL,
    PRIMARY KEY (item_id, sid)
);
"""


class SqliteBackend:
    """Stores the tracked-item set in one SQLite table."""

    def __init__(self, db_path: Path | None = None) -> None:
        path = db_path or Settings.SQLITE_STORE_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self.path = path
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("SqliteBackend opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def load(self) -> list[TrackedItem]:
        """Return every stored record."""
        rows = self._conn.execute(
            "SELECT item_id, sid, name, last_price, last_stock, "
            "       last_sold_time, added_at "
            "FROM tracked_items",
        ).fetchall()
        items = [
            TrackedItem(
                item_id=r[0],
                variant_id=r[1],
                name=r[2],
                last_price=r[3],
                last_stock=r[4],
                last_sold_time=r[5],
                added_at=r[6],
            )
            for r in rows
        ]
        logger.info("Loaded %d tracked items from %s", len(items), self.path)
        return items

    def save(self, items: list[TrackedItem]) -> None:
        """Replace the table contents with *items* in one transaction."""
        with self._conn:
            self._conn.execute("DELETE FROM tracked_items")
            self._conn.executemany(
                "INSERT INTO tracked_items "
                "(item_id, sid, name, last_price, last_stock, "
                " last_sold_time, added_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        i.item_id,
                        i.variant_id,
                        i.name,
                        i.last_price,
                        i.last_stock,
                        i.last_sold_time,
                        i.added_at,
                    )
                    for i in items
                ],
            )
        logger.debug("Saved %d tracked items to %s", len(items), self.path)
