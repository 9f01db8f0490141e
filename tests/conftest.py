# tests/conftest.py

"""Shared pytest fixtures for all market_watch tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path: Path) -> Generator[Path, None, None]:
    """Point every store and log path at a per-test temp directory."""
    with patch.multiple(
        "src.config.settings.Settings",
        DATA_DIR=tmp_path,
        JSON_STORE_PATH=tmp_path / "tracked_items.json",
        SQLITE_STORE_PATH=tmp_path / "tracked_items.db",
        LOGS_DIR=tmp_path / "logs",
    ):
        yield tmp_path
