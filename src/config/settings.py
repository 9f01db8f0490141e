# src/config/settings.py

"""Central configuration for the market_watch service."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Read a truthy/falsy environment flag."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Central configuration for the market_watch service."""

    # --- Remote price source ---
    MARKET_API_BASE: str = os.getenv(
        "MARKET_API_BASE", "https://api.arsha.io"
    )
    MARKET_REGION: str = os.getenv(
        "MARKET_REGION", os.getenv("BDO_REGION", "eu")
    ).lower()
    ITEM_ICON_BASE: str = (
        "https://s1.pearlcdn.com/NAEU/TradeMarket/Common/img/BDO/item"
    )
    REQUEST_TIMEOUT: int = 10           # Seconds before a request times out
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"

    # --- Polling ---
    PRICE_CHECK_INTERVAL_MS: int = int(
        os.getenv("PRICE_CHECK_INTERVAL_MS", "300000")
    )
    ITEM_PACING_DELAY: float = 0.5      # Seconds between item fetches

    # --- Notifications ---
    DISCORD_WEBHOOK_URL: str | None = (
        os.getenv("DISCORD_WEBHOOK_URL") or None
    )
    ANNOUNCE_WATCHLIST_CHANGES: bool = _env_bool(
        "ANNOUNCE_WATCHLIST_CHANGES"
    )

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("MARKET_WATCH_DATA_DIR", str(BASE_DIR / "data"))
    )
    JSON_STORE_PATH: Path = DATA_DIR / "tracked_items.json"
    SQLITE_STORE_PATH: Path = DATA_DIR / "tracked_items.db"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Storage ---
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "json").lower()
    STORE_BACKENDS: list[str] = ["json", "sqlite"]

    # --- HTTP API ---
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "5000"))
