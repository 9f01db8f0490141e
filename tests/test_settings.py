# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
import unittest.mock
from pathlib import Path

from src.config.settings import Settings, _env_bool


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_check_interval_is_positive_int(self) -> None:
        """PRICE_CHECK_INTERVAL_MS must be a positive integer."""
        self.assertIsInstance(Settings.PRICE_CHECK_INTERVAL_MS, int)
        self.assertGreater(Settings.PRICE_CHECK_INTERVAL_MS, 0)

    def test_request_timeout_is_positive_int(self) -> None:
        """REQUEST_TIMEOUT must be a positive integer."""
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_pacing_delay_default(self) -> None:
        """Items are fetched half a second apart."""
        self.assertEqual(Settings.ITEM_PACING_DELAY, 0.5)

    def test_region_is_lowercase(self) -> None:
        """MARKET_REGION is normalised to lower case."""
        self.assertEqual(
            Settings.MARKET_REGION, Settings.MARKET_REGION.lower()
        )

    def test_store_backend_is_known(self) -> None:
        """The default backend is one of the registered backends."""
        self.assertIn(Settings.STORE_BACKEND, Settings.STORE_BACKENDS)

    def test_paths_are_path_objects(self) -> None:
        """Path constants are pathlib.Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.DATA_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)
        self.assertEqual(
            Settings.JSON_STORE_PATH.parent, Settings.DATA_DIR
        )

    def test_api_port_is_int(self) -> None:
        """API_PORT must be an integer."""
        self.assertIsInstance(Settings.API_PORT, int)

    def test_market_api_base_is_https(self) -> None:
        """The market API is reached over HTTPS."""
        self.assertTrue(Settings.MARKET_API_BASE.startswith("https://"))


class TestEnvBool(unittest.TestCase):
    """Tests for the boolean environment helper."""

    def test_truthy_values(self) -> None:
        """Common truthy spellings are accepted."""
        for raw in ("1", "true", "YES", " on "):
            with unittest.mock.patch.dict(
                "os.environ", {"MW_FLAG": raw},
            ):
                self.assertTrue(_env_bool("MW_FLAG"), raw)

    def test_missing_uses_default(self) -> None:
        """An unset variable falls back to the default."""
        with unittest.mock.patch.dict("os.environ", {}, clear=True):
            self.assertFalse(_env_bool("MW_FLAG"))
            self.assertTrue(_env_bool("MW_FLAG", default=True))

    def test_falsy_value(self) -> None:
        """Anything else is false."""
        with unittest.mock.patch.dict("os.environ", {"MW_FLAG": "no"}):
            self.assertFalse(_env_bool("MW_FLAG", default=True))


if __name__ == "__main__":
    unittest.main()
