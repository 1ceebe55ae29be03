from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from tradovate_bridge.config import load_config
from tradovate_bridge.errors import ConfigError
from tradovate_bridge.tradovate import DEMO_BASE_URL, LIVE_BASE_URL

REQUIRED_ENV = {
    "TRADOVATE_USERNAME": "trader",
    "TRADOVATE_PASSWORD": "secret",
    "TRADOVATE_APP_ID": "bridge",
    "TRADOVATE_CID": "42",
    "TRADOVATE_SEC": "shh",
}


@patch("tradovate_bridge.config.load_dotenv")
class ConfigTestCase(unittest.TestCase):
    def test_defaults(self, _load_dotenv) -> None:
        with patch.dict(os.environ, REQUIRED_ENV, clear=True):
            config = load_config()

        self.assertEqual(config.credentials.name, "trader")
        self.assertEqual(config.credentials.app_version, "1.0")
        self.assertEqual(config.credentials.client_id, "42")
        self.assertEqual(config.environment, "live")
        self.assertEqual(config.base_url, LIVE_BASE_URL)
        self.assertEqual(config.timeout, 10.0)
        self.assertEqual(config.log_level, "INFO")

    def test_demo_environment_and_overrides(self, _load_dotenv) -> None:
        env = dict(
            REQUIRED_ENV,
            TRADOVATE_ENV="Demo",
            TRADOVATE_APP_VERSION="2.1",
            TRADOVATE_TIMEOUT="3.5",
            LOG_LEVEL="debug",
        )
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        self.assertEqual(config.base_url, DEMO_BASE_URL)
        self.assertEqual(config.credentials.app_version, "2.1")
        self.assertEqual(config.timeout, 3.5)
        self.assertEqual(config.log_level, "DEBUG")

    def test_base_url_override(self, _load_dotenv) -> None:
        with patch.dict(os.environ, dict(REQUIRED_ENV, TRADOVATE_BASE_URL="http://localhost:9000/v1"), clear=True):
            config = load_config()

        self.assertEqual(config.base_url, "http://localhost:9000/v1")

    def test_missing_variables_are_named(self, _load_dotenv) -> None:
        env = {k: v for k, v in REQUIRED_ENV.items() if k not in {"TRADOVATE_PASSWORD", "TRADOVATE_SEC"}}
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ConfigError) as ctx:
                load_config()

        self.assertIn("TRADOVATE_PASSWORD", str(ctx.exception))
        self.assertIn("TRADOVATE_SEC", str(ctx.exception))

    def test_unknown_environment(self, _load_dotenv) -> None:
        with patch.dict(os.environ, dict(REQUIRED_ENV, TRADOVATE_ENV="staging"), clear=True):
            with self.assertRaises(ConfigError):
                load_config()

    def test_bad_timeout(self, _load_dotenv) -> None:
        with patch.dict(os.environ, dict(REQUIRED_ENV, TRADOVATE_TIMEOUT="soon"), clear=True):
            with self.assertRaises(ConfigError):
                load_config()


if __name__ == "__main__":
    unittest.main()
