from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .domain import Credentials
from .errors import ConfigError
from .tradovate import DEMO_BASE_URL, LIVE_BASE_URL

_REQUIRED_VARS = [
    "TRADOVATE_USERNAME",
    "TRADOVATE_PASSWORD",
    "TRADOVATE_APP_ID",
    "TRADOVATE_CID",
    "TRADOVATE_SEC",
]

_BASE_URLS = {"live": LIVE_BASE_URL, "demo": DEMO_BASE_URL}


@dataclass(frozen=True)
class Config:
    credentials: Credentials
    environment: str
    base_url: str
    timeout: float
    log_level: str


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from the process environment (and ``.env`` if present).

    Raises ``ConfigError`` naming every missing required variable.
    """
    load_dotenv(dotenv_path=env_path)

    missing = [name for name in _REQUIRED_VARS if not os.getenv(name)]
    if missing:
        raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")

    environment = os.getenv("TRADOVATE_ENV", "live").strip().lower()
    if environment not in _BASE_URLS:
        raise ConfigError(f"TRADOVATE_ENV must be one of {sorted(_BASE_URLS)}, got {environment!r}")

    try:
        timeout = float(os.getenv("TRADOVATE_TIMEOUT", "10"))
    except ValueError as exc:
        raise ConfigError(f"TRADOVATE_TIMEOUT must be a number: {exc}") from exc

    credentials = Credentials(
        name=os.environ["TRADOVATE_USERNAME"],
        password=os.environ["TRADOVATE_PASSWORD"],
        app_id=os.environ["TRADOVATE_APP_ID"],
        app_version=os.getenv("TRADOVATE_APP_VERSION") or "1.0",
        client_id=os.environ["TRADOVATE_CID"],
        client_secret=os.environ["TRADOVATE_SEC"],
    )

    return Config(
        credentials=credentials,
        environment=environment,
        base_url=os.getenv("TRADOVATE_BASE_URL") or _BASE_URLS[environment],
        timeout=timeout,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
