"""Tradovate REST adapter package."""

from .builders import build_order, build_risk_limit
from .client import DEMO_BASE_URL, LIVE_BASE_URL, TradovateClient

__all__ = ["DEMO_BASE_URL", "LIVE_BASE_URL", "TradovateClient", "build_order", "build_risk_limit"]
