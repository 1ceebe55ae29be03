"""Line-delimited JSON bridge to the Tradovate REST API."""

from .registry import Operation, OperationRegistry, build_registry
from .server import StdioServer
from .tradovate import TradovateClient

__all__ = [
    "Operation",
    "OperationRegistry",
    "StdioServer",
    "TradovateClient",
    "build_registry",
]
