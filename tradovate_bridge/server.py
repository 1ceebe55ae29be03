from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Iterable, TextIO

from pydantic import BaseModel

from .errors import BridgeError, ValidationError
from .registry import OperationRegistry

INVALID_REQUEST = 400
INTERNAL_ERROR = 500


def to_wire(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(result, (list, tuple)):
        return [to_wire(item) for item in result]
    if isinstance(result, dict):
        return {key: to_wire(value) for key, value in result.items()}
    return result


def success(request_id: Any, result: Any) -> Dict[str, Any]:
    return {"id": request_id, "result": to_wire(result)}


def failure(request_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"id": request_id, "error": {"code": code, "message": message}}


class StdioServer:
    """Line-delimited JSON front-end: one request in, one response out, in order."""

    def __init__(
        self,
        registry: OperationRegistry,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._logger = logger or logging.getLogger(__name__)

    def handle_line(self, line: str) -> Dict[str, Any]:
        try:
            envelope = json.loads(line)
        except json.JSONDecodeError as exc:
            return failure(None, INVALID_REQUEST, f"Invalid request: {exc}")

        if not isinstance(envelope, dict):
            return failure(None, INVALID_REQUEST, "Invalid request: expected a JSON object")

        request_id = envelope.get("id")
        method = envelope.get("method")
        if not isinstance(method, str) or not method:
            return failure(request_id, INVALID_REQUEST, "Invalid request: missing method")

        return self.handle(request_id, method, envelope.get("params"))

    def handle(self, request_id: Any, method: str, params: Any) -> Dict[str, Any]:
        self._logger.info("request_received", extra={"request_id": request_id, "method": method})

        if method == "ping":
            return success(request_id, "pong")

        try:
            result = self._registry.dispatch(method, params)
        except BridgeError as exc:
            extra: Dict[str, Any] = {"request_id": request_id, "method": method, "error": exc.message}
            if isinstance(exc, ValidationError):
                extra["field"] = exc.field
            self._logger.warning("operation_failed", extra=extra)
            return failure(request_id, exc.code, exc.message)
        except Exception as exc:
            self._logger.exception("operation_failed", extra={"request_id": request_id, "method": method})
            return failure(request_id, INTERNAL_ERROR, f"Internal error: {exc}")

        return success(request_id, result)

    def write(self, response: Dict[str, Any]) -> None:
        self._stdout.write(json.dumps(response, default=str) + "\n")
        self._stdout.flush()

    def serve(self, lines: Iterable[str] | None = None) -> int:
        source = lines if lines is not None else self._stdin
        for line in source:
            if not line.strip():
                continue
            self.write(self.handle_line(line))
        return 0
