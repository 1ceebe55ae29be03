from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import TypeAdapter

from ..domain import (
    AccessToken,
    Account,
    Contract,
    Credentials,
    Fill,
    HistoricalData,
    MarketData,
    Order,
    Position,
    RiskLimit,
    WireModel,
)
from ..errors import APIError, AuthenticationError, DecodeError, TransportError

LIVE_BASE_URL = "https://live.tradovate.com/v1"
DEMO_BASE_URL = "https://demo.tradovateapi.com/v1"
DEFAULT_TIMEOUT = 10.0

T = TypeVar("T")


class TradovateClient:
    """Synchronous client for the Tradovate REST API.

    Holds the bearer token obtained by :meth:`authenticate` and attaches it to
    every later request. One HTTP call per method; nothing is retried.
    """

    def __init__(
        self,
        base_url: str = LIVE_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Optional[logging.Logger] = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        self._token_lock = threading.Lock()
        self._access_token: str | None = None

    @property
    def base_url(self) -> str:
        return str(self._http.base_url)

    @property
    def access_token(self) -> str | None:
        with self._token_lock:
            return self._access_token

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TradovateClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # --- operations ---

    def authenticate(self, credentials: Credentials) -> AccessToken:
        try:
            resp = self._http.post("/auth/accessTokenRequest", json=credentials.to_wire())
        except httpx.HTTPError as exc:
            raise AuthenticationError(f"failed to send request: {exc}", cause=exc) from exc

        if resp.status_code >= 400:
            error_text = _error_text(resp)
            raise AuthenticationError(error_text or f"status {resp.status_code}", status_code=resp.status_code)

        try:
            token = AccessToken.model_validate(resp.json())
        except ValueError as exc:
            raise AuthenticationError(f"failed to decode response: {exc}", cause=exc) from exc

        if token.error_text:
            raise AuthenticationError(token.error_text, status_code=resp.status_code)

        with self._token_lock:
            self._access_token = token.access_token

        self._logger.info("authenticated", extra={"user_id": token.user_id, "expiration_time": token.expiration_time})
        return token

    def get_accounts(self) -> List[Account]:
        return self._request("GET", "/account/list", List[Account])

    def get_risk_limits(self, account_id: int) -> RiskLimit:
        return self._request("GET", f"/account/riskLimits/{account_id}", RiskLimit)

    def set_risk_limits(self, limits: RiskLimit) -> None:
        self._request("POST", "/account/setRiskLimits", None, body=limits)

    def place_order(self, order: Order) -> Order:
        return self._request("POST", "/order/placeOrder", Order, body=order)

    def cancel_order(self, order_id: int) -> None:
        self._request("DELETE", f"/order/cancel/{order_id}", None)

    def get_fills(self, order_id: int) -> List[Fill]:
        return self._request("GET", f"/fill/list/{order_id}", List[Fill])

    def get_positions(self) -> List[Position]:
        return self._request("GET", "/position/list", List[Position])

    def get_contracts(self) -> List[Contract]:
        return self._request("GET", "/contract/list", List[Contract])

    def get_market_data(self, contract_id: int) -> MarketData:
        return self._request("GET", f"/md/getQuote/{contract_id}", MarketData)

    def get_historical_data(
        self,
        contract_id: int,
        start_time: datetime,
        end_time: datetime,
        interval: str,
    ) -> List[HistoricalData]:
        params = {
            "contractId": contract_id,
            "startTime": int(start_time.timestamp()),
            "endTime": int(end_time.timestamp()),
            "interval": interval,
        }
        return self._request("GET", "/md/historical", List[HistoricalData], params=params)

    # --- plumbing ---

    def _request(
        self,
        method: str,
        path: str,
        result_type: Type[T] | Any,
        *,
        body: WireModel | None = None,
        params: Dict[str, Any] | None = None,
    ) -> Any:
        headers: Dict[str, str] = {}
        token = self.access_token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        payload = body.to_wire() if body is not None else None
        self._logger.debug("http_request", extra={"method": method, "path": path})

        try:
            resp = self._http.request(method, path, json=payload, params=params, headers=headers)
        except httpx.HTTPError as exc:
            self._logger.error("http_error", extra={"method": method, "path": path, "error": str(exc)})
            raise TransportError(f"error sending request: {exc}", cause=exc) from exc

        if resp.status_code >= 400:
            error = APIError(resp.status_code, _error_text(resp))
            self._logger.error("http_error", extra={"method": method, "path": path, "status": resp.status_code})
            raise error

        if result_type is None:
            return None

        try:
            return TypeAdapter(result_type).validate_python(resp.json())
        except ValueError as exc:
            raise DecodeError(f"error decoding response from {path}: {exc}", cause=exc) from exc


def _error_text(resp: httpx.Response) -> str | None:
    try:
        payload = resp.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get("errorText"):
        return str(payload["errorText"])
    return None


__all__ = ["DEFAULT_TIMEOUT", "DEMO_BASE_URL", "LIVE_BASE_URL", "TradovateClient"]
