from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Type

from .domain import (
    AccountIdParams,
    ContractIdParams,
    Credentials,
    HistoricalDataParams,
    NoParams,
    OperationParams,
    OrderIdParams,
    PlaceOrderParams,
    RiskLimitParams,
    parse_params,
)
from .errors import InvalidParamsError, UnknownOperationError
from .tradovate import TradovateClient, build_order, build_risk_limit

OperationHandler = Callable[[Any], Any]

SUCCESS: Dict[str, bool] = {"success": True}


@dataclass(frozen=True)
class Operation:
    name: str
    description: str
    params_model: Type[OperationParams]
    handler: OperationHandler

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "params": self.params_model.model_json_schema(by_alias=True),
        }


class OperationRegistry:
    """Maps operation names to a parameter model and a client delegate.

    Validation happens entirely before the delegate runs, so a rejected
    request never reaches the network.
    """

    def __init__(self, operations: List[Operation], logger: logging.Logger | None = None) -> None:
        self._operations: Dict[str, Operation] = {op.name: op for op in operations}
        self._logger = logger or logging.getLogger(__name__)

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations.values())

    def get(self, name: str) -> Operation:
        op = self._operations.get(name)
        if op is None:
            raise UnknownOperationError(name)
        return op

    def dispatch(self, name: str, params: Mapping[str, Any] | None = None) -> Any:
        op = self.get(name)
        if params is None:
            params = {}
        if not isinstance(params, Mapping):
            raise InvalidParamsError(f"params for {name} must be an object")

        request = parse_params(op.params_model, params)
        self._logger.debug("dispatch", extra={"operation": name})
        return op.handler(request)

    def describe(self) -> List[Dict[str, Any]]:
        return [op.describe() for op in self]


def build_registry(
    client: TradovateClient,
    credentials: Credentials | None = None,
    logger: logging.Logger | None = None,
) -> OperationRegistry:
    def authenticate(_: NoParams) -> Any:
        if credentials is None:
            raise InvalidParamsError("no credentials configured for authenticate")
        return client.authenticate(credentials)

    def place_order(req: PlaceOrderParams) -> Any:
        return client.place_order(build_order(req))

    def cancel_order(req: OrderIdParams) -> Dict[str, bool]:
        client.cancel_order(req.order_id)
        return dict(SUCCESS)

    def get_historical_data(req: HistoricalDataParams) -> Any:
        return client.get_historical_data(req.contract_id, req.start_time, req.end_time, req.interval)

    def set_risk_limits(req: RiskLimitParams) -> Dict[str, bool]:
        client.set_risk_limits(build_risk_limit(req))
        return dict(SUCCESS)

    operations = [
        Operation("authenticate", "Authenticate with Tradovate API", NoParams, authenticate),
        Operation(
            "getAccounts",
            "Get all accounts for the authenticated user",
            NoParams,
            lambda _: client.get_accounts(),
        ),
        Operation("getPositions", "Get current positions", NoParams, lambda _: client.get_positions()),
        Operation("placeOrder", "Place a new order", PlaceOrderParams, place_order),
        Operation("cancelOrder", "Cancel an existing order", OrderIdParams, cancel_order),
        Operation(
            "getFills",
            "Get fills for a specific order",
            OrderIdParams,
            lambda req: client.get_fills(req.order_id),
        ),
        Operation("getContracts", "Get available contracts", NoParams, lambda _: client.get_contracts()),
        Operation(
            "getMarketData",
            "Get real-time market data for a contract",
            ContractIdParams,
            lambda req: client.get_market_data(req.contract_id),
        ),
        Operation(
            "getHistoricalData",
            "Get historical price data for a contract",
            HistoricalDataParams,
            get_historical_data,
        ),
        Operation("setRiskLimits", "Set risk limits for an account", RiskLimitParams, set_risk_limits),
        Operation(
            "getRiskLimits",
            "Get current risk management limits for an account",
            AccountIdParams,
            lambda req: client.get_risk_limits(req.account_id),
        ),
    ]
    return OperationRegistry(operations, logger=logger)
