"""Wire records and typed operation parameters."""

from .models import (
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
from .requests import (
    AccountIdParams,
    ContractIdParams,
    HistoricalDataParams,
    NoParams,
    OperationParams,
    OrderIdParams,
    PlaceOrderParams,
    RiskLimitParams,
    parse_params,
)

__all__ = [
    "AccessToken",
    "Account",
    "AccountIdParams",
    "Contract",
    "ContractIdParams",
    "Credentials",
    "Fill",
    "HistoricalData",
    "HistoricalDataParams",
    "MarketData",
    "NoParams",
    "OperationParams",
    "Order",
    "OrderIdParams",
    "PlaceOrderParams",
    "Position",
    "RiskLimit",
    "RiskLimitParams",
    "WireModel",
    "parse_params",
]
