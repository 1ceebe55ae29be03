from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Record exchanged with the Tradovate REST API using camelCase field names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Credentials(WireModel):
    name: str
    password: str
    app_id: str = Field(alias="appId")
    app_version: str = Field(default="1.0", alias="appVersion")
    client_id: str = Field(alias="cid")
    client_secret: str = Field(alias="sec")


class AccessToken(WireModel):
    access_token: str = Field(default="", alias="accessToken")
    md_access_token: str = Field(default="", alias="mdAccessToken")
    expiration_time: str = Field(default="", alias="expirationTime")
    user_id: int = Field(default=0, alias="userId")
    name: str = ""
    error_text: str | None = Field(default=None, alias="errorText")


class Account(WireModel):
    id: int = 0
    name: str = ""
    account_type: str = Field(default="", alias="accountType")
    active: bool = False
    cash_balance: float = Field(default=0.0, alias="cashBalance")
    realized_pnl: float = Field(default=0.0, alias="realizedPnL")
    unrealized_pnl: float = Field(default=0.0, alias="unrealizedPnL")


class Order(WireModel):
    id: int | None = None
    account_id: int = Field(default=0, alias="accountId")
    contract_id: int = Field(default=0, alias="contractId")
    order_type: str = Field(default="", alias="orderType")
    side: str | None = None
    price: float | None = None
    stop_price: float | None = Field(default=None, alias="stopPrice")
    quantity: int = 0
    time_in_force: str = Field(default="", alias="timeInForce")
    status: str | None = None
    filled_qty: int = Field(default=0, alias="filledQty")
    average_price: float | None = Field(default=None, alias="averagePrice")
    created_at: int | None = Field(default=None, alias="createdAt")
    updated_at: int | None = Field(default=None, alias="updatedAt")


class Fill(WireModel):
    id: int = 0
    order_id: int = Field(default=0, alias="orderId")
    price: float = 0.0
    quantity: int = 0
    timestamp: int = 0


class Position(WireModel):
    id: int = 0
    account_id: int = Field(default=0, alias="accountId")
    contract_id: int = Field(default=0, alias="contractId")
    net_pos: int = Field(default=0, alias="netPos")
    avg_price: float = Field(default=0.0, alias="avgPrice")
    realized_pl: float = Field(default=0.0, alias="realizedPL")
    unrealized_pl: float = Field(default=0.0, alias="unrealizedPL")


class Contract(WireModel):
    id: int = 0
    name: str = ""
    contract_type: str = Field(default="", alias="contractType")
    exchange: str = ""
    symbol: str = ""


class MarketData(WireModel):
    contract_id: int = Field(default=0, alias="contractId")
    bid: float = 0.0
    ask: float = 0.0
    last: float = 0.0
    volume: int = 0
    timestamp: int = 0


class HistoricalData(WireModel):
    contract_id: int = Field(default=0, alias="contractId")
    timestamp: int = 0
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    volume: int = 0


class RiskLimit(WireModel):
    account_id: int = Field(default=0, alias="accountId")
    day_max_loss: float = Field(default=0.0, alias="dayMaxLoss")
    max_drawdown: float = Field(default=0.0, alias="maxDrawdown")
    max_position_qty: int = Field(default=0, alias="maxPositionQty")
    trailing_stop: float = Field(default=0.0, alias="trailingStop")
