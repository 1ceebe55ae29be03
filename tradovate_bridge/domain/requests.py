from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Annotated, Any, ClassVar, Dict, List, Mapping, Type, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    Strict,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from ..errors import (
    InvalidLimitError,
    InvalidTimeRangeError,
    InvalidTimestampError,
    LimitTypeMismatchError,
    MissingConditionalFieldError,
    MissingFieldError,
    MissingLimitError,
    TypeMismatchError,
    ValidationError,
)


def _truncate_number(value: Any) -> Any:
    # JSON numbers arrive as floats; identifiers and quantities are whole.
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return value


_FRACTION = re.compile(r"\.(\d+)")


def _fit_fraction(match: re.Match[str]) -> str:
    # fromisoformat on 3.10 only takes 3 or 6 fractional digits.
    return "." + match.group(1)[:6].ljust(6, "0")


def _parse_timestamp(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(_fit_fraction, text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise PydanticCustomError(
            "invalid_timestamp",
            "{value} is not an ISO-8601 timestamp",
            {"value": value},
        ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


Number = Annotated[float, Strict()]
WireInt = Annotated[StrictInt, BeforeValidator(_truncate_number)]
Timestamp = Annotated[datetime, Strict(), BeforeValidator(_parse_timestamp)]


class OperationParams(BaseModel):
    """Typed view over an operation's untyped parameter mapping."""

    # Wire names only; NaN and Infinity are not valid numbers.
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, allow_inf_nan=False)

    # Fields whose absence or wrong type is reported with a more specific error.
    missing_errors: ClassVar[Dict[str, Type[MissingFieldError]]] = {}
    type_errors: ClassVar[Dict[str, Type[TypeMismatchError]]] = {}


class NoParams(OperationParams):
    pass


class AccountIdParams(OperationParams):
    account_id: WireInt = Field(alias="accountId")


class OrderIdParams(OperationParams):
    order_id: WireInt = Field(alias="orderId")


class ContractIdParams(OperationParams):
    contract_id: WireInt = Field(alias="contractId")


class PlaceOrderParams(OperationParams):
    account_id: WireInt = Field(alias="accountId")
    contract_id: WireInt = Field(alias="contractId")
    order_type: StrictStr = Field(alias="orderType")
    quantity: WireInt
    time_in_force: StrictStr = Field(alias="timeInForce")

    price: Number | None = None
    side: StrictStr | None = None
    stop_price: Number | None = Field(default=None, alias="stopPrice")

    @model_validator(mode="after")
    def _require_limit_price(self) -> "PlaceOrderParams":
        if self.order_type == "Limit" and self.price is None:
            raise PydanticCustomError(
                "missing_conditional_field",
                "{field} is required when {condition}",
                {"field": "price", "condition": "orderType is Limit"},
            )
        return self


class HistoricalDataParams(OperationParams):
    contract_id: WireInt = Field(alias="contractId")
    start_time: Timestamp = Field(alias="startTime")
    end_time: Timestamp = Field(alias="endTime")
    interval: StrictStr

    @model_validator(mode="after")
    def _check_time_range(self) -> "HistoricalDataParams":
        if self.end_time <= self.start_time:
            raise PydanticCustomError(
                "invalid_time_range",
                "end time must be after start time",
                {"field": "endTime"},
            )
        return self


class RiskLimitParams(OperationParams):
    account_id: WireInt = Field(alias="accountId")
    day_max_loss: Number = Field(alias="dayMaxLoss", ge=0)
    max_drawdown: Number = Field(alias="maxDrawdown", ge=0)
    max_position_qty: Number = Field(alias="maxPositionQty", ge=0)
    trailing_stop: Number = Field(alias="trailingStop", ge=0)

    missing_errors: ClassVar[Dict[str, Type[MissingFieldError]]] = {
        "dayMaxLoss": MissingLimitError,
        "maxDrawdown": MissingLimitError,
        "maxPositionQty": MissingLimitError,
        "trailingStop": MissingLimitError,
    }
    type_errors: ClassVar[Dict[str, Type[TypeMismatchError]]] = {
        "dayMaxLoss": LimitTypeMismatchError,
        "maxDrawdown": LimitTypeMismatchError,
        "maxPositionQty": LimitTypeMismatchError,
        "trailingStop": LimitTypeMismatchError,
    }


P = TypeVar("P", bound=OperationParams)

_TYPE_NAMES = {
    "int_type": "number",
    "float_type": "number",
    "string_type": "string",
    "datetime_type": "ISO-8601 string",
    "finite_number": "finite number",
}


def _error_field(error: Mapping[str, Any]) -> str:
    ctx = error.get("ctx") or {}
    if "field" in ctx:
        return str(ctx["field"])
    return ".".join(str(part) for part in error.get("loc", ())) or "params"


def translate_errors(model: Type[OperationParams], errors: List[Mapping[str, Any]]) -> ValidationError:
    """Collapse pydantic's error list into the first error of the highest-priority kind.

    Presence is checked before types, and types before the value rules, each in
    field declaration order.
    """
    missing = [e for e in errors if e["type"] == "missing"]
    if missing:
        field = _error_field(missing[0])
        return model.missing_errors.get(field, MissingFieldError)(field)

    rules = {
        "greater_than_equal",
        "invalid_timestamp",
        "invalid_time_range",
        "missing_conditional_field",
    }
    mismatched = [e for e in errors if e["type"] not in rules]
    if mismatched:
        first = mismatched[0]
        field = _error_field(first)
        return model.type_errors.get(field, TypeMismatchError)(field, _TYPE_NAMES.get(first["type"]))

    first = errors[0]
    field = _error_field(first)
    kind = first["type"]
    if kind == "greater_than_equal":
        return InvalidLimitError(field)
    if kind == "invalid_timestamp":
        return InvalidTimestampError(field, (first.get("ctx") or {}).get("value"))
    if kind == "invalid_time_range":
        return InvalidTimeRangeError(field)
    return MissingConditionalFieldError(field, (first.get("ctx") or {}).get("condition", "required"))


def parse_params(model: Type[P], params: Mapping[str, Any]) -> P:
    try:
        return model.model_validate(dict(params))
    except PydanticValidationError as exc:
        raise translate_errors(model, exc.errors(include_url=False)) from exc
