from __future__ import annotations

from typing import Any, Dict


class BridgeError(Exception):
    """Base class for every error the bridge reports back to a caller."""

    code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ConfigError(BridgeError):
    code = 500


# --- request envelope ---


class RequestError(BridgeError):
    code = 400


class UnknownOperationError(RequestError):
    code = 404

    def __init__(self, method: str) -> None:
        super().__init__(f"Unknown method: {method}")
        self.method = method


class InvalidParamsError(RequestError):
    pass


# --- parameter validation (never reaches the network) ---


class ValidationError(BridgeError):
    code = 400

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["field"] = self.field
        return payload


class MissingFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(field, f"missing required field: {field}")


class TypeMismatchError(ValidationError):
    def __init__(self, field: str, expected: str | None = None) -> None:
        message = f"invalid type for {field}"
        if expected:
            message = f"{message}: expected {expected}"
        super().__init__(field, message)


class MissingConditionalFieldError(ValidationError):
    def __init__(self, field: str, condition: str) -> None:
        super().__init__(field, f"{field} is required when {condition}")
        self.condition = condition


class InvalidLimitError(ValidationError):
    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(field, message or f"missing or invalid {field}: must be >= 0")


class MissingLimitError(MissingFieldError, InvalidLimitError):
    def __init__(self, field: str) -> None:
        ValidationError.__init__(self, field, f"missing or invalid {field}: required")


class LimitTypeMismatchError(TypeMismatchError, InvalidLimitError):
    def __init__(self, field: str, expected: str | None = None) -> None:
        ValidationError.__init__(self, field, f"missing or invalid {field}: expected {expected or 'number'}")


class InvalidTimestampError(ValidationError):
    def __init__(self, field: str, value: Any = None) -> None:
        super().__init__(field, f"invalid {field}: {value!r} is not an ISO-8601 timestamp")
        self.value = value


class InvalidTimeRangeError(ValidationError):
    def __init__(self, field: str = "endTime") -> None:
        super().__init__(field, "end time must be after start time")


# --- API client ---


class ClientError(BridgeError):
    code = 502


class TransportError(ClientError):
    code = 503

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class APIError(ClientError):
    def __init__(self, status_code: int, error_text: str | None = None) -> None:
        message = f"status {status_code}"
        if error_text:
            message = f"{message}: {error_text}"
        super().__init__(message)
        self.status_code = status_code
        self.error_text = error_text
        self.code = status_code


class DecodeError(ClientError):
    code = 502

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class AuthenticationError(ClientError):
    code = 401

    def __init__(self, message: str, status_code: int | None = None, cause: BaseException | None = None) -> None:
        super().__init__(f"authentication failed: {message}")
        self.status_code = status_code
        self.cause = cause
