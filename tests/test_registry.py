from __future__ import annotations

import unittest
from datetime import datetime, timezone
from unittest.mock import Mock

from tradovate_bridge.domain import AccessToken, Credentials, Fill, MarketData, Order, RiskLimit
from tradovate_bridge.errors import (
    APIError,
    AuthenticationError,
    InvalidLimitError,
    InvalidParamsError,
    InvalidTimestampError,
    MissingConditionalFieldError,
    MissingFieldError,
    TransportError,
    UnknownOperationError,
)
from tradovate_bridge.registry import build_registry
from tradovate_bridge.tradovate import TradovateClient

CREDENTIALS = Credentials(
    name="trader",
    password="secret",
    app_id="bridge",
    app_version="1.0",
    client_id="cid",
    client_secret="sec",
)

VALID_PARAMS = {
    "placeOrder": {
        "accountId": 12345,
        "contractId": 54321,
        "orderType": "Limit",
        "price": 100.50,
        "quantity": 10,
        "timeInForce": "Day",
    },
    "cancelOrder": {"orderId": 67890},
    "getFills": {"orderId": 67890},
    "getMarketData": {"contractId": 54321},
    "getHistoricalData": {
        "contractId": 54321,
        "startTime": "2024-03-01T00:00:00Z",
        "endTime": "2024-03-02T00:00:00Z",
        "interval": "1h",
    },
    "setRiskLimits": {
        "accountId": 12345,
        "dayMaxLoss": 1000.0,
        "maxDrawdown": 5000.0,
        "maxPositionQty": 10,
        "trailingStop": 0.05,
    },
    "getRiskLimits": {"accountId": 12345},
}


class RegistryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.client = Mock(spec=TradovateClient)
        self.registry = build_registry(self.client, CREDENTIALS)

    def test_operation_names(self) -> None:
        self.assertEqual(
            sorted(op.name for op in self.registry),
            sorted(
                [
                    "authenticate",
                    "getAccounts",
                    "getPositions",
                    "getContracts",
                    "placeOrder",
                    "cancelOrder",
                    "getFills",
                    "getMarketData",
                    "getHistoricalData",
                    "setRiskLimits",
                    "getRiskLimits",
                ]
            ),
        )

    def test_describe_lists_params_schema(self) -> None:
        described = {item["name"]: item for item in self.registry.describe()}

        self.assertEqual(described["placeOrder"]["description"], "Place a new order")
        self.assertIn("accountId", described["placeOrder"]["params"]["properties"])
        self.assertIn("accountId", described["placeOrder"]["params"]["required"])
        self.assertNotIn("price", described["placeOrder"]["params"]["required"])

    def test_unknown_operation(self) -> None:
        with self.assertRaises(UnknownOperationError):
            self.registry.dispatch("explode", {})

    def test_params_must_be_a_mapping(self) -> None:
        with self.assertRaises(InvalidParamsError):
            self.registry.dispatch("getFills", [67890])

    def test_missing_required_field_never_reaches_client(self) -> None:
        for name, params in VALID_PARAMS.items():
            for field in params:
                if name == "placeOrder" and field == "price":
                    continue
                with self.subTest(operation=name, field=field):
                    partial = {k: v for k, v in params.items() if k != field}
                    with self.assertRaises(MissingFieldError) as ctx:
                        self.registry.dispatch(name, partial)
                    self.assertEqual(ctx.exception.field, field)

        self.assertEqual(self.client.mock_calls, [])

    def test_authenticate_uses_configured_credentials(self) -> None:
        self.client.authenticate.return_value = AccessToken(access_token="tok", user_id=7, name="trader")

        result = self.registry.dispatch("authenticate", None)

        self.client.authenticate.assert_called_once_with(CREDENTIALS)
        self.assertEqual(result.access_token, "tok")

    def test_authenticate_without_credentials(self) -> None:
        registry = build_registry(self.client)

        with self.assertRaises(InvalidParamsError):
            registry.dispatch("authenticate", {})
        self.client.authenticate.assert_not_called()

    def test_authenticate_failure_propagates(self) -> None:
        self.client.authenticate.side_effect = AuthenticationError("Invalid credentials", status_code=401)

        with self.assertRaises(AuthenticationError):
            self.registry.dispatch("authenticate", {})

    def test_no_param_queries_delegate(self) -> None:
        self.client.get_accounts.return_value = []
        self.client.get_positions.return_value = []
        self.client.get_contracts.return_value = []

        self.assertEqual(self.registry.dispatch("getAccounts", {}), [])
        self.assertEqual(self.registry.dispatch("getPositions", {}), [])
        self.assertEqual(self.registry.dispatch("getContracts", {}), [])

    def test_transport_error_propagates_unchanged(self) -> None:
        error = TransportError("error sending request: timed out")
        self.client.get_positions.side_effect = error

        with self.assertRaises(TransportError) as ctx:
            self.registry.dispatch("getPositions", {})

        self.assertIs(ctx.exception, error)

    def test_place_limit_order(self) -> None:
        self.client.place_order.side_effect = lambda order: order.model_copy(update={"id": 67890})

        result = self.registry.dispatch("placeOrder", VALID_PARAMS["placeOrder"])

        self.assertEqual(result.id, 67890)
        sent = self.client.place_order.call_args.args[0]
        self.assertIsInstance(sent, Order)
        self.assertEqual(sent.account_id, 12345)
        self.assertEqual(sent.contract_id, 54321)
        self.assertEqual(sent.order_type, "Limit")
        self.assertEqual(sent.price, 100.50)
        self.assertEqual(sent.quantity, 10)
        self.assertEqual(sent.time_in_force, "Day")

    def test_limit_order_without_price(self) -> None:
        params = dict(VALID_PARAMS["placeOrder"])
        del params["price"]

        with self.assertRaises(MissingConditionalFieldError) as ctx:
            self.registry.dispatch("placeOrder", params)

        self.assertEqual(ctx.exception.field, "price")
        self.client.place_order.assert_not_called()

    def test_market_order_without_price(self) -> None:
        params = dict(VALID_PARAMS["placeOrder"], orderType="Market")
        del params["price"]
        self.client.place_order.return_value = Order(id=1, order_type="Market")

        result = self.registry.dispatch("placeOrder", params)

        self.assertEqual(result.id, 1)
        self.assertIsNone(self.client.place_order.call_args.args[0].price)

    def test_cancel_order(self) -> None:
        self.client.cancel_order.return_value = None

        result = self.registry.dispatch("cancelOrder", {"orderId": 67890})

        self.assertEqual(result, {"success": True})
        self.client.cancel_order.assert_called_once_with(67890)

    def test_get_fills_and_market_data(self) -> None:
        self.client.get_fills.return_value = [Fill(id=1, order_id=67890, price=100.5, quantity=2)]
        self.client.get_market_data.return_value = MarketData(contract_id=54321, bid=100.25)

        fills = self.registry.dispatch("getFills", {"orderId": 67890.0})
        quote = self.registry.dispatch("getMarketData", {"contractId": 54321})

        self.client.get_fills.assert_called_once_with(67890)
        self.client.get_market_data.assert_called_once_with(54321)
        self.assertEqual(fills[0].order_id, 67890)
        self.assertEqual(quote.bid, 100.25)

    def test_get_historical_data(self) -> None:
        self.client.get_historical_data.return_value = []

        self.registry.dispatch("getHistoricalData", VALID_PARAMS["getHistoricalData"])

        self.client.get_historical_data.assert_called_once_with(
            54321,
            datetime(2024, 3, 1, tzinfo=timezone.utc),
            datetime(2024, 3, 2, tzinfo=timezone.utc),
            "1h",
        )

    def test_get_historical_data_bad_timestamp(self) -> None:
        params = dict(VALID_PARAMS["getHistoricalData"], endTime="not-a-time")

        with self.assertRaises(InvalidTimestampError) as ctx:
            self.registry.dispatch("getHistoricalData", params)

        self.assertEqual(ctx.exception.field, "endTime")
        self.client.get_historical_data.assert_not_called()

    def test_set_risk_limits(self) -> None:
        self.client.set_risk_limits.return_value = None

        result = self.registry.dispatch("setRiskLimits", VALID_PARAMS["setRiskLimits"])

        self.assertEqual(result, {"success": True})
        self.client.set_risk_limits.assert_called_once_with(
            RiskLimit(
                account_id=12345,
                day_max_loss=1000.0,
                max_drawdown=5000.0,
                max_position_qty=10,
                trailing_stop=0.05,
            )
        )

    def test_set_risk_limits_negative_day_max_loss(self) -> None:
        params = dict(VALID_PARAMS["setRiskLimits"], dayMaxLoss=-1000)

        with self.assertRaises(InvalidLimitError) as ctx:
            self.registry.dispatch("setRiskLimits", params)

        self.assertEqual(ctx.exception.field, "dayMaxLoss")
        self.client.set_risk_limits.assert_not_called()

    def test_set_risk_limits_client_error(self) -> None:
        self.client.set_risk_limits.side_effect = APIError(400, "invalid account ID")

        with self.assertRaises(APIError) as ctx:
            self.registry.dispatch("setRiskLimits", VALID_PARAMS["setRiskLimits"])

        self.assertEqual(ctx.exception.status_code, 400)

    def test_get_risk_limits(self) -> None:
        self.client.get_risk_limits.return_value = RiskLimit(account_id=12345, day_max_loss=1000.0)

        result = self.registry.dispatch("getRiskLimits", {"accountId": 12345})

        self.client.get_risk_limits.assert_called_once_with(12345)
        self.assertEqual(result.day_max_loss, 1000.0)


if __name__ == "__main__":
    unittest.main()
