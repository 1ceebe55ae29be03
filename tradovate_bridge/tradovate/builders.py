from __future__ import annotations

from ..domain import Order, PlaceOrderParams, RiskLimit, RiskLimitParams


def build_order(req: PlaceOrderParams) -> Order:
    order = Order(
        account_id=req.account_id,
        contract_id=req.contract_id,
        order_type=req.order_type,
        quantity=req.quantity,
        time_in_force=req.time_in_force,
    )

    if req.price is not None:
        order.price = req.price

    if req.side:
        order.side = req.side

    if req.stop_price is not None:
        order.stop_price = req.stop_price

    return order


def build_risk_limit(req: RiskLimitParams) -> RiskLimit:
    return RiskLimit(
        account_id=req.account_id,
        day_max_loss=req.day_max_loss,
        max_drawdown=req.max_drawdown,
        max_position_qty=int(req.max_position_qty),
        trailing_stop=req.trailing_stop,
    )
