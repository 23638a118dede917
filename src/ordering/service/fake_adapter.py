"""Configurable in-memory order service for development and testing.

Behaves like the remote service without any network calls and records every
call so tests can assert on what the engine sent.
"""

from datetime import UTC, datetime
from uuid import uuid4

from ordering.cart.limits import OrderCeilings
from ordering.order.order import OrderStatus, PlacedOrder
from ordering.service.port import OrderService, OrderServiceError


class FakeOrderService(OrderService):
    def __init__(
        self,
        settings: OrderCeilings | None = None,
        orders: list[PlacedOrder] | None = None,
    ) -> None:
        self.settings = settings if settings is not None else OrderCeilings()
        self.orders: list[PlacedOrder] = list(orders or [])
        self.should_succeed: bool = True
        self.failure_reason: str = "Order service unavailable"
        self.failure_status: int = 400
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Order service unavailable",
        failure_status: int = 400,
    ) -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.failure_status = failure_status

    def fetch_order_settings(self) -> OrderCeilings:
        self.calls.append({"method": "fetch_order_settings"})
        return self.settings

    def fetch_most_recent_order(self) -> PlacedOrder | None:
        self.calls.append({"method": "fetch_most_recent_order"})
        if not self.orders:
            return None
        return max(self.orders, key=lambda order: order.created_at)

    def submit_order(self, payload: dict) -> PlacedOrder:
        self.calls.append({"method": "submit_order", "payload": payload})

        if not self.should_succeed:
            raise OrderServiceError(self.failure_reason, status_code=self.failure_status)

        order = PlacedOrder(
            order_id=f"ord-{uuid4().hex[:8]}",
            status=OrderStatus.PENDING.value,
            created_at=datetime.now(UTC),
            total_weight=float(sum(item["quantity"] for item in payload["items"] if not item["is_box"])),
        )
        self.orders.append(order)
        return order
