"""Tests for order submission."""

import pytest
from ordering.cart.line import CartLine
from ordering.checkout.submission import build_payload, submit_order
from ordering.order.order import OrderStatus
from ordering.service.fake_adapter import FakeOrderService
from ordering.service.port import OrderServiceError


def _lines():
    return [
        CartLine(product_id="p1", name="Vacio", unit_price=9800.0, image_ref="vacio.jpg", quantity=3),
        CartLine(product_id="b1", name="Pollo", quantity=2, box_eligible=True, is_box=True),
    ]


class TestBuildPayload:
    def test_strips_price_and_display_fields(self):
        assert build_payload(_lines()) == {
            "items": [
                {"product_id": "p1", "quantity": 3, "is_box": False},
                {"product_id": "b1", "quantity": 2, "is_box": True},
            ]
        }

    def test_empty(self):
        assert build_payload([]) == {"items": []}


class TestSubmitOrder:
    def test_hands_payload_to_service(self):
        service = FakeOrderService()
        order = submit_order(_lines(), service)

        assert order.status == OrderStatus.PENDING.value
        assert order.total_weight == 3.0
        assert service.calls == [{"method": "submit_order", "payload": build_payload(_lines())}]

    def test_service_errors_propagate_verbatim(self):
        service = FakeOrderService()
        service.configure(should_succeed=False, failure_reason="Ya realizaste un pedido esta semana")

        with pytest.raises(OrderServiceError) as exc_info:
            submit_order(_lines(), service)

        assert str(exc_info.value) == "Ya realizaste un pedido esta semana"
