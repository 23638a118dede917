"""Order submission: translate validated cart lines and hand them off.

No validation happens here; callers submit only lines that passed the limit
policy and the cadence gate. Display fields and prices are stripped because
the order service prices orders itself.
"""

from collections.abc import Sequence

import structlog

from ordering.cart.line import CartLine
from ordering.order.order import PlacedOrder
from ordering.service.port import OrderService

logger = structlog.get_logger(__name__)


def build_payload(lines: Sequence[CartLine]) -> dict:
    return {
        "items": [
            {"product_id": line.product_id, "quantity": line.quantity, "is_box": line.is_box}
            for line in lines
        ]
    }


def submit_order(lines: Sequence[CartLine], service: OrderService) -> PlacedOrder:
    """Send ``lines`` to the order service.

    ``OrderServiceError`` propagates unchanged; clearing the cart on success
    is left to the caller.
    """
    order = service.submit_order(build_payload(lines))
    logger.info("Order accepted by order service", order_id=order.order_id, line_count=len(lines))
    return order
