"""Read-only view of orders owned by the remote order service.

The engine never creates or mutates orders itself; it receives them from the
order service after a submission or when reading the latest order for the
cadence gate.
"""

from enum import Enum

from protean.fields import DateTime, Float, String

from ordering.domain import ordering


class OrderStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@ordering.value_object
class PlacedOrder:
    """An order as recorded by the order service.

    Only ``status`` changes after creation, and only on the service side.
    """

    order_id = String(required=True, max_length=255)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime(required=True)
    total_weight = Float(default=0.0)
    total_price = Float(default=0.0)
