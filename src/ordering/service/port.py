"""Order service port (abstract interface).

The remote order service owns orders and order settings. The engine programs
against this port so the HTTP client can be swapped for an in-memory fake in
development and tests.
"""

from abc import ABC, abstractmethod

from ordering.cart.limits import OrderCeilings
from ordering.order.order import PlacedOrder


class OrderServiceError(Exception):
    """Transport or server failure reported by the order service.

    The message is the service's own and is shown to the user unchanged.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def accepted(self) -> bool:
        """The service answered 2xx, so the request itself went through."""
        return self.status_code is not None and 200 <= self.status_code < 300


class OrderService(ABC):
    @abstractmethod
    def fetch_order_settings(self) -> OrderCeilings:
        """Current global ceilings for new orders."""
        ...

    @abstractmethod
    def fetch_most_recent_order(self) -> PlacedOrder | None:
        """Latest order of the signed-in account, if any."""
        ...

    @abstractmethod
    def submit_order(self, payload: dict) -> PlacedOrder:
        """Create an order from ``{"items": [{product_id, quantity, is_box}]}``.

        Raises ``OrderServiceError`` when the service rejects the order or
        cannot be reached.
        """
        ...
