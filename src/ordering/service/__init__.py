"""Order service factory.

Provides get_order_service() / set_order_service() to swap implementations:
- FakeOrderService for development and testing (ORDER_SERVICE_ADAPTER=fake)
- HttpOrderService for the remote service (ORDER_SERVICE_ADAPTER=http)
"""

from ordering import config
from ordering.service.port import OrderService

_current_service: OrderService | None = None


def get_order_service() -> OrderService:
    """Return the configured order service, building it on first use."""
    global _current_service
    if _current_service is None:
        adapter = config.order_service_adapter()
        if adapter == "fake":
            from ordering.service.fake_adapter import FakeOrderService

            _current_service = FakeOrderService()
        elif adapter == "http":
            from ordering.service.http_adapter import HttpOrderService

            _current_service = HttpOrderService(
                config.order_service_url(),
                token=config.order_service_token(),
                timeout=config.order_service_timeout(),
            )
        else:
            raise ValueError(f"Unknown order service adapter: {adapter}")
    return _current_service


def set_order_service(service: OrderService) -> None:
    global _current_service
    _current_service = service


def reset_order_service() -> None:
    global _current_service
    _current_service = None
