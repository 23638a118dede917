"""HTTP client for the remote order service.

Wire format of the service (camelCase JSON):

    GET  /orders/settings     -> {"maxTotalKg": 10, "maxItems": 2}
    GET  /orders?limit=1      -> {"orders": [{"id", "status", "createdAt", ...}]}
    POST /orders              <- {"items": [{"productId", "kg", "isBox"}]}

Error responses carry ``{"message": str | list[str]}``; the message is raised
unchanged so the user sees what the service said.
"""

from datetime import datetime

import requests
import structlog
from protean.exceptions import ValidationError

from ordering.cart.limits import OrderCeilings, sanitize_ceilings
from ordering.order.order import PlacedOrder
from ordering.service.port import OrderService, OrderServiceError

logger = structlog.get_logger(__name__)


def _error_message(response: requests.Response) -> str:
    try:
        message = response.json().get("message")
    except (ValueError, AttributeError):
        message = None

    if isinstance(message, list):
        message = ", ".join(str(part) for part in message)
    if not isinstance(message, str):
        message = None
    return message or f"Order service request failed ({response.status_code})"


def _to_placed_order(data: dict, status_code: int | None = None) -> PlacedOrder:
    try:
        return PlacedOrder(
            order_id=str(data["id"]),
            status=data.get("status", "pending"),
            created_at=datetime.fromisoformat(data["createdAt"]),
            total_weight=float(data.get("totalKg") or 0),
            total_price=float(data.get("totalPrice") or 0),
        )
    except (KeyError, TypeError, ValueError, AttributeError, ValidationError) as exc:
        raise OrderServiceError(
            f"Unexpected order payload from order service: {exc}", status_code=status_code
        ) from exc


class HttpOrderService(OrderService):
    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, **kwargs) -> tuple[int, dict]:
        """Send a request and return the status code with the decoded JSON object.

        Every failure, including a 2xx whose body is not a JSON object, is
        raised as ``OrderServiceError``.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("Order service unreachable", method=method, url=url, error=str(exc))
            raise OrderServiceError(f"Order service unreachable: {exc}") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("Order service rejected request", method=method, url=url, status=response.status_code)
            raise OrderServiceError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("Order service sent an unreadable body", method=method, url=url, status=response.status_code)
            raise OrderServiceError(
                "Order service sent a response that is not JSON", status_code=response.status_code
            ) from exc
        if not isinstance(data, dict):
            raise OrderServiceError(
                f"Order service sent {type(data).__name__} where an object was expected",
                status_code=response.status_code,
            )
        return response.status_code, data

    def fetch_order_settings(self) -> OrderCeilings:
        _, data = self._request("GET", "/orders/settings")
        return sanitize_ceilings(data.get("maxTotalKg"), data.get("maxItems"))

    def fetch_most_recent_order(self) -> PlacedOrder | None:
        _, data = self._request("GET", "/orders", params={"limit": 1})
        orders = data.get("orders") or []
        if not isinstance(orders, list):
            raise OrderServiceError("Order service sent an order list that is not a list")
        if not orders:
            return None
        return _to_placed_order(orders[0])

    def submit_order(self, payload: dict) -> PlacedOrder:
        """POST the order.

        A 2xx whose body cannot be read raises ``OrderServiceError`` with
        ``accepted`` set: the order exists on the service even though no
        ``PlacedOrder`` could be built from the reply.
        """
        body = {
            "items": [
                {"productId": item["product_id"], "kg": item["quantity"], "isBox": item["is_box"]}
                for item in payload["items"]
            ]
        }
        status_code, data = self._request("POST", "/orders", json=body)
        logger.info("Order submitted", order_id=data.get("id"))
        return _to_placed_order(data, status_code=status_code)
