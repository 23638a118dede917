"""FastAPI routes for the cart: the operations the ordering UI drives.

The ``Checkout`` serving a request is injected from ``app.state.checkout``.
Rejected cart changes answer 409 with the reason; order service failures
answer 502 with the service's message.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ordering.api.schemas import (
    AddLineRequest,
    CartLineSchema,
    CartResponse,
    CeilingsResponse,
    CheckoutResponse,
    ResultResponse,
    SetQuantityRequest,
    SetUnitRequest,
)
from ordering.cart.limits import CartResult
from ordering.cart.units import format_line_detail, format_units_summary, unit_label, unit_of
from ordering.checkout.checkout import Checkout
from ordering.service.port import OrderServiceError

logger = structlog.get_logger(__name__)

cart_router = APIRouter(prefix="/cart", tags=["cart"])


def get_checkout(request: Request) -> Checkout:
    return request.app.state.checkout


def _result(result: CartResult, response: Response) -> ResultResponse:
    if not result.ok:
        response.status_code = 409
    return ResultResponse(ok=result.ok, error=result.error, message=result.message)


@cart_router.get("", response_model=CartResponse)
async def get_cart(checkout: Checkout = Depends(get_checkout)) -> CartResponse:
    """Current cart, checked against the ceilings and latest order on the service.

    When the order service cannot be reached the last known values are used.
    """
    try:
        checkout.sync()
    except OrderServiceError as exc:
        logger.warning("Serving cart with stale order data", error=exc.message)

    cart = checkout.cart
    totals = cart.unit_totals()
    return CartResponse(
        state=cart.state.value,
        lines=[
            CartLineSchema(
                **line.to_dict(),
                unit=unit_of(line).value,
                unit_label=unit_label(line.is_box, line.quantity),
                detail=format_line_detail(line.quantity, line.unit_price, line.is_box),
            )
            for line in cart.lines
        ],
        line_count=cart.line_count(),
        total_weight=totals.total_weight,
        total_boxes=totals.total_boxes,
        total_price=cart.total_price(),
        price_is_known=cart.price_is_known(),
        units_summary=format_units_summary(cart.lines),
        max_total_weight=cart.ceilings.max_total_weight,
        max_distinct_items=cart.ceilings.max_distinct_items,
        within_limits=cart.last_check.ok,
        can_submit=checkout.can_submit(),
    )


@cart_router.post("/items", response_model=ResultResponse)
async def add_line(
    body: AddLineRequest, response: Response, checkout: Checkout = Depends(get_checkout)
) -> ResultResponse:
    return _result(checkout.add(body.model_dump()), response)


@cart_router.put("/items/{product_id}/quantity", response_model=ResultResponse)
async def set_line_quantity(
    product_id: str, body: SetQuantityRequest, response: Response, checkout: Checkout = Depends(get_checkout)
) -> ResultResponse:
    return _result(checkout.set_quantity(product_id, body.quantity), response)


@cart_router.put("/items/{product_id}/unit", response_model=ResultResponse)
async def set_line_unit(
    product_id: str, body: SetUnitRequest, response: Response, checkout: Checkout = Depends(get_checkout)
) -> ResultResponse:
    return _result(checkout.set_unit_type(product_id, body.is_box), response)


@cart_router.delete("/items/{product_id}", response_model=ResultResponse)
async def remove_line(product_id: str, checkout: Checkout = Depends(get_checkout)) -> ResultResponse:
    checkout.remove(product_id)
    return ResultResponse(ok=True)


@cart_router.delete("", response_model=ResultResponse)
async def clear_cart(checkout: Checkout = Depends(get_checkout)) -> ResultResponse:
    checkout.clear()
    return ResultResponse(ok=True)


@cart_router.post("/settings/refresh", response_model=CeilingsResponse)
async def refresh_settings(checkout: Checkout = Depends(get_checkout)) -> CeilingsResponse:
    try:
        ceilings = checkout.refresh_settings()
    except OrderServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return CeilingsResponse(
        max_total_weight=ceilings.max_total_weight,
        max_distinct_items=ceilings.max_distinct_items,
    )


@cart_router.post("/checkout", response_model=CheckoutResponse)
async def confirm_order(response: Response, checkout: Checkout = Depends(get_checkout)) -> CheckoutResponse:
    """Confirm the cart as an order.

    1. Refresh the latest order so the weekly gate sees recent history
    2. Run the pre-submission gates
    3. Submit; the cart is cleared only when the service accepts the order
    """
    try:
        checkout.refresh_latest_order()
        result = checkout.confirm()
    except OrderServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc

    if not result.ok:
        response.status_code = 409
        return CheckoutResponse(ok=False, error=result.error, message=result.message)

    order = result.order
    if order is None:
        return CheckoutResponse(ok=True, message="Order placed; details are not available yet")
    return CheckoutResponse(
        ok=True,
        order_id=order.order_id,
        status=order.status,
        created_at=order.created_at,
    )
