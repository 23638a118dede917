"""Checkout: the surface the UI layer drives.

Ties one account's cart to the order service: cart mutations are validated in
the account's mode (privileged accounts are unrestricted), settings refreshes
move the cart's ceilings, and ``confirm`` runs the pre-submission gates before
handing the cart to the order service.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime

import structlog

from ordering import config
from ordering.cart.cart import Cart
from ordering.cart.limits import CartError, CartResult, OrderCeilings, ValidationMode
from ordering.cart.line import CartLine
from ordering.checkout.account import Account
from ordering.checkout.cadence import can_order, next_window_start
from ordering.checkout.submission import submit_order
from ordering.order.order import PlacedOrder
from ordering.service.port import OrderService, OrderServiceError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult(CartResult):
    order: PlacedOrder | None = None


class Checkout:
    def __init__(
        self,
        cart: Cart,
        service: OrderService,
        account: Account,
        reset_weekday: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.cart = cart
        self.service = service
        self.account = account
        self.reset_weekday = reset_weekday if reset_weekday is not None else config.week_reset_day()
        self._clock = clock or (lambda: datetime.now(config.order_timezone()))
        self.latest_order: PlacedOrder | None = None

        self.cart.assign_owner(account.user_id)
        self.cart.revalidate(self.mode)

    @property
    def mode(self) -> ValidationMode:
        return self.account.validation_mode

    # -------------------------------------------------------------------
    # Cart operations
    # -------------------------------------------------------------------
    def add(self, raw_line: Mapping | CartLine) -> CartResult:
        return self.cart.add(raw_line, self.mode)

    def set_quantity(self, product_id: str, quantity: int) -> CartResult:
        return self.cart.set_quantity(product_id, quantity, self.mode)

    def set_unit_type(self, product_id: str, is_box: bool) -> CartResult:
        return self.cart.set_unit_type(product_id, is_box)

    def remove(self, product_id: str) -> CartResult:
        return self.cart.remove(product_id)

    def clear(self) -> CartResult:
        return self.cart.clear()

    # -------------------------------------------------------------------
    # Collaborators
    # -------------------------------------------------------------------
    def refresh_settings(self) -> OrderCeilings:
        ceilings = self.service.fetch_order_settings()
        self.cart.set_ceilings(ceilings)
        return ceilings

    def refresh_latest_order(self) -> PlacedOrder | None:
        self.latest_order = self.service.fetch_most_recent_order()
        return self.latest_order

    def sync(self) -> None:
        """Pull the current ceilings and latest order from the order service."""
        self.refresh_settings()
        self.refresh_latest_order()

    def switch_account(self, account: Account) -> None:
        if account.user_id != self.account.user_id:
            self.latest_order = None
        self.account = account
        self.cart.assign_owner(account.user_id)
        self.cart.revalidate(self.mode)

    def sign_out(self) -> None:
        self.cart.assign_owner(None)
        self.cart.clear()
        self.latest_order = None

    # -------------------------------------------------------------------
    # Gates
    # -------------------------------------------------------------------
    def cadence_allows(self, now: datetime | None = None) -> bool:
        last_order_at = self.latest_order.created_at if self.latest_order else None
        return can_order(
            last_order_at,
            now or self._clock(),
            self.account.privileged,
            self.reset_weekday,
        )

    def readiness(self, now: datetime | None = None) -> CheckoutResult:
        """First reason the cart cannot be submitted right now, if any."""
        now = now or self._clock()

        if not self.account.active:
            return CheckoutResult.failure(
                CartError.ACCOUNT_DISABLED,
                "This account cannot place orders; contact a supervisor",
            )
        if not self.cart.lines:
            return CheckoutResult.failure(CartError.EMPTY_CART, "Add a product before confirming")

        empty_line = next((line for line in self.cart.lines if line.quantity < 1), None)
        if empty_line is not None:
            return CheckoutResult.failure(
                CartError.INVALID_QUANTITY,
                f"Set a quantity of at least 1 for {empty_line.label} or remove it",
            )

        check = self.cart.last_check
        if not check.ok:
            return CheckoutResult(ok=False, error=check.error, message=check.message)

        if not self.cadence_allows(now):
            reopens = next_window_start(now, self.reset_weekday)
            return CheckoutResult.failure(
                CartError.CADENCE_BLOCKED,
                f"An order was already placed this week; ordering reopens on {reopens:%A %d %B}",
            )

        return CheckoutResult(ok=True)

    def can_submit(self, now: datetime | None = None) -> bool:
        return self.readiness(now).ok

    def confirm(self, now: datetime | None = None) -> CheckoutResult:
        """Submit the cart as an order.

        Gate failures come back as results. ``OrderServiceError`` propagates
        and leaves the cart populated for a retry, unless the service accepted
        the order and only its reply was unreadable. That case counts as
        placed so a retry cannot create the order twice; ``order`` is then
        whatever the service reports as the latest order.
        """
        readiness = self.readiness(now)
        if not readiness.ok:
            logger.info("Checkout blocked", user_id=self.account.user_id, error=readiness.error)
            return readiness

        self.cart.begin_submission()
        try:
            order = submit_order(self.cart.lines, self.service)
        except OrderServiceError as exc:
            if not exc.accepted:
                raise
            logger.warning("Order accepted with an unreadable reply", user_id=self.account.user_id, error=exc.message)
            order = None
        finally:
            self.cart.end_submission()

        self.cart.clear()
        if order is None:
            order = self._latest_order_after_submission()
        self.latest_order = order
        return CheckoutResult(ok=True, order=order)

    def _latest_order_after_submission(self) -> PlacedOrder | None:
        try:
            return self.service.fetch_most_recent_order()
        except OrderServiceError as exc:
            logger.warning("Could not read back the submitted order", user_id=self.account.user_id, error=exc.message)
            return None
