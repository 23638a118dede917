"""Cart state machine: the single-user cart that becomes an order at checkout.

    EMPTY → POPULATED → SUBMITTING → EMPTY      (order accepted)
                                   → POPULATED  (order rejected, kept for retry)

Every mutation is all-or-nothing: the limit policy is evaluated against the
full line set the mutation would produce, and the cart only changes (and is
persisted) when that set is accepted. Validation failures are returned as
``CartResult`` values, never raised.
"""

from collections.abc import Mapping
from enum import Enum
from numbers import Integral

import structlog
from protean.exceptions import ValidationError

from ordering.cart.limits import (
    CartError,
    CartResult,
    OrderCeilings,
    ValidationMode,
    check_lines,
    sanitize_ceilings,
)
from ordering.cart.line import CartLine, normalize_line, with_changes
from ordering.cart.storage import CartStore, MemoryCartStore
from ordering.cart.units import UnitTotals, aggregate_units, price_is_known

logger = structlog.get_logger(__name__)


class CartState(Enum):
    EMPTY = "Empty"
    POPULATED = "Populated"
    SUBMITTING = "Submitting"


def _is_whole(quantity) -> bool:
    if isinstance(quantity, bool):
        return False
    if isinstance(quantity, Integral):
        return True
    return isinstance(quantity, float) and quantity.is_integer()


class Cart:
    def __init__(
        self,
        store: CartStore | None = None,
        ceilings: OrderCeilings | None = None,
        owner_id: str | None = None,
        lines: tuple[CartLine, ...] = (),
    ) -> None:
        self._store = store if store is not None else MemoryCartStore()
        self._ceilings = ceilings if ceilings is not None else OrderCeilings()
        self._lines = tuple(lines)
        self._mode = ValidationMode.STANDARD
        self._submitting = False
        self.owner_id = owner_id
        self._last_check = check_lines(self._lines, self._ceilings, self._mode)

    # -------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------
    @classmethod
    def load(cls, store: CartStore, owner_id: str | None = None) -> "Cart":
        """Rebuild the cart from ``store``, re-normalizing every stored line.

        An unreadable snapshot yields an empty cart. A snapshot that belongs
        to another owner is discarded.
        """
        try:
            snapshot = store.load()
            if snapshot is None:
                return cls(store=store, owner_id=owner_id)
            lines = cls._restore_lines(snapshot["items"])
            ceilings = sanitize_ceilings(
                snapshot.get("max_total_weight"),
                snapshot.get("max_distinct_items"),
            )
            stored_owner = snapshot.get("owner_id")
        except (KeyError, TypeError, ValueError, AttributeError, ValidationError) as exc:
            logger.warning("Discarding corrupted cart snapshot", error=str(exc))
            return cls(store=store, owner_id=owner_id)

        cart = cls(store=store, ceilings=ceilings, owner_id=stored_owner, lines=lines)
        if owner_id is not None:
            cart.assign_owner(owner_id)
        return cart

    @staticmethod
    def _restore_lines(items) -> tuple[CartLine, ...]:
        if not isinstance(items, list):
            raise ValueError("Cart snapshot items must be a list")

        restored: dict[str, CartLine] = {}
        for raw in items:
            if not isinstance(raw, Mapping):
                raise ValueError(f"Cart snapshot item is not an object: {raw!r}")
            line = normalize_line(raw)
            if not line.product_id:
                logger.warning("Dropping stored cart line without a product")
                continue
            restored[line.product_id] = line
        return tuple(restored.values())

    # -------------------------------------------------------------------
    # Read-only queries
    # -------------------------------------------------------------------
    @property
    def lines(self) -> tuple[CartLine, ...]:
        return self._lines

    @property
    def ceilings(self) -> OrderCeilings:
        return self._ceilings

    @property
    def state(self) -> CartState:
        if self._submitting:
            return CartState.SUBMITTING
        return CartState.POPULATED if self._lines else CartState.EMPTY

    @property
    def last_check(self) -> CartResult:
        """Limit policy verdict for the lines currently in the cart."""
        return self._last_check

    def get(self, product_id: str) -> CartLine | None:
        return next((line for line in self._lines if line.product_id == product_id), None)

    def total_weight(self) -> int:
        return aggregate_units(self._lines).total_weight

    def total_price(self) -> float:
        """Sum of kg lines only; callers must also consult ``price_is_known``."""
        return sum(line.quantity * line.unit_price for line in self._lines if not line.is_box)

    def price_is_known(self) -> bool:
        return price_is_known(self._lines)

    def unit_totals(self) -> UnitTotals:
        return aggregate_units(self._lines)

    def line_count(self) -> int:
        return len(self._lines)

    def snapshot(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "items": [line.to_dict() for line in self._lines],
            "max_total_weight": self._ceilings.max_total_weight,
            "max_distinct_items": self._ceilings.max_distinct_items,
        }

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add(self, raw_line: Mapping | CartLine, mode: ValidationMode = ValidationMode.STANDARD) -> CartResult:
        """Add a product, or overwrite its line when it is already in the cart."""
        line = normalize_line(raw_line)
        if not line.product_id:
            return CartResult.failure(CartError.MISSING_PRODUCT, "Choose a product before adding it")
        if line.quantity < 1:
            return CartResult.failure(CartError.INVALID_QUANTITY, "Enter a whole quantity of at least 1")

        if self.get(line.product_id) is None:
            candidate = (*self._lines, line)
        else:
            candidate = tuple(line if current.product_id == line.product_id else current for current in self._lines)

        return self._apply("add", line.product_id, candidate, mode)

    def set_quantity(
        self,
        product_id: str,
        quantity: int,
        mode: ValidationMode = ValidationMode.STANDARD,
    ) -> CartResult:
        line = self.get(product_id)
        if line is None:
            return self._not_found(product_id)
        if not _is_whole(quantity) or quantity < 0:
            return CartResult.failure(CartError.INVALID_QUANTITY, "Enter a whole, non-negative quantity")

        updated = with_changes(line, quantity=int(quantity))
        candidate = tuple(updated if current.product_id == product_id else current for current in self._lines)
        return self._apply("set_quantity", product_id, candidate, mode)

    def set_unit_type(self, product_id: str, is_box: bool) -> CartResult:
        """Switch a line between kg and boxes.

        Quotas are not re-checked: the toggle changes neither the number of
        lines nor the cap that applies to them.
        """
        line = self.get(product_id)
        if line is None:
            return self._not_found(product_id)
        if is_box and not line.box_eligible:
            return CartResult.failure(CartError.BOX_INELIGIBLE, f"{line.label} cannot be ordered by the box")

        updated = with_changes(line, is_box=bool(is_box))
        self._commit(tuple(updated if current.product_id == product_id else current for current in self._lines))
        logger.info("Cart line unit changed", product_id=product_id, is_box=bool(is_box))
        return CartResult.success()

    def remove(self, product_id: str) -> CartResult:
        remaining = tuple(line for line in self._lines if line.product_id != product_id)
        if len(remaining) != len(self._lines):
            self._commit(remaining)
            logger.info("Cart line removed", product_id=product_id)
        return CartResult.success()

    def clear(self) -> CartResult:
        self._submitting = False
        self._commit(())
        logger.info("Cart cleared", owner_id=self.owner_id)
        return CartResult.success()

    # -------------------------------------------------------------------
    # Ceilings, ownership and submission state
    # -------------------------------------------------------------------
    def set_ceilings(self, ceilings: OrderCeilings) -> None:
        """Adopt new ceilings for future validation; existing lines stay."""
        if ceilings == self._ceilings:
            return
        self._ceilings = ceilings
        self._commit(self._lines)
        logger.info(
            "Cart ceilings updated",
            max_total_weight=ceilings.max_total_weight,
            max_distinct_items=ceilings.max_distinct_items,
            within_limits=self._last_check.ok,
        )

    def revalidate(self, mode: ValidationMode) -> CartResult:
        """Re-run the limit policy for ``mode`` without touching the lines."""
        self._mode = mode
        self._last_check = check_lines(self._lines, self._ceilings, mode)
        return self._last_check

    def assign_owner(self, owner_id: str | None) -> None:
        """Bind the cart to ``owner_id``.

        An unowned cart is adopted as is; the lines of a different owner are
        dropped.
        """
        if owner_id == self.owner_id:
            return
        previous_owner, self.owner_id = self.owner_id, owner_id
        if previous_owner is None:
            self._commit(self._lines)
            return
        if self._lines:
            logger.info("Discarding cart of previous owner", previous_owner=previous_owner)
        self._submitting = False
        self._commit(())

    def begin_submission(self) -> None:
        self._submitting = True

    def end_submission(self) -> None:
        self._submitting = False

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _apply(self, operation: str, product_id: str, candidate: tuple, mode: ValidationMode) -> CartResult:
        result = check_lines(candidate, self._ceilings, mode)
        if not result.ok:
            logger.info("Cart change rejected", operation=operation, product_id=product_id, error=result.error)
            return result

        self._mode = mode
        self._commit(candidate)
        logger.info("Cart line updated", operation=operation, product_id=product_id)
        return result

    def _commit(self, lines: tuple[CartLine, ...]) -> None:
        self._lines = lines
        self._last_check = check_lines(lines, self._ceilings, self._mode)
        self._store.save(self.snapshot())

    def _not_found(self, product_id: str) -> CartResult:
        return CartResult.failure(CartError.NOT_FOUND, f"Product {product_id} is not in the order")
