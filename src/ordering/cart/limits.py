"""Limit policy: decides whether a set of cart lines is a legal order.

Checks run in a fixed order and the first failure wins, so every rejected
cart maps to exactly one reason:

    1. box eligibility         (always enforced)
    2. distinct item count     (standard mode only)
    3. per-line unit cap       (standard mode only)
    4. total weight            (standard mode only, box lines excluded)

Unrestricted mode is the privileged-account bypass of the quota checks. Box
eligibility is a catalog-integrity rule and is never bypassed.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from protean.fields import Integer

from ordering.cart.line import CartLine, as_number
from ordering.domain import ordering

DEFAULT_MAX_TOTAL_WEIGHT = 10
DEFAULT_MAX_DISTINCT_ITEMS = 2


class ValidationMode(Enum):
    STANDARD = "standard"
    UNRESTRICTED = "unrestricted"


class CartError(Enum):
    BOX_INELIGIBLE = "box ineligible"
    TOO_MANY_ITEMS = "too many distinct items"
    PER_LINE_CAP_EXCEEDED = "per-line cap exceeded"
    TOTAL_WEIGHT_EXCEEDED = "total weight exceeded"
    NOT_FOUND = "not found"
    INVALID_QUANTITY = "invalid quantity"
    MISSING_PRODUCT = "missing product"
    CADENCE_BLOCKED = "cadence blocked"
    EMPTY_CART = "empty cart"
    ACCOUNT_DISABLED = "account disabled"


@dataclass(frozen=True)
class CartResult:
    """Outcome of a cart operation: ``ok`` or a reason code plus a message."""

    ok: bool
    error: str | None = None
    message: str | None = None

    @classmethod
    def success(cls) -> "CartResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: CartError, message: str) -> "CartResult":
        return cls(ok=False, error=error.value, message=message)


@ordering.value_object
class OrderCeilings:
    """Global bounds applied to every standard-mode order."""

    max_total_weight = Integer(min_value=1, default=DEFAULT_MAX_TOTAL_WEIGHT)
    max_distinct_items = Integer(min_value=1, default=DEFAULT_MAX_DISTINCT_ITEMS)


def _positive_int(value: Any, fallback: int) -> int:
    number = as_number(value)
    if number is None or number < 1:
        return fallback
    return math.floor(number)


def sanitize_ceilings(max_total_weight: Any = None, max_distinct_items: Any = None) -> OrderCeilings:
    """Build ceilings from untrusted values, falling back to the defaults."""
    return OrderCeilings(
        max_total_weight=_positive_int(max_total_weight, DEFAULT_MAX_TOTAL_WEIGHT),
        max_distinct_items=_positive_int(max_distinct_items, DEFAULT_MAX_DISTINCT_ITEMS),
    )


def check_lines(
    lines: Sequence[CartLine],
    ceilings: OrderCeilings,
    mode: ValidationMode = ValidationMode.STANDARD,
) -> CartResult:
    for line in lines:
        if line.is_box and not line.box_eligible:
            return CartResult.failure(
                CartError.BOX_INELIGIBLE,
                f"{line.label} cannot be ordered by the box",
            )

    if mode == ValidationMode.UNRESTRICTED:
        return CartResult.success()

    if len(lines) > ceilings.max_distinct_items:
        return CartResult.failure(
            CartError.TOO_MANY_ITEMS,
            f"Only {ceilings.max_distinct_items} distinct products are allowed per order",
        )

    for line in lines:
        if line.quantity > line.per_line_unit_cap:
            return CartResult.failure(
                CartError.PER_LINE_CAP_EXCEEDED,
                f"{line.label} allows at most {line.per_line_unit_cap} per order",
            )

    total_weight = sum(line.quantity for line in lines if not line.is_box)
    if total_weight > ceilings.max_total_weight:
        return CartResult.failure(
            CartError.TOTAL_WEIGHT_EXCEEDED,
            f"Total weight cannot exceed {ceilings.max_total_weight} kg",
        )

    return CartResult.success()
