"""Cart line value object and the normalizer that builds it from raw input.

Raw lines arrive from the catalog UI and from the persisted snapshot, so any
field may be missing or malformed. ``normalize_line`` always produces a valid
``CartLine`` and is idempotent; rejection of unusable lines (empty product,
zero quantity) happens later in the cart.
"""

import math
from collections.abc import Mapping
from typing import Any

from protean.fields import Boolean, Float, Integer, Text

from ordering.domain import ordering

DEFAULT_PER_LINE_UNIT_CAP = 10


@ordering.value_object
class CartLine:
    """One product's requested quantity and unit mode within a cart.

    ``unit_price`` is per kilogram; box lines carry no usable price.
    """

    product_id = Text(sanitize=False, default="")
    name = Text(sanitize=False, default="")
    unit_price = Float(default=0.0)
    image_ref = Text(sanitize=False, default="")
    quantity = Integer(min_value=0, default=1)
    per_line_unit_cap = Integer(min_value=1, default=DEFAULT_PER_LINE_UNIT_CAP)
    box_eligible = Boolean(default=False)
    is_box = Boolean(default=False)

    @property
    def label(self) -> str:
        return self.name or self.product_id


def as_number(value: Any) -> float | None:
    """Return ``value`` as a finite float, or ``None`` when it is not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def safe_quantity(value: Any) -> int:
    if value is None:
        return 1
    number = as_number(value)
    if number is None or number < 0:
        return 0
    return math.floor(number)


def safe_unit_cap(value: Any) -> int:
    number = as_number(value)
    if number is None or number < 1:
        return DEFAULT_PER_LINE_UNIT_CAP
    return math.floor(number)


def normalize_line(raw: Mapping | CartLine) -> CartLine:
    """Coerce a raw line into a canonical ``CartLine``. Never raises.

    Anything that is not a mapping is read as an empty line.
    """
    if isinstance(raw, CartLine):
        data = raw.to_dict()
    elif isinstance(raw, Mapping):
        data = dict(raw)
    else:
        data = {}

    box_eligible = bool(data.get("box_eligible"))
    unit_price = as_number(data.get("unit_price"))

    return CartLine(
        product_id=_as_text(data.get("product_id")),
        name=_as_text(data.get("name")),
        unit_price=unit_price if unit_price is not None else 0.0,
        image_ref=_as_text(data.get("image_ref")),
        quantity=safe_quantity(data.get("quantity")),
        per_line_unit_cap=safe_unit_cap(data.get("per_line_unit_cap")),
        box_eligible=box_eligible,
        is_box=bool(data.get("is_box")) and box_eligible,
    )


def with_changes(line: CartLine, **changes) -> CartLine:
    """Copy of ``line`` with ``changes`` applied, bypassing normalization."""
    return CartLine(**{**line.to_dict(), **changes})
