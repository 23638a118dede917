"""Order units: weight lines in kilograms and discrete box lines.

Box pricing is negotiated per product and cannot be resolved client-side, so
any order holding a box line has no known total price. Weight and box counts
are always reported as two separate quantities.
"""

from collections.abc import Iterable
from enum import Enum

from protean.fields import Integer

from ordering.cart.line import CartLine
from ordering.domain import ordering


class OrderUnit(Enum):
    KILOGRAM = "kg"
    BOX = "box"


@ordering.value_object
class UnitTotals:
    total_weight = Integer(min_value=0, default=0)
    total_boxes = Integer(min_value=0, default=0)


def unit_of(line: CartLine) -> OrderUnit:
    return OrderUnit.BOX if line.is_box else OrderUnit.KILOGRAM


def unit_label(is_box: bool, quantity: int = 1) -> str:
    if not is_box:
        return "kg"
    return "caja" if quantity == 1 else "cajas"


def has_box_lines(lines: Iterable[CartLine]) -> bool:
    return any(line.is_box for line in lines)


def price_is_known(lines: Iterable[CartLine]) -> bool:
    return not has_box_lines(lines)


def aggregate_units(lines: Iterable[CartLine]) -> UnitTotals:
    total_weight = 0
    total_boxes = 0
    for line in lines:
        if unit_of(line) == OrderUnit.BOX:
            total_boxes += line.quantity
        else:
            total_weight += line.quantity
    return UnitTotals(total_weight=total_weight, total_boxes=total_boxes)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------
def format_quantity(quantity: int, is_box: bool) -> str:
    return f"{quantity} {unit_label(is_box, quantity)}"


def format_line_detail(quantity: int, unit_price: float, is_box: bool) -> str:
    if is_box:
        return f"{format_quantity(quantity, is_box)} (precio no disponible)"
    return f"{format_quantity(quantity, is_box)} x ${unit_price}"


def format_line_summary(name: str, quantity: int, is_box: bool) -> str:
    return f"{name} ({format_quantity(quantity, is_box)})"


def format_units_summary(lines: Iterable[CartLine], fallback_total_weight: float | None = None) -> str:
    """Render totals as e.g. ``"3 kg + 2 cajas"``.

    ``fallback_total_weight`` is shown when there are no lines at all, which
    happens for historical orders whose lines were not loaded.
    """
    totals = aggregate_units(lines)
    parts = []

    if totals.total_weight > 0:
        parts.append(f"{totals.total_weight} kg")
    elif totals.total_boxes == 0 and fallback_total_weight is not None:
        parts.append(f"{int(fallback_total_weight)} kg")

    if totals.total_boxes > 0:
        parts.append(format_quantity(totals.total_boxes, is_box=True))

    return " + ".join(parts)
