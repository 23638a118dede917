"""Tests for the limit policy."""

import math

import pytest
from ordering.cart.limits import (
    DEFAULT_MAX_DISTINCT_ITEMS,
    DEFAULT_MAX_TOTAL_WEIGHT,
    CartError,
    CartResult,
    OrderCeilings,
    ValidationMode,
    check_lines,
    sanitize_ceilings,
)
from ordering.cart.line import CartLine


@pytest.fixture()
def ceilings():
    return OrderCeilings(max_total_weight=10, max_distinct_items=2)


def _line(product_id="p1", quantity=3, cap=10, **kwargs):
    return CartLine(
        product_id=product_id,
        name=f"Product {product_id}",
        quantity=quantity,
        per_line_unit_cap=cap,
        **kwargs,
    )


class TestAcceptedOrders:
    def test_empty_order_passes(self, ceilings):
        assert check_lines([], ceilings) == CartResult.success()

    def test_order_at_every_ceiling_passes(self, ceilings):
        lines = [_line("p1", quantity=5, cap=5), _line("p2", quantity=5, cap=5)]
        assert check_lines(lines, ceilings).ok is True


class TestBoxEligibility:
    def test_ineligible_box_line_fails(self, ceilings):
        result = check_lines([_line(is_box=True, box_eligible=False)], ceilings)
        assert result.ok is False
        assert result.error == CartError.BOX_INELIGIBLE.value

    def test_ineligible_box_fails_even_unrestricted(self, ceilings):
        result = check_lines([_line(is_box=True, box_eligible=False)], ceilings, ValidationMode.UNRESTRICTED)
        assert result.error == "box ineligible"

    def test_eligibility_is_checked_before_quotas(self, ceilings):
        lines = [_line("p1", quantity=50), _line("p2"), _line("p3", is_box=True, box_eligible=False)]
        assert check_lines(lines, ceilings).error == "box ineligible"


class TestDistinctItems:
    def test_too_many_lines(self, ceilings):
        result = check_lines([_line("p1", 1), _line("p2", 1), _line("p3", 1)], ceilings)
        assert result.error == "too many distinct items"
        assert "2" in result.message

    def test_checked_before_per_line_cap(self, ceilings):
        lines = [_line("p1", quantity=20, cap=5), _line("p2", 1), _line("p3", 1)]
        assert check_lines(lines, ceilings).error == "too many distinct items"


class TestPerLineCap:
    def test_cap_exceeded_names_product_and_cap(self, ceilings):
        result = check_lines([_line("p1", quantity=6, cap=5)], ceilings)
        assert result.error == "per-line cap exceeded"
        assert "Product p1" in result.message
        assert "5" in result.message

    def test_cap_applies_to_box_lines(self, ceilings):
        result = check_lines([_line("b1", quantity=4, cap=3, box_eligible=True, is_box=True)], ceilings)
        assert result.error == "per-line cap exceeded"

    def test_checked_before_total_weight(self, ceilings):
        lines = [_line("p1", quantity=9, cap=5), _line("p2", quantity=9)]
        assert check_lines(lines, ceilings).error == "per-line cap exceeded"


class TestTotalWeight:
    def test_weight_over_ceiling(self, ceilings):
        result = check_lines([_line("p1", 3), _line("p2", 8)], ceilings)
        assert result.error == "total weight exceeded"
        assert "10" in result.message

    def test_box_lines_do_not_count_towards_weight(self, ceilings):
        lines = [_line("p1", 8), _line("b1", 9, box_eligible=True, is_box=True)]
        assert check_lines(lines, ceilings).ok is True


class TestUnrestrictedMode:
    def test_distinct_item_ceiling_is_skipped(self, ceilings):
        lines = [_line(f"p{i}", 1) for i in range(20)]
        assert check_lines(lines, ceilings, ValidationMode.UNRESTRICTED).ok is True

    def test_per_line_cap_is_skipped(self, ceilings):
        lines = [_line("p1", quantity=500, cap=1)]
        assert check_lines(lines, ceilings, ValidationMode.UNRESTRICTED).ok is True

    def test_total_weight_is_skipped(self, ceilings):
        lines = [_line("p1", quantity=9999), _line("p2", quantity=9999)]
        assert check_lines(lines, ceilings, ValidationMode.UNRESTRICTED).ok is True


class TestSanitizeCeilings:
    def test_defaults(self):
        ceilings = sanitize_ceilings()
        assert ceilings.max_total_weight == DEFAULT_MAX_TOTAL_WEIGHT
        assert ceilings.max_distinct_items == DEFAULT_MAX_DISTINCT_ITEMS

    @pytest.mark.parametrize("value", [0, -4, math.nan, "lots", True])
    def test_invalid_values_fall_back(self, value):
        ceilings = sanitize_ceilings(value, value)
        assert ceilings == OrderCeilings()

    def test_values_are_floored(self):
        ceilings = sanitize_ceilings(15.8, "3")
        assert ceilings.max_total_weight == 15
        assert ceilings.max_distinct_items == 3
