"""Shared BDD fixtures and step definitions for the ordering engine."""

import pytest
from ordering.cart.limits import OrderCeilings
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def outcome():
    """Container for the result of the last When step."""
    return {"result": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("the order ceilings are {weight:d} kg and {items:d} distinct products"))
def _(cart, weight, items):
    cart.set_ceilings(OrderCeilings(max_total_weight=weight, max_distinct_items=items))


@given("an empty cart")
def _(cart):
    assert cart.lines == ()


@given(parsers.cfparse('a cart holding product "{product_id}" with quantity {quantity:d}'))
@given(parsers.cfparse('the cart holds product "{product_id}" with quantity {quantity:d}'))
@given(parsers.cfparse('the cart also holds product "{product_id}" with quantity {quantity:d}'))
def _(cart, make_line, product_id, quantity):
    assert cart.add(make_line(product_id, quantity=quantity)).ok


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the change is accepted")
def _(outcome):
    assert outcome["result"].ok is True


@then(parsers.cfparse('the change is rejected with "{error}"'))
def _(outcome, error):
    assert outcome["result"].ok is False
    assert outcome["result"].error == error


@then(parsers.cfparse("the total weight is {weight:d} kg"))
def _(cart, weight):
    assert cart.total_weight() == weight
