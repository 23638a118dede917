"""BDD tests for the once-a-week ordering rule."""

import calendar
from datetime import UTC, datetime

import pytest
from ordering.checkout.account import Account
from ordering.checkout.checkout import Checkout
from ordering.order.order import PlacedOrder
from ordering.service.fake_adapter import FakeOrderService
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/weekly_ordering.feature")

# The week of Sunday 2026-10-18
DAYS = {
    ("Monday", "this week"): datetime(2026, 10, 19, 9, 0, tzinfo=UTC),
    ("Wednesday", "this week"): datetime(2026, 10, 21, 15, 30, tzinfo=UTC),
    ("Wednesday", "last week"): datetime(2026, 10, 14, 15, 30, tzinfo=UTC),
}


@pytest.fixture()
def service():
    return FakeOrderService()


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a standard account", target_fixture="account")
def _():
    return Account(user_id="user-1")


@given("a privileged account", target_fixture="account")
def _():
    return Account(user_id="admin-1", privileged=True)


@given(parsers.cfparse("the account ordered on {day} {week}"))
def _(service, day, week):
    service.orders.append(PlacedOrder(order_id="ord-previous", created_at=DAYS[(day, week)]))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse("the account confirms the order on {day}"), target_fixture="checkout")
def _(cart, service, account, outcome, day):
    checkout = Checkout(cart=cart, service=service, account=account, reset_weekday=calendar.SUNDAY)
    checkout.refresh_latest_order()
    outcome["result"] = checkout.confirm(now=DAYS[(day, "this week")])
    return checkout


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is refused with "{error}"'))
def _(outcome, error):
    assert outcome["result"].ok is False
    assert outcome["result"].error == error


@then("the order is placed")
def _(outcome, service):
    assert outcome["result"].ok is True
    assert outcome["result"].order in service.orders


@then(parsers.cfparse('the cart still holds product "{product_id}"'))
def _(cart, product_id):
    assert cart.get(product_id) is not None


@then("the cart is empty")
def _(cart):
    assert cart.lines == ()
