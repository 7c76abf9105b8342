"""BDD tests for order placement."""

import uuid

from pytest_bdd import parsers, scenarios, then, when

from solestore.ordering.order.order import OrderStatus

scenarios("features/order_placement.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.cfparse('the shopper orders {quantity:d} of "{name}" in size "{size}"'),
    target_fixture="order",
)
def shopper_orders(place, line_for, shopper_id, quantity, name, size):
    return place(shopper_id, [line_for(name, quantity, size)])


@when(
    parsers.cfparse('the shopper orders {first:d} of "{first_name}" and {second:d} of "{second_name}"'),
    target_fixture="order",
)
def shopper_orders_two_lines(place, line_for, shopper_id, first, first_name, second, second_name):
    return place(shopper_id, [line_for(first_name, first), line_for(second_name, second)])


@when(parsers.cfparse('another shopper orders {quantity:d} of "{name}" in size "{size}"'))
def another_shopper_orders(place, line_for, quantity, name, size):
    place(str(uuid.uuid4()), [line_for(name, quantity, size)])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the order is pending")
def order_is_pending(order):
    assert order.status == OrderStatus.PENDING.value


@then(parsers.cfparse("the order subtotal is {amount:g}"))
def order_subtotal_is(order, amount):
    assert order.subtotal == amount


@then(parsers.cfparse("the order shipping is {amount:g}"))
def order_shipping_is(order, amount):
    assert order.shipping == amount


@then(parsers.cfparse("the order total is {amount:g}"))
def order_total_is(order, amount):
    assert order.total == amount
