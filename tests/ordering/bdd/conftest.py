"""Shared BDD fixtures and step definitions for the Ordering domain."""

import uuid

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from pytest_bdd import given, parsers, then

from solestore.catalogue.product.product import Product
from solestore.errors import ConflictError
from solestore.ordering.order.order import Order
from solestore.ordering.order.placement import OrderPlacement
from solestore.ordering.order.pricing import ShippingPolicy
from solestore.ordering.order.status import ChangeOrderStatus

_FAILURES = {
    "stock is insufficient": ConflictError,
    "the product is not found": ObjectNotFoundError,
    "the request is invalid": ValidationError,
}


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


@pytest.fixture()
def catalogue():
    """Products created by Given steps, by name."""
    return {}


@pytest.fixture()
def placement():
    return OrderPlacement(ShippingPolicy(flat_fee=10.0, free_above=100.0))


@pytest.fixture()
def place(placement, error):
    """Place an order, capturing a domain failure instead of raising it."""

    def _place(user_id, lines):
        try:
            return placement.place(user_id, lines)
        except (ConflictError, ObjectNotFoundError, ValidationError) as exc:
            error["exc"] = exc
            return None

    return _place


@pytest.fixture()
def line_for(catalogue):
    """A requested order line for a product created by a Given step."""

    def _line(name, quantity, size=None):
        product, default_size = catalogue[name]
        return {"product_id": str(product.id), "size": size or default_size, "quantity": quantity}

    return _line


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced at {price:g} with {quantity:d} units in size "{size}"'))
def a_product(make_product, catalogue, name, price, quantity, size):
    catalogue[name] = (make_product(name=name, price=price, quantity=quantity, sizes=[size]), size)


@given("a shopper", target_fixture="shopper_id")
def a_shopper():
    return str(uuid.uuid4())


@given(
    parsers.cfparse('the shopper placed an order for {quantity:d} of "{name}"'),
    target_fixture="order",
)
def placed_order(placement, line_for, shopper_id, quantity, name):
    return placement.place(shopper_id, [line_for(name, quantity)])


@given(parsers.cfparse('the order moved to "{status}"'))
def order_moved_to(order, status):
    current_domain.process(ChangeOrderStatus(order_id=order.id, status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('product "{name}" has {quantity:d} units in stock'))
def product_stock_is(catalogue, name, quantity):
    product, _ = catalogue[name]
    assert current_domain.repository_for(Product).get(product.id).quantity == quantity


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert current_domain.repository_for(Order).get(order.id).status == status


@then(parsers.cfparse("the placement fails because {reason}"))
def placement_fails(error, reason):
    assert error["exc"] is not None, "Expected the placement to fail but it succeeded"
    assert isinstance(error["exc"], _FAILURES[reason])


@then("no order is recorded")
def no_order_recorded():
    assert current_domain.repository_for(Order)._dao.query.all().items == []
