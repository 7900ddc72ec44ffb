"""Shared BDD fixtures and step definitions for checkout and delivery."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from marketplace.access import Actor, Role
from marketplace.catalogue.listing import ListProduct, RegisterStore
from marketplace.catalogue.lookup import fetch_product
from marketplace.checkout.placement import place_order
from marketplace.coupon.validation import find_coupon_by_code
from marketplace.order.queries import fetch_order
from marketplace.order.status import change_order_status


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def stores():
    """Store ids by name."""
    return {}


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def codes():
    """Delivery codes shown to the customer, by order id."""
    return {}


@pytest.fixture()
def error():
    """Container for the business error a When step ran into."""
    return {"exc": None}


@pytest.fixture()
def vendor_of():
    """Build the vendor actor who owns a store."""
    return _vendor_of


def _vendor_of(store_id) -> Actor:
    return Actor(id=f"vendor-{store_id}", role=Role.VENDOR, store_id=str(store_id))


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a store "{name}" delivering to pin code "{pin_code}"'))
def _(stores, name, pin_code):
    stores[name] = current_domain.process(
        RegisterStore(owner_id=f"owner-{name}", name=name, pin_code=pin_code),
        asynchronous=False,
    )


@given(parsers.cfparse('"{store}" lists "{name}" at {price:f} with {stock:d} in stock'))
def _(stores, products, store, name, price, stock):
    products[name] = current_domain.process(
        ListProduct(store_id=stores[store], name=name, price=price, unit="kg", stock=stock),
        asynchronous=False,
    )


@given(parsers.cfparse('a new-user coupon "{code}" for {percent:d} percent off'))
def _(make_coupon, code, percent):
    make_coupon(code=code, discount_value=float(percent), is_new_user_only=True)


@given(
    parsers.cfparse('the customer has placed an order for {quantity:d} of "{name}"'),
    target_fixture="order",
)
def _(customer, address, products, codes, quantity, name):
    order = place_order(
        customer,
        items=[{"product_id": products[name], "quantity": quantity}],
        shipping_address=address,
        payment_method="UPI",
    )
    codes[str(order.id)] = order.delivery_code
    return order


@given(parsers.cfparse('the vendor has moved the order to "{status}"'), target_fixture="order")
def _(order, status):
    return change_order_status(_vendor_of(order.store_id), order.id, status)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert fetch_order(order.id).status == status


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, name, stock):
    assert fetch_product(products[name]).stock == stock


@then(parsers.re(r'coupon "(?P<code>[^"]+)" has been used (?P<count>\d+) times?'))
def _(code, count):
    assert find_coupon_by_code(code).used_count == int(count)
