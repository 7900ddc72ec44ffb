"""BDD tests for checkout."""

from pytest_bdd import parsers, scenarios, then, when

from marketplace.checkout.placement import place_order
from marketplace.exceptions import MarketplaceError

scenarios("features/checkout.feature")


def _checkout(customer, lines, address, error, coupon_code=None):
    try:
        return place_order(
            customer,
            items=lines,
            shipping_address=address,
            payment_method="UPI",
            coupon_code=coupon_code,
        )
    except MarketplaceError as exc:
        error["exc"] = exc
        return None


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer orders {quantity:d} of "{name}" with coupon "{code}"'), target_fixture="order")
def _(customer, address, products, error, quantity, name, code):
    lines = [{"product_id": products[name], "quantity": quantity}]
    return _checkout(customer, lines, address, error, coupon_code=code)


@when(
    parsers.cfparse('the customer orders {first_qty:d} of "{first}" and {second_qty:d} of "{second}"'),
    target_fixture="order",
)
def _(customer, address, products, error, first_qty, first, second_qty, second):
    lines = [
        {"product_id": products[first], "quantity": first_qty},
        {"product_id": products[second], "quantity": second_qty},
    ]
    return _checkout(customer, lines, address, error)


@when(
    parsers.cfparse('the customer orders {quantity:d} of "{name}" for delivery to pin code "{pin_code}"'),
    target_fixture="order",
)
def _(customer, address, products, error, quantity, name, pin_code):
    lines = [{"product_id": products[name], "quantity": quantity}]
    return _checkout(customer, lines, {**address, "pin_code": pin_code}, error)


@when(parsers.re(r'the customer orders (?P<quantity>\d+) of "(?P<name>[^"]+)"$'), target_fixture="order")
def _(customer, address, products, error, quantity, name):
    lines = [{"product_id": products[name], "quantity": int(quantity)}]
    return _checkout(customer, lines, address, error)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order subtotal is {amount:f}"))
def _(order, amount):
    assert order.subtotal == amount


@then(parsers.cfparse("the order total is {amount:f}"))
def _(order, amount):
    assert order.total_price == amount


@then("the order has a 6-digit delivery code")
def _(order):
    assert len(order.delivery_code) == 6
    assert order.delivery_code.isdigit()


@then(parsers.cfparse('checkout fails with "{kind}"'))
def _(order, error, kind):
    assert order is None
    assert error["exc"] is not None
    assert error["exc"].kind == kind
