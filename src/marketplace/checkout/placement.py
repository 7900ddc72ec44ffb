"""Checkout: turning a customer's cart lines into a committed order.

Everything that can be checked without side effects is checked first:
the actor, the lines, live stock, the single-store rule, the delivery pin
code and the coupon. Only then does the saga start taking stock, redeeming
the coupon and persisting the order, undoing what it already did if a
later step fails.

The coupon is redeemed before the order is written rather than after. When
two customers race for the last use of a coupon, the loser fails on the
redemption and its stock is restored, instead of being left with an order
whose discount was never paid for.
"""

import json

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from marketplace.access import Actor, Capabilities
from marketplace.cart.items import ClearCart
from marketplace.catalogue.lookup import fetch_product, fetch_store
from marketplace.catalogue.stock import decrement_stock, restore_stock
from marketplace.checkout.saga import Saga
from marketplace.coupon.redemption import redeem_coupon, release_coupon
from marketplace.coupon.validation import preview_discount
from marketplace.exceptions import (
    AlreadyUsed,
    EmptyCart,
    InsufficientStock,
    InvalidQuantity,
    MixedStoreOrder,
    UnserviceablePincode,
)
from marketplace.notifications.confirmation import send_order_confirmation
from marketplace.order.codes import generate_delivery_code, generate_transaction_id
from marketplace.order.creation import CreateOrder
from marketplace.order.order import Order, PaymentMethod, ShippingAddress
from marketplace.order.queries import fetch_order

logger = structlog.get_logger(__name__)


def _quantities_by_product(items) -> tuple[dict, dict]:
    """Sum the quantities of repeated lines for the same product."""
    quantities = {}
    units = {}
    for item in items:
        product_id = str(item["product_id"])
        quantity = int(item.get("quantity") or 0)
        if quantity < 1:
            raise InvalidQuantity(f"Quantity for product {product_id} must be at least 1")
        quantities[product_id] = quantities.get(product_id, 0) + quantity
        units.setdefault(product_id, item.get("unit"))
    return quantities, units


def _payment_method(value) -> str:
    try:
        return PaymentMethod(value).value
    except ValueError:
        raise ValidationError({"payment_method": [f"Unsupported payment method: {value}"]})


def _redeem(coupon_id, customer_id) -> None:
    # A use already on record belongs to another order by this customer
    if not redeem_coupon(coupon_id, customer_id):
        raise AlreadyUsed("You have already used this coupon")


def place_order(actor: Actor, items, shipping_address: dict, payment_method, coupon_code=None) -> Order:
    """Place an order for ``actor`` from cart ``items``.

    ``items`` are dicts with ``product_id``, ``quantity`` and optionally
    ``unit``. Prices, names and images are taken from the live products at
    the moment of placement.
    """
    capabilities = Capabilities(actor)
    capabilities.require(capabilities.can_place_order, "Only customers can place orders")

    if not items:
        raise EmptyCart("No order items")

    quantities, units = _quantities_by_product(items)
    method = _payment_method(payment_method)
    address = ShippingAddress(**shipping_address)

    # Live stock, re-read for every product
    products = {}
    for product_id, quantity in quantities.items():
        product = fetch_product(product_id)
        product.ensure_on_sale()
        if not product.has_stock(quantity):
            raise InsufficientStock(
                f'Not enough stock for "{product.name}". Available: {product.stock}, requested: {quantity}.'
            )
        products[product_id] = product

    store_ids = {str(product.store_id) for product in products.values()}
    if len(store_ids) > 1:
        raise MixedStoreOrder("All items in an order must come from the same store")
    store_id = store_ids.pop()

    store = fetch_store(store_id)
    store.ensure_trading()
    if not store.serves(address.pin_code):
        raise UnserviceablePincode(f"{store.name} does not deliver to pin code {address.pin_code}")

    order_items = [
        {
            "product_id": product_id,
            "store_id": store_id,
            "name": products[product_id].name,
            "image": products[product_id].image,
            "price": products[product_id].price,
            "unit": units[product_id] or products[product_id].unit,
            "quantity": quantity,
        }
        for product_id, quantity in quantities.items()
    ]
    subtotal = round(sum(item["price"] * item["quantity"] for item in order_items), 2)

    preview = preview_discount(coupon_code, actor.id, subtotal) if coupon_code else None
    total_price = round(max(subtotal - (preview.discount_amount if preview else 0.0), 0.0), 2)

    log = logger.bind(customer_id=actor.id, store_id=store_id)
    log.info("checkout_started", item_count=len(order_items), subtotal=subtotal, total_price=total_price)

    with Saga("checkout", customer_id=actor.id, store_id=store_id) as saga:
        for product_id, quantity in quantities.items():
            saga.step(
                f"decrement_stock:{product_id}",
                lambda pid=product_id, qty=quantity: decrement_stock(pid, qty),
                lambda pid=product_id, qty=quantity: restore_stock(pid, qty),
            )

        if preview is not None:
            saga.step(
                "redeem_coupon",
                lambda: _redeem(preview.coupon_id, actor.id),
                lambda: release_coupon(preview.coupon_id, actor.id),
            )

        order_id = saga.step(
            "create_order",
            lambda: current_domain.process(
                CreateOrder(
                    customer_id=actor.id,
                    customer_name=actor.name,
                    customer_email=actor.email,
                    store_id=store_id,
                    store_name=store.name,
                    items=json.dumps(order_items),
                    shipping_address=json.dumps(address.to_dict()),
                    payment_method=method,
                    transaction_id=generate_transaction_id(method),
                    coupon=json.dumps(
                        {
                            "code": preview.code,
                            "discount_type": preview.discount_type,
                            "discount_value": preview.discount_value,
                            "discount_amount": preview.discount_amount,
                        }
                    )
                    if preview
                    else None,
                    subtotal=subtotal,
                    total_price=total_price,
                    delivery_code=generate_delivery_code(),
                ),
                asynchronous=False,
            ),
        )

    log.info("order_placed", order_id=order_id, coupon_code=preview.code if preview else None)

    # The order stands even if the cart cannot be emptied
    try:
        current_domain.process(ClearCart(customer_id=actor.id), asynchronous=False)
    except Exception:
        log.exception("cart_clear_failed", order_id=order_id)

    order = fetch_order(order_id)
    send_order_confirmation(order)
    return order
