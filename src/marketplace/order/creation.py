"""Order creation: command and handler.

Checkout builds this command once stock and coupon have been secured; the
handler only persists the snapshot it is given.
"""

import json

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.order import Order


@marketplace.command(part_of="Order")
class CreateOrder:
    customer_id = Identifier(required=True)
    customer_name = String(max_length=150)
    customer_email = String(max_length=254)
    store_id = Identifier(required=True)
    store_name = String(max_length=150)
    items = Text(required=True)  # JSON: list of item dicts
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(required=True, max_length=20)
    transaction_id = String(max_length=50)
    coupon = Text()  # JSON: applied coupon snapshot
    subtotal = Float(required=True)
    total_price = Float(required=True)
    delivery_code = String(required=True, max_length=6)


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


@marketplace.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        order = Order.place(
            customer_id=command.customer_id,
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            store_id=command.store_id,
            store_name=command.store_name,
            items_data=_loads(command.items),
            shipping_address=_loads(command.shipping_address),
            payment_method=command.payment_method,
            transaction_id=command.transaction_id,
            coupon=_loads(command.coupon) if command.coupon else None,
            subtotal=command.subtotal,
            total_price=command.total_price,
            delivery_code=command.delivery_code,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
