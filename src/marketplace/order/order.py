"""Order aggregate (CQRS): an immutable snapshot of one checkout.

An order belongs to exactly one store. Items, prices, the shipping address
and any applied coupon are copied at placement and never change; afterwards
only the status moves, through the transition table below, and the delivery
code is consumed once when the customer confirms receipt.

State Machine:
    Pending → Processing → Shipped → Delivered → Refunded
    Pending | Processing | Shipped → Cancelled
    Cancelled and Refunded are terminal.
"""

import secrets
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from marketplace.domain import marketplace
from marketplace.exceptions import InvalidDeliveryCode, InvalidTransition
from marketplace.order.events import OrderDelivered, OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class PaymentMethod(Enum):
    CREDIT_CARD = "CreditCard"
    UPI = "UPI"
    CASH_ON_DELIVERY = "CashOnDelivery"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}

# States from which the customer's delivery code can still be redeemed
_CONFIRMABLE_STATES = {
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _VALID_TRANSITIONS[current]


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class ShippingAddress:
    house_no = String(required=True, max_length=100)
    landmark = String(max_length=200)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pin_code = String(required=True, max_length=10)


@marketplace.value_object(part_of="Order")
class AppliedCoupon:
    """The coupon terms as they stood when the order was placed."""

    code = String(required=True, max_length=50)
    discount_type = String(required=True, max_length=20)
    discount_value = Float(required=True)
    discount_amount = Float(required=True)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    store_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    image = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    unit = String(max_length=10)
    quantity = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    customer_id = Identifier(required=True)
    customer_name = String(max_length=150)
    customer_email = String(max_length=254)
    store_id = Identifier(required=True)
    store_name = String(max_length=150)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(required=True, choices=PaymentMethod)
    transaction_id = String(max_length=50)
    coupon = ValueObject(AppliedCoupon)
    subtotal = Float(default=0.0, min_value=0.0)
    total_price = Float(default=0.0, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    delivery_code = String(max_length=6)
    delivered_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def items_must_belong_to_order_store(self):
        if any(str(item.store_id) != str(self.store_id) for item in self.items):
            raise ValidationError({"items": ["All items in an order must come from the same store"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        store_id,
        items_data,
        shipping_address,
        payment_method,
        subtotal,
        total_price,
        delivery_code,
        transaction_id=None,
        coupon=None,
        customer_name=None,
        customer_email=None,
        store_name=None,
    ):
        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            customer_name=customer_name,
            customer_email=customer_email,
            store_id=store_id,
            store_name=store_name,
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=payment_method,
            transaction_id=transaction_id,
            coupon=AppliedCoupon(**coupon) if coupon else None,
            subtotal=subtotal,
            total_price=total_price,
            status=OrderStatus.PENDING.value,
            delivery_code=delivery_code,
            created_at=now,
            updated_at=now,
        )
        for item in items_data:
            order.add_items(OrderItem(**item))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                store_id=str(store_id),
                item_count=len(items_data),
                subtotal=subtotal,
                total_price=total_price,
                payment_method=payment_method,
                coupon_code=coupon["code"] if coupon else None,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if not can_transition(current, target):
            raise InvalidTransition(f"Cannot change order status from {current.value} to {target.value}")

    def transition_to(self, new_status, changed_by=None):
        """Move to ``new_status``.

        A manual move to Delivered stamps ``delivered_at`` but leaves the
        delivery code in place, so the customer can still confirm receipt.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]})
        self._assert_can_transition(target)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        if target == OrderStatus.DELIVERED and self.delivered_at is None:
            self.delivered_at = now
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                store_id=str(self.store_id),
                previous_status=previous,
                new_status=target.value,
                changed_by=changed_by,
                changed_at=now,
            )
        )

    def confirm_delivery(self, presented_code, confirmed_by=None):
        """Consume the delivery code and mark the order Delivered."""
        presented = str(presented_code or "").encode()
        if not self.delivery_code or not secrets.compare_digest(presented, self.delivery_code.encode()):
            raise InvalidDeliveryCode("Invalid delivery code")

        current = OrderStatus(self.status)
        if current not in _CONFIRMABLE_STATES:
            raise InvalidTransition(f"Cannot confirm delivery of a {current.value} order")

        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.delivered_at = now
        self.delivery_code = None
        self.updated_at = now

        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                store_id=str(self.store_id),
                previous_status=current.value,
                confirmed_by=confirmed_by,
                delivered_at=now,
            )
        )
