"""Domain events for the Order aggregate.

Orders are never deleted; these events, persisted to the event store on
every commit, are the order's audit trail.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A customer's checkout was committed as a new order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    store_id = Identifier(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    total_price = Float(required=True)
    payment_method = String(required=True)
    coupon_code = String()
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """A vendor or admin moved the order to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    store_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier()
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderDelivered:
    """The customer presented the delivery code to the vendor."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    store_id = Identifier(required=True)
    previous_status = String(required=True)
    confirmed_by = Identifier()
    delivered_at = DateTime(required=True)
