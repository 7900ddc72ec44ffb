"""Marketplace bounded context: carts, coupons, orders and delivery.

Hosts the order fulfillment workflow of a multi-vendor marketplace: carts
feed a checkout saga that commits store-scoped orders under stock and coupon
constraints, and vendors drive the order through a role-gated state machine
that ends with a one-time delivery code exchange.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging

configure_logging()

marketplace = Domain(name="marketplace")
