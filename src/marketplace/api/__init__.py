"""Marketplace API package."""

from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import cart_router, coupon_router, order_router, wishlist_router

__all__ = ["cart_router", "coupon_router", "order_router", "wishlist_router", "register_error_handlers"]
