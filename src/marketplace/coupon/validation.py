"""Coupon preview: checks a code against an order total without using it.

``preview_discount`` is read-only: it is what the storefront calls while the
customer is still deciding, and what checkout re-runs against the final
total before the redemption is committed.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean.utils.globals import current_domain

from marketplace.coupon.coupon import Coupon, normalize_code
from marketplace.exceptions import (
    AlreadyUsed,
    CouponExpired,
    MinOrderNotMet,
    NewUserOnly,
    NotFound,
    UsageLimitReached,
)
from marketplace.order.order import Order


@dataclass(frozen=True)
class DiscountPreview:
    coupon_id: str
    code: str
    discount_type: str
    discount_value: float
    discount_amount: float
    is_new_user_only: bool

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "discountType": self.discount_type,
            "discountValue": self.discount_value,
            "discountAmount": self.discount_amount,
            "isNewUserOnly": self.is_new_user_only,
        }


def find_coupon_by_code(code) -> Coupon | None:
    repo = current_domain.repository_for(Coupon)
    coupons = repo._dao.query.filter(code=normalize_code(code)).all().items
    return coupons[0] if coupons else None


def has_prior_orders(customer_id) -> bool:
    repo = current_domain.repository_for(Order)
    return repo._dao.query.filter(customer_id=str(customer_id)).limit(1).all().total > 0


def preview_discount(code, customer_id, total_price: float, now=None) -> DiscountPreview:
    """Validate ``code`` for ``customer_id`` and compute the discount on ``total_price``.

    Checks run in a fixed order and the first failure wins: unknown or
    inactive, expired, usage limit, already used by this customer, new users
    only, minimum order amount.
    """
    coupon = find_coupon_by_code(code)
    if coupon is None or not coupon.is_active:
        raise NotFound("Invalid or inactive coupon code", kind="CouponNotFound")

    if coupon.is_expired(now or datetime.now(UTC)):
        raise CouponExpired("Coupon has expired")

    if coupon.limit_reached:
        raise UsageLimitReached("Coupon usage limit has been reached")

    if coupon.used_by(customer_id):
        raise AlreadyUsed("You have already used this coupon")

    if coupon.is_new_user_only and has_prior_orders(customer_id):
        raise NewUserOnly("This coupon is only valid for new users")

    if total_price < (coupon.min_order_amount or 0):
        raise MinOrderNotMet(f"Minimum order amount of {coupon.min_order_amount:.2f} required for this coupon")

    return DiscountPreview(
        coupon_id=str(coupon.id),
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        discount_amount=coupon.discount_for(total_price),
        is_new_user_only=bool(coupon.is_new_user_only),
    )
