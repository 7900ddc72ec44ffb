"""Coupon aggregate (CQRS): discount terms plus a record of who used them.

A coupon is either a percentage of the order total, optionally capped by
``max_discount_amount``, or a fixed amount off. Each customer may use a
coupon once; ``used_count`` always equals the number of redemption records,
and both move together when a redemption is committed or released.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.coupon.events import CouponCreated, CouponRedeemed, CouponRedemptionReleased, CouponUpdated
from marketplace.domain import marketplace
from marketplace.exceptions import UsageLimitReached

_UNSET = object()


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code) -> str:
    return (code or "").strip().upper()


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@marketplace.entity(part_of="Coupon")
class CouponRedemption:
    customer_id = Identifier(required=True)
    redeemed_at = DateTime()


@marketplace.aggregate
class Coupon:
    code = String(required=True, max_length=50)
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Float(required=True, min_value=0.0)
    min_order_amount = Float(default=0.0, min_value=0.0)
    max_discount_amount = Float(min_value=0.0)
    expiry_date = DateTime(required=True)
    usage_limit = Integer(min_value=1)
    used_count = Integer(default=0, min_value=0)
    redemptions = HasMany(CouponRedemption)
    is_active = Boolean(default=True)
    is_new_user_only = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def used_count_matches_redemptions(self):
        if (self.used_count or 0) != len(self.redemptions):
            raise ValidationError({"used_count": ["Used count must equal the number of redemptions"]})

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and (self.discount_value or 0) > 100:
            raise ValidationError({"discount_value": ["A percentage discount cannot exceed 100"]})

    @classmethod
    def create(
        cls,
        code,
        discount_type,
        discount_value,
        expiry_date,
        min_order_amount=0.0,
        max_discount_amount=None,
        usage_limit=None,
        is_active=True,
        is_new_user_only=False,
    ):
        now = datetime.now(UTC)
        coupon = cls(
            code=normalize_code(code),
            discount_type=discount_type,
            discount_value=discount_value,
            min_order_amount=min_order_amount or 0.0,
            max_discount_amount=max_discount_amount,
            expiry_date=expiry_date,
            usage_limit=usage_limit,
            used_count=0,
            is_active=is_active,
            is_new_user_only=is_new_user_only,
            created_at=now,
            updated_at=now,
        )
        coupon.raise_(
            CouponCreated(
                coupon_id=str(coupon.id),
                code=coupon.code,
                discount_type=discount_type,
                discount_value=discount_value,
                expiry_date=expiry_date,
                usage_limit=usage_limit,
            )
        )
        return coupon

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_expired(self, now=None) -> bool:
        now = now or datetime.now(UTC)
        return as_utc(self.expiry_date) < as_utc(now)

    @property
    def limit_reached(self) -> bool:
        return self.usage_limit is not None and (self.used_count or 0) >= self.usage_limit

    def used_by(self, customer_id) -> bool:
        return any(str(r.customer_id) == str(customer_id) for r in self.redemptions)

    def discount_for(self, total_price: float) -> float:
        """Discount this coupon gives on ``total_price``, never more than the total."""
        if self.discount_type == DiscountType.PERCENTAGE.value:
            discount = total_price * self.discount_value / 100
            if self.max_discount_amount is not None:
                discount = min(discount, self.max_discount_amount)
        else:
            discount = self.discount_value
        return round(max(0.0, min(discount, total_price)), 2)

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update(
        self,
        code=_UNSET,
        discount_type=_UNSET,
        discount_value=_UNSET,
        min_order_amount=_UNSET,
        max_discount_amount=_UNSET,
        expiry_date=_UNSET,
        usage_limit=_UNSET,
        is_active=_UNSET,
        is_new_user_only=_UNSET,
    ):
        changes = {
            "code": normalize_code(code) if code is not _UNSET else _UNSET,
            "discount_type": discount_type,
            "discount_value": discount_value,
            "min_order_amount": min_order_amount,
            "max_discount_amount": max_discount_amount,
            "expiry_date": expiry_date,
            "usage_limit": usage_limit,
            "is_active": is_active,
            "is_new_user_only": is_new_user_only,
        }
        changed = [name for name, value in changes.items() if value is not _UNSET]
        if not changed:
            return

        with atomic_change(self):
            for name in changed:
                setattr(self, name, changes[name])
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CouponUpdated(
                coupon_id=str(self.id),
                code=self.code,
                changed_fields=",".join(changed),
            )
        )

    # -------------------------------------------------------------------
    # Usage
    # -------------------------------------------------------------------
    def redeem(self, customer_id) -> bool:
        """Record a use by ``customer_id``.

        Returns False without changing anything if the customer has already
        used the coupon; raises ``UsageLimitReached`` if the limit is spent.
        """
        if self.used_by(customer_id):
            return False
        if self.limit_reached:
            raise UsageLimitReached(f"Coupon {self.code} has reached its usage limit")

        now = datetime.now(UTC)
        with atomic_change(self):
            self.add_redemptions(CouponRedemption(customer_id=customer_id, redeemed_at=now))
            self.used_count = (self.used_count or 0) + 1
            self.updated_at = now

        self.raise_(
            CouponRedeemed(
                coupon_id=str(self.id),
                code=self.code,
                customer_id=str(customer_id),
                used_count=self.used_count,
            )
        )
        return True

    def release(self, customer_id) -> bool:
        redemption = next((r for r in self.redemptions if str(r.customer_id) == str(customer_id)), None)
        if redemption is None:
            return False

        with atomic_change(self):
            self.remove_redemptions(redemption)
            self.used_count = self.used_count - 1
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CouponRedemptionReleased(
                coupon_id=str(self.id),
                code=self.code,
                customer_id=str(customer_id),
                used_count=self.used_count,
            )
        )
        return True
