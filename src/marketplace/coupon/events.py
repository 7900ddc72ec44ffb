"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Coupon")
class CouponCreated:
    """An admin created a coupon."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    discount_type = String(required=True)
    discount_value = Float(required=True)
    expiry_date = DateTime(required=True)
    usage_limit = Integer()


@marketplace.event(part_of="Coupon")
class CouponUpdated:
    """An admin changed a coupon's terms."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    changed_fields = String(required=True)  # comma separated


@marketplace.event(part_of="Coupon")
class CouponRedeemed:
    """A customer used the coupon on a placed order."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    customer_id = Identifier(required=True)
    used_count = Integer(required=True)


@marketplace.event(part_of="Coupon")
class CouponRedemptionReleased:
    """A redemption was rolled back because its checkout did not complete."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    customer_id = Identifier(required=True)
    used_count = Integer(required=True)
