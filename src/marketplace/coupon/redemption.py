"""Committing and releasing coupon usage.

Redemption is a conditional update: under the coupon's guard the handler
re-reads the coupon, refuses if the usage limit is spent and otherwise adds
the customer and bumps ``used_count`` in the same commit. A coupon with a
usage limit of one is therefore redeemed by at most one order.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.coupon.coupon import Coupon
from marketplace.coupon.management import fetch_coupon
from marketplace.domain import marketplace
from marketplace.utils.guards import guarded

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Coupon")
class RedeemCoupon:
    coupon_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@marketplace.command(part_of="Coupon")
class ReleaseCouponRedemption:
    coupon_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@marketplace.command_handler(part_of=Coupon)
class CouponRedemptionHandler:
    @handle(RedeemCoupon)
    def redeem(self, command):
        coupon = fetch_coupon(command.coupon_id)
        redeemed = coupon.redeem(command.customer_id)
        if redeemed:
            current_domain.repository_for(Coupon).add(coupon)
        return redeemed

    @handle(ReleaseCouponRedemption)
    def release(self, command):
        coupon = fetch_coupon(command.coupon_id)
        released = coupon.release(command.customer_id)
        if released:
            current_domain.repository_for(Coupon).add(coupon)
        return released


def redeem_coupon(coupon_id, customer_id) -> bool:
    """Record the customer's use of a coupon.

    Returns True when a new redemption was committed and False when the
    customer had already used it.
    """
    with guarded("coupon", coupon_id):
        redeemed = current_domain.process(
            RedeemCoupon(coupon_id=str(coupon_id), customer_id=str(customer_id)),
            asynchronous=False,
        )
    logger.info("coupon_redeemed", coupon_id=str(coupon_id), customer_id=str(customer_id), new=redeemed)
    return redeemed


def release_coupon(coupon_id, customer_id) -> bool:
    with guarded("coupon", coupon_id):
        released = current_domain.process(
            ReleaseCouponRedemption(coupon_id=str(coupon_id), customer_id=str(customer_id)),
            asynchronous=False,
        )
    logger.info("coupon_redemption_released", coupon_id=str(coupon_id), customer_id=str(customer_id))
    return released
