"""Coupon administration: commands, handler and listing queries.

Only admins reach these commands; the HTTP layer checks the actor before
dispatching. Codes are stored upper-case and must stay unique.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.coupon.coupon import Coupon, normalize_code
from marketplace.coupon.validation import find_coupon_by_code
from marketplace.domain import marketplace
from marketplace.exceptions import NotFound


@marketplace.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    discount_type = String(required=True, max_length=20)
    discount_value = Float(required=True)
    min_order_amount = Float(default=0.0)
    max_discount_amount = Float()
    expiry_date = DateTime(required=True)
    usage_limit = Integer()
    is_active = Boolean(default=True)
    is_new_user_only = Boolean(default=False)


@marketplace.command(part_of="Coupon")
class UpdateCoupon:
    """Change a coupon's terms. Fields left empty keep their current value."""

    coupon_id = Identifier(required=True)
    code = String(max_length=50)
    discount_type = String(max_length=20)
    discount_value = Float()
    min_order_amount = Float()
    max_discount_amount = Float()
    expiry_date = DateTime()
    usage_limit = Integer()
    is_active = Boolean()
    is_new_user_only = Boolean()


@marketplace.command(part_of="Coupon")
class DeleteCoupon:
    coupon_id = Identifier(required=True)


def fetch_coupon(coupon_id) -> Coupon:
    try:
        return current_domain.repository_for(Coupon).get(coupon_id)
    except ObjectNotFoundError:
        raise NotFound(f"Coupon {coupon_id} not found", kind="CouponNotFound")


def list_coupons(active_only=False, is_active=None, is_new_user_only=None, search=None) -> list[Coupon]:
    """Coupons ordered newest first.

    ``active_only`` restricts the list for non-admin callers; admins may
    instead filter on either flag. ``search`` is a case-insensitive match
    anywhere in the code.
    """
    filters = {}
    if active_only:
        filters["is_active"] = True
    elif is_active is not None:
        filters["is_active"] = is_active
    if is_new_user_only is not None:
        filters["is_new_user_only"] = is_new_user_only

    query = current_domain.repository_for(Coupon)._dao.query
    if filters:
        query = query.filter(**filters)
    query = query.order_by("-created_at")
    term = (search or "").strip().lower()
    if not term:
        return query.all().items
    return [coupon for coupon in query.limit(None).all().items if term in coupon.code.lower()]


def _ensure_code_free(code, coupon_id=None) -> None:
    existing = find_coupon_by_code(code)
    if existing is not None and str(existing.id) != str(coupon_id):
        raise ValidationError({"code": ["Coupon with this code already exists"]})


@marketplace.command_handler(part_of=Coupon)
class ManageCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        _ensure_code_free(command.code)

        coupon = Coupon.create(
            code=command.code,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            expiry_date=command.expiry_date,
            min_order_amount=command.min_order_amount,
            max_discount_amount=command.max_discount_amount,
            usage_limit=command.usage_limit,
            is_active=command.is_active if command.is_active is not None else True,
            is_new_user_only=bool(command.is_new_user_only),
        )
        current_domain.repository_for(Coupon).add(coupon)
        return str(coupon.id)

    @handle(UpdateCoupon)
    def update_coupon(self, command):
        coupon = fetch_coupon(command.coupon_id)

        changes = {
            name: getattr(command, name)
            for name in (
                "code",
                "discount_type",
                "discount_value",
                "min_order_amount",
                "max_discount_amount",
                "expiry_date",
                "usage_limit",
                "is_active",
                "is_new_user_only",
            )
            if getattr(command, name) is not None
        }
        if "code" in changes:
            _ensure_code_free(changes["code"], coupon_id=coupon.id)
            changes["code"] = normalize_code(changes["code"])

        coupon.update(**changes)
        current_domain.repository_for(Coupon).add(coupon)

    @handle(DeleteCoupon)
    def delete_coupon(self, command):
        coupon = fetch_coupon(command.coupon_id)
        current_domain.repository_for(Coupon)._dao.delete(coupon)
