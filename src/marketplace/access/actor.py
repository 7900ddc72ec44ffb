"""Who is acting, and what they are allowed to do.

The authentication layer hands us an ``Actor``. ``Capabilities`` is derived
from it once per request and answers the role and ownership questions the
order workflow asks.
"""

from dataclasses import dataclass
from enum import Enum

from marketplace.exceptions import Forbidden


class Role(Enum):
    CUSTOMER = "customer"
    VENDOR = "vendor"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    id: str
    role: Role
    store_id: str | None = None
    name: str | None = None
    email: str | None = None

    @property
    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER

    @property
    def is_vendor(self) -> bool:
        return self.role == Role.VENDOR

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Capabilities:
    def __init__(self, actor: Actor) -> None:
        self.actor = actor

    def _owns_store(self, store_id) -> bool:
        return (
            self.actor.is_vendor
            and self.actor.store_id is not None
            and str(self.actor.store_id) == str(store_id)
        )

    @property
    def can_place_order(self) -> bool:
        return self.actor.is_customer

    @property
    def can_manage_coupons(self) -> bool:
        return self.actor.is_admin

    def can_view(self, order) -> bool:
        if self.actor.is_admin:
            return True
        if self.actor.is_customer:
            return str(order.customer_id) == str(self.actor.id)
        return self._owns_store(order.store_id)

    def can_view_store_orders(self, store_id) -> bool:
        return self.actor.is_admin or self._owns_store(store_id)

    def can_transition(self, order) -> bool:
        """Admins may move any order; vendors only their own store's orders."""
        return self.actor.is_admin or self._owns_store(order.store_id)

    def can_confirm_delivery(self, order) -> bool:
        return self._owns_store(order.store_id)

    def can_see_delivery_code(self, order) -> bool:
        return self.actor.is_customer and str(order.customer_id) == str(self.actor.id)

    def require(self, allowed: bool, message: str) -> None:
        if not allowed:
            raise Forbidden(message)
