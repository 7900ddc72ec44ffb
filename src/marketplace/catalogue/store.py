"""Store aggregate: the vendor's shop that orders are placed against.

Only the parts of a store the ordering workflow reads are modelled here:
the owning vendor, the pin code it delivers to and whether it trades.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, String

from marketplace.catalogue.events import StoreClosed, StoreRegistered
from marketplace.domain import marketplace
from marketplace.exceptions import Unavailable


@marketplace.aggregate
class Store:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=150)
    pin_code = String(max_length=10)
    is_active = Boolean(default=True)
    created_at = DateTime()

    @classmethod
    def register(cls, owner_id, name, pin_code=None):
        now = datetime.now(UTC)
        store = cls(
            owner_id=owner_id,
            name=name,
            pin_code=pin_code.strip() if pin_code else None,
            is_active=True,
            created_at=now,
        )
        store.raise_(
            StoreRegistered(
                store_id=str(store.id),
                owner_id=str(owner_id),
                name=name,
                pin_code=store.pin_code,
                registered_at=now,
            )
        )
        return store

    def close(self) -> None:
        if not self.is_active:
            return
        self.is_active = False
        self.raise_(StoreClosed(store_id=str(self.id), closed_at=datetime.now(UTC)))

    def ensure_trading(self) -> None:
        if not self.is_active:
            raise Unavailable(f"{self.name} is not taking orders", kind="StoreUnavailable")

    def serves(self, pin_code) -> bool:
        """A store without a declared pin code delivers anywhere."""
        if not self.pin_code:
            return True
        return str(pin_code or "").strip() == self.pin_code
