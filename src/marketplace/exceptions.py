"""Error taxonomy for the marketplace.

Every error carries a ``kind`` (the specific failure, e.g. ``OutOfStock``) and
belongs to a category that decides the HTTP status it is rendered with.
Protean's own ``ValidationError`` is still used for field and invariant
violations on aggregates; these classes cover business rule failures.
"""


class MarketplaceError(Exception):
    category = "Error"
    status_code = 500
    default_kind = None

    def __init__(self, message: str, kind: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind or self.default_kind or type(self).__name__

    def to_dict(self) -> dict:
        return {"kind": self.kind, "category": self.category, "message": self.message}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, message={self.message!r})"


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
class InvalidRequest(MarketplaceError):
    category = "ValidationError"
    status_code = 400


class NotFound(MarketplaceError):
    category = "NotFound"
    status_code = 404
    default_kind = "NotFound"


class Forbidden(MarketplaceError):
    category = "Forbidden"
    status_code = 403
    default_kind = "Forbidden"


class Conflict(MarketplaceError):
    category = "Conflict"
    status_code = 409


class Expired(MarketplaceError):
    category = "Expired"
    status_code = 400
    default_kind = "Expired"


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------
class EmptyCart(InvalidRequest):
    default_kind = "EmptyCart"


class InvalidQuantity(InvalidRequest):
    default_kind = "InvalidQuantity"


class OutOfStock(Conflict):
    default_kind = "OutOfStock"


class InsufficientStock(Conflict):
    default_kind = "InsufficientStock"


class MixedStoreOrder(Conflict):
    default_kind = "MixedStoreOrder"


class UnserviceablePincode(Conflict):
    default_kind = "UnserviceablePincode"


class UsageLimitReached(Conflict):
    default_kind = "UsageLimitReached"


class AlreadyUsed(Conflict):
    default_kind = "AlreadyUsed"


class NewUserOnly(Conflict):
    default_kind = "NewUserOnly"


class MinOrderNotMet(Conflict):
    default_kind = "MinOrderNotMet"


class InvalidDeliveryCode(Conflict):
    default_kind = "InvalidCode"


class InvalidTransition(Conflict):
    default_kind = "InvalidTransition"


class AlreadyInWishlist(Conflict):
    default_kind = "AlreadyInWishlist"


class Unavailable(Conflict):
    default_kind = "Unavailable"


class CouponExpired(Expired):
    pass
