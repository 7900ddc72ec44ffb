"""Wishlist aggregate: products a customer wants to come back to."""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, HasMany, Identifier, String

from marketplace.domain import marketplace
from marketplace.exceptions import AlreadyInWishlist, NotFound


@marketplace.event(part_of="Wishlist")
class WishlistItemAdded:
    __version__ = 1

    wishlist_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.event(part_of="Wishlist")
class WishlistItemRemoved:
    __version__ = 1

    wishlist_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.entity(part_of="Wishlist")
class WishlistItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    image = String(max_length=500)
    price = Float(min_value=0.0)
    added_at = DateTime()


@marketplace.aggregate
class Wishlist:
    customer_id = Identifier(required=True, unique=True)
    items = HasMany(WishlistItem)

    def add(self, product):
        if any(str(i.product_id) == str(product.id) for i in self.items):
            raise AlreadyInWishlist(f"{product.name} is already in the wishlist")

        self.add_items(
            WishlistItem(
                product_id=product.id,
                name=product.name,
                image=product.image,
                price=product.price,
                added_at=datetime.now(UTC),
            )
        )
        self.raise_(
            WishlistItemAdded(
                wishlist_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product.id),
            )
        )

    def remove(self, product_id):
        item = next((i for i in self.items if str(i.product_id) == str(product_id)), None)
        if item is None:
            raise NotFound(f"Product {product_id} is not in the wishlist", kind="WishlistItemNotFound")

        self.remove_items(item)
        self.raise_(
            WishlistItemRemoved(
                wishlist_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product_id),
            )
        )
