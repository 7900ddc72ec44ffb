"""Wishlist management: commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.catalogue.lookup import fetch_product
from marketplace.domain import marketplace
from marketplace.exceptions import NotFound
from marketplace.wishlist.wishlist import Wishlist


@marketplace.command(part_of="Wishlist")
class AddToWishlist:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.command(part_of="Wishlist")
class RemoveFromWishlist:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


def find_wishlist(customer_id) -> Wishlist | None:
    repo = current_domain.repository_for(Wishlist)
    wishlists = repo._dao.query.filter(customer_id=str(customer_id)).all().items
    return wishlists[0] if wishlists else None


@marketplace.command_handler(part_of=Wishlist)
class WishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        product = fetch_product(command.product_id)
        wishlist = find_wishlist(command.customer_id) or Wishlist(customer_id=command.customer_id)
        wishlist.add(product)
        current_domain.repository_for(Wishlist).add(wishlist)
        return str(wishlist.id)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        wishlist = find_wishlist(command.customer_id)
        if wishlist is None:
            raise NotFound(
                f"Product {command.product_id} is not in the wishlist",
                kind="WishlistItemNotFound",
            )
        wishlist.remove(command.product_id)
        current_domain.repository_for(Wishlist).add(wishlist)
