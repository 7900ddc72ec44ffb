"""Cart item management: commands, handler and cart lookup."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.catalogue.lookup import fetch_product
from marketplace.domain import marketplace
from marketplace.exceptions import NotFound


@marketplace.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)
    unit = String(max_length=10)


@marketplace.command(part_of="Cart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.command(part_of="Cart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


def find_cart(customer_id) -> Cart | None:
    """The customer's cart, or None if they never added anything."""
    repo = current_domain.repository_for(Cart)
    carts = repo._dao.query.filter(customer_id=str(customer_id)).all().items
    return carts[0] if carts else None


def _require_cart(customer_id) -> Cart:
    cart = find_cart(customer_id)
    if cart is None:
        raise NotFound("Cart not found", kind="CartItemNotFound")
    return cart


@marketplace.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = fetch_product(command.product_id)
        cart = find_cart(command.customer_id) or Cart.create(customer_id=command.customer_id)
        cart.add_item(product, command.quantity, unit=command.unit)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_quantity(self, command):
        cart = _require_cart(command.customer_id)
        product = fetch_product(command.product_id)
        cart.update_quantity(product, command.quantity)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = _require_cart(command.customer_id)
        cart.remove_item(command.product_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_cart(command.customer_id)
        if cart is None:
            return
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
