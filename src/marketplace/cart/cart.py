"""Cart aggregate (CQRS): one per customer, the staging area for an order.

Each line snapshots the product's name, image, price and unit when it is
added. Stock is checked against the live product every time a line grows;
the cart itself never reserves anything.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from marketplace.domain import marketplace
from marketplace.exceptions import InvalidQuantity, NotFound, OutOfStock


@marketplace.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    image = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    unit = String(max_length=10)
    quantity = Integer(required=True, min_value=1)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


@marketplace.aggregate
class Cart:
    customer_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    @property
    def total(self) -> float:
        return round(sum(item.line_total for item in self.items), 2)

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _require_line(self, product_id):
        item = self.line_for(product_id)
        if item is None:
            raise NotFound(f"Product {product_id} is not in the cart", kind="CartItemNotFound")
        return item

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity: int, unit=None):
        """Add ``quantity`` of a product, merging into an existing line."""
        if quantity < 1:
            raise InvalidQuantity("Quantity must be at least 1")
        product.ensure_on_sale()

        existing = self.line_for(product.id)
        already = existing.quantity if existing else 0
        if (product.stock or 0) < already + quantity:
            raise OutOfStock(f"Only {product.stock} of {product.name} left in stock")

        if existing:
            existing.quantity = already + quantity
            line_quantity = existing.quantity
        else:
            self.add_items(
                CartItem(
                    product_id=product.id,
                    name=product.name,
                    image=product.image,
                    price=product.price,
                    unit=unit or product.unit,
                    quantity=quantity,
                )
            )
            line_quantity = quantity

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product.id),
                quantity=quantity,
                line_quantity=line_quantity,
                price=product.price,
            )
        )

    def update_quantity(self, product, quantity: int):
        """Set a line's quantity. Removing a line is a separate operation."""
        if quantity < 1:
            raise InvalidQuantity("Quantity must be at least 1")

        item = self._require_line(product.id)
        product.ensure_on_sale()
        if (product.stock or 0) < quantity:
            raise OutOfStock(f"Only {product.stock} of {product.name} left in stock")

        previous = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product.id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        item = self._require_line(product_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                items_removed=removed,
            )
        )
