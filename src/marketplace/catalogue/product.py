"""Product aggregate: price, unit and live stock for a store's listing."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from marketplace.catalogue.events import ProductListed, ProductWithdrawn, StockDecremented, StockRestored
from marketplace.domain import marketplace
from marketplace.exceptions import InsufficientStock, Unavailable


class Unit(Enum):
    PIECE = "pc"
    KILOGRAM = "kg"
    GRAM = "g"
    LITRE = "L"
    MILLILITRE = "ml"
    DOZEN = "dozen"
    PACK = "pack"
    SET = "set"
    PAIR = "pair"
    UNIT = "unit"


@marketplace.aggregate
class Product:
    store_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    image = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    unit = String(choices=Unit, default=Unit.PIECE.value)
    stock = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def list_for_sale(cls, store_id, name, price, stock=0, unit=None, image=None):
        now = datetime.now(UTC)
        product = cls(
            store_id=store_id,
            name=name,
            image=image,
            price=price,
            unit=unit or Unit.PIECE.value,
            stock=stock,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                store_id=str(store_id),
                name=name,
                price=price,
                unit=product.unit,
                stock=stock,
            )
        )
        return product

    def ensure_on_sale(self) -> None:
        if not self.is_active:
            raise Unavailable(f'"{self.name}" is no longer available', kind="ProductUnavailable")

    def withdraw(self) -> None:
        """Take the product off sale. Existing orders keep their snapshot."""
        if not self.is_active:
            return
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductWithdrawn(
                product_id=str(self.id),
                store_id=str(self.store_id),
                withdrawn_at=self.updated_at,
            )
        )

    def has_stock(self, quantity: int) -> bool:
        return (self.stock or 0) >= quantity

    def decrement_stock(self, quantity: int) -> None:
        """Take ``quantity`` units, refusing to drive stock below zero."""
        self.ensure_on_sale()
        if not self.has_stock(quantity):
            raise InsufficientStock(
                f'Not enough stock for "{self.name}". Available: {self.stock}, requested: {quantity}.'
            )

        previous = self.stock
        self.stock = previous - quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockDecremented(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
            )
        )

    def restore_stock(self, quantity: int) -> None:
        previous = self.stock or 0
        self.stock = previous + quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
            )
        )
