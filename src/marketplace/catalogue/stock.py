"""Stock adjustments: conditional decrement and its compensation.

``decrement_stock`` is what checkout calls: it holds the product's guard while
the command handler re-reads the product, checks the stock and commits, so
two orders racing for the last units cannot both succeed.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.catalogue.lookup import fetch_product
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.utils.guards import guarded

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Product")
class DecrementStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@marketplace.command(part_of="Product")
class RestoreStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@marketplace.command_handler(part_of=Product)
class StockAdjustmentHandler:
    @handle(DecrementStock)
    def decrement(self, command):
        product = fetch_product(command.product_id)
        product.decrement_stock(command.quantity)
        current_domain.repository_for(Product).add(product)
        return product.stock

    @handle(RestoreStock)
    def restore(self, command):
        product = fetch_product(command.product_id)
        product.restore_stock(command.quantity)
        current_domain.repository_for(Product).add(product)
        return product.stock


def decrement_stock(product_id, quantity: int) -> int:
    """Atomically take ``quantity`` units of a product. Returns the new stock."""
    with guarded("product", product_id):
        remaining = current_domain.process(
            DecrementStock(product_id=str(product_id), quantity=quantity),
            asynchronous=False,
        )
    logger.info("stock_decremented", product_id=str(product_id), quantity=quantity, remaining=remaining)
    return remaining


def restore_stock(product_id, quantity: int) -> int:
    with guarded("product", product_id):
        restored = current_domain.process(
            RestoreStock(product_id=str(product_id), quantity=quantity),
            asynchronous=False,
        )
    logger.info("stock_restored", product_id=str(product_id), quantity=quantity, stock=restored)
    return restored
