"""Domain events for the Store and Product aggregates."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Store")
class StoreRegistered:
    """A vendor registered a store."""

    __version__ = 1

    store_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    name = String(required=True)
    pin_code = String()
    registered_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductListed:
    """A store listed a product for sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    store_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    unit = String(required=True)
    stock = Integer(required=True)


@marketplace.event(part_of="Product")
class StockDecremented:
    """Stock was taken for a placed order."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)


@marketplace.event(part_of="Product")
class StockRestored:
    """Stock was given back after a checkout was abandoned midway."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)


@marketplace.event(part_of="Store")
class StoreClosed:
    """A store stopped trading and takes no new orders."""

    __version__ = 1

    store_id = Identifier(required=True)
    closed_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductWithdrawn:
    """A product was taken off sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    store_id = Identifier(required=True)
    withdrawn_at = DateTime(required=True)
