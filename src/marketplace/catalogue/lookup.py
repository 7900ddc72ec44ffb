"""Loading stores and products, translating a missing record into ``NotFound``."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.catalogue.store import Store
from marketplace.exceptions import NotFound


def fetch_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFound(f"Product {product_id} not found", kind="ProductNotFound")


def fetch_store(store_id) -> Store:
    try:
        return current_domain.repository_for(Store).get(store_id)
    except ObjectNotFoundError:
        raise NotFound(f"Store {store_id} not found", kind="StoreNotFound")
