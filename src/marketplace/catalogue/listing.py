"""Store registration, product listing and withdrawal: commands and handlers."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.catalogue.lookup import fetch_product, fetch_store
from marketplace.catalogue.product import Product
from marketplace.catalogue.store import Store
from marketplace.domain import marketplace
from marketplace.utils.guards import guarded


@marketplace.command(part_of="Store")
class RegisterStore:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=150)
    pin_code = String(max_length=10)


@marketplace.command(part_of="Product")
class ListProduct:
    store_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    image = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    unit = String(max_length=10)
    stock = Integer(default=0, min_value=0)


@marketplace.command(part_of="Store")
class CloseStore:
    store_id = Identifier(required=True)


@marketplace.command(part_of="Product")
class WithdrawProduct:
    product_id = Identifier(required=True)


@marketplace.command_handler(part_of=Store)
class StoreHandler:
    @handle(RegisterStore)
    def register_store(self, command):
        store = Store.register(
            owner_id=command.owner_id,
            name=command.name,
            pin_code=command.pin_code,
        )
        current_domain.repository_for(Store).add(store)
        return str(store.id)

    @handle(CloseStore)
    def close_store(self, command):
        store = fetch_store(command.store_id)
        store.close()
        current_domain.repository_for(Store).add(store)


@marketplace.command_handler(part_of=Product)
class ProductHandler:
    @handle(ListProduct)
    def list_product(self, command):
        fetch_store(command.store_id)

        product = Product.list_for_sale(
            store_id=command.store_id,
            name=command.name,
            image=command.image,
            price=command.price,
            unit=command.unit,
            stock=command.stock,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(WithdrawProduct)
    def withdraw_product(self, command):
        # Serialised with stock adjustments on the same product
        with guarded("product", command.product_id):
            product = fetch_product(command.product_id)
            product.withdraw()
            current_domain.repository_for(Product).add(product)
