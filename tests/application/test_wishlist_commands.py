import pytest
from protean import current_domain

from marketplace.exceptions import AlreadyInWishlist, NotFound
from marketplace.wishlist.items import AddToWishlist, RemoveFromWishlist, find_wishlist


class TestWishlist:
    def test_add_snapshots_product(self, make_product):
        product_id = make_product(name="Saffron", price=450.0)

        current_domain.process(AddToWishlist(customer_id="cust-001", product_id=product_id), asynchronous=False)

        item = find_wishlist("cust-001").items[0]
        assert item.name == "Saffron"
        assert item.price == 450.0
        assert item.added_at is not None

    def test_duplicate_is_a_conflict(self, make_product):
        product_id = make_product()
        current_domain.process(AddToWishlist(customer_id="cust-001", product_id=product_id), asynchronous=False)

        with pytest.raises(AlreadyInWishlist) as exc:
            current_domain.process(AddToWishlist(customer_id="cust-001", product_id=product_id), asynchronous=False)
        assert exc.value.category == "Conflict"
        assert len(find_wishlist("cust-001").items) == 1

    def test_unknown_product(self):
        with pytest.raises(NotFound):
            current_domain.process(AddToWishlist(customer_id="cust-001", product_id="prod-404"), asynchronous=False)

    def test_remove(self, make_product):
        product_id = make_product()
        current_domain.process(AddToWishlist(customer_id="cust-001", product_id=product_id), asynchronous=False)

        current_domain.process(RemoveFromWishlist(customer_id="cust-001", product_id=product_id), asynchronous=False)

        assert find_wishlist("cust-001").items == []

    def test_remove_absent(self):
        with pytest.raises(NotFound) as exc:
            current_domain.process(
                RemoveFromWishlist(customer_id="cust-001", product_id="prod-404"),
                asynchronous=False,
            )
        assert exc.value.kind == "WishlistItemNotFound"
