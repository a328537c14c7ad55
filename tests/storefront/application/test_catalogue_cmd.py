"""Application tests for product registration and inventory adjustment."""

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError

from storefront.catalogue.product import Product, ProductStatus
from storefront.catalogue.registration import ListProduct, UnlistProduct
from storefront.shared.errors import InsufficientInventory, ProductUnavailable


def _inventory(product_id):
    return current_domain.repository_for(Product).get(product_id).inventory


class TestRegisterProduct:
    def test_register_persists(self, make_product):
        product_id = make_product(name="Desk Lamp", price=1000, inventory=7)
        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Desk Lamp"
        assert product.price == 1000
        assert product.inventory == 7
        assert product.is_listed

    def test_register_unlisted(self, make_product):
        product_id = make_product(listed=False)
        assert current_domain.repository_for(Product).get(product_id).status == ProductStatus.UNLISTED.value


class TestListing:
    def test_unlist_and_relist(self, lamp_id):
        current_domain.process(UnlistProduct(product_id=lamp_id), asynchronous=False)
        assert not current_domain.repository_for(Product).get(lamp_id).is_listed

        current_domain.process(ListProduct(product_id=lamp_id), asynchronous=False)
        assert current_domain.repository_for(Product).get(lamp_id).is_listed

    def test_listing_change_leaves_inventory_alone(self, lamp_id):
        current_domain.repository_for(Product).adjust_inventory(lamp_id, -4)
        current_domain.process(UnlistProduct(product_id=lamp_id), asynchronous=False)
        assert _inventory(lamp_id) == 6

    def test_unlist_unknown_product(self):
        with pytest.raises(ProductUnavailable):
            current_domain.process(UnlistProduct(product_id="prod-404"), asynchronous=False)


class TestAdjustInventory:
    def test_decrement_returns_new_level(self, lamp_id):
        assert current_domain.repository_for(Product).adjust_inventory(lamp_id, -3) == 7
        assert _inventory(lamp_id) == 7

    def test_increment(self, lamp_id):
        assert current_domain.repository_for(Product).adjust_inventory(lamp_id, 5) == 15

    def test_decrement_to_exactly_zero(self, mug_id):
        assert current_domain.repository_for(Product).adjust_inventory(mug_id, -3) == 0

    def test_never_goes_negative(self, mug_id):
        with pytest.raises(InsufficientInventory) as exc_info:
            current_domain.repository_for(Product).adjust_inventory(mug_id, -4)
        assert exc_info.value.available == 3
        assert exc_info.value.requested == 4
        assert _inventory(mug_id) == 3

    def test_unknown_product(self):
        with pytest.raises(ProductUnavailable):
            current_domain.repository_for(Product).adjust_inventory("prod-404", -1)

    def test_write_from_stale_read_is_rejected(self, lamp_id, monkeypatch):
        repo = current_domain.repository_for(Product)
        repo_cls = type(repo)
        original_find = repo_cls.find
        raced = {"done": False}

        def racing_find(self, product_id):
            product = original_find(self, product_id)
            if not raced["done"]:
                raced["done"] = True
                # Another checkout takes 3 after this caller has read 10
                fresh = original_find(self, product_id)
                self._dao.update(fresh, inventory=7)
            return product

        monkeypatch.setattr(repo_cls, "find", racing_find)

        with pytest.raises(ExpectedVersionError):
            repo.adjust_inventory(lamp_id, -2)
        assert _inventory(lamp_id) == 7

    def test_fresh_read_sees_concurrent_write(self, mug_id):
        repo = current_domain.repository_for(Product)
        stale = repo.find(mug_id)
        repo.adjust_inventory(mug_id, -2)

        with pytest.raises(ExpectedVersionError):
            repo._dao.update(stale, inventory=stale.inventory - 2)

        with pytest.raises(InsufficientInventory) as exc_info:
            repo.adjust_inventory(mug_id, -2)
        assert exc_info.value.available == 1
        assert _inventory(mug_id) == 1


class TestListingStatusWrites:
    def test_status_change_keeps_concurrent_inventory(self, lamp_id):
        current_domain.repository_for(Product).adjust_inventory(lamp_id, -6)
        current_domain.repository_for(Product).set_status(lamp_id, ProductStatus.UNLISTED)

        product = current_domain.repository_for(Product).get(lamp_id)
        assert product.status == ProductStatus.UNLISTED.value
        assert product.inventory == 4
