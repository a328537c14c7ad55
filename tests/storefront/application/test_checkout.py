"""Application tests for turning a cart into an order."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.cart.cart import Cart
from storefront.cart.items import SetCartQuantity
from storefront.catalogue.product import Product
from storefront.catalogue.registration import UnlistProduct
from storefront.order.order import Order, OrderStatus
from storefront.shared.errors import AmountMismatch, InsufficientInventory, ProductUnavailable


def _inventory(product_id):
    return current_domain.repository_for(Product).get(product_id).inventory


def _cart_size(member_id):
    cart = current_domain.repository_for(Cart).for_member(member_id)
    return len(cart.items) if cart else 0


def _orders_of(member_id):
    return current_domain.repository_for(Order).for_member(member_id)


class TestPlaceOrder:
    def test_happy_path(self, member_id, lamp_id, mug_id, fill_cart, checkout):
        fill_cart(member_id, lamp_id, 2)
        fill_cart(member_id, mug_id, 1)

        order_id = checkout(member_id, total_amount=2 * 1000 + 250, notes="Ring twice")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CREATED.value
        assert order.total_amount == 2250
        assert order.notes == "Ring twice"
        assert {str(i.product_id): i.quantity for i in order.items} == {lamp_id: 2, mug_id: 1}

    def test_stock_is_conserved(self, member_id, lamp_id, mug_id, fill_cart, checkout):
        fill_cart(member_id, lamp_id, 2)
        fill_cart(member_id, mug_id, 3)
        checkout(member_id, total_amount=2000 + 750)

        assert _inventory(lamp_id) == 8
        assert _inventory(mug_id) == 0

    def test_cart_is_emptied_but_kept(self, member_id, lamp_id, fill_cart, checkout):
        fill_cart(member_id, lamp_id, 1)
        checkout(member_id, total_amount=1000)

        assert current_domain.repository_for(Cart).for_member(member_id) is not None
        assert _cart_size(member_id) == 0

    def test_snapshot_uses_discounted_price(self, member_id, make_product, make_promotion, fill_cart, checkout):
        product_id = make_product(price=999, inventory=5)
        make_promotion([product_id], discount_value=85)
        fill_cart(member_id, product_id, 2)

        order_id = checkout(member_id, total_amount=2 * 850)

        [item] = current_domain.repository_for(Order).get(order_id).items
        assert item.price == 999
        assert item.discount_price == 850

    def test_inactive_promotion_charges_list_price(self, member_id, make_product, make_promotion, fill_cart, checkout):
        product_id = make_product(price=999, inventory=5)
        make_promotion([product_id], discount_value=85, is_active=False)
        fill_cart(member_id, product_id, 1)

        order_id = checkout(member_id, total_amount=999)

        [item] = current_domain.repository_for(Order).get(order_id).items
        assert item.discount_price is None


class TestAmountMismatch:
    def test_rejected_with_correct_amount(self, member_id, lamp_id, fill_cart, checkout):
        fill_cart(member_id, lamp_id, 2)
        with pytest.raises(AmountMismatch) as exc_info:
            checkout(member_id, total_amount=1999)
        assert exc_info.value.correct_amount == 2000

    def test_nothing_changes(self, member_id, lamp_id, fill_cart, checkout):
        fill_cart(member_id, lamp_id, 2)
        with pytest.raises(AmountMismatch):
            checkout(member_id, total_amount=1)

        assert _inventory(lamp_id) == 10
        assert _cart_size(member_id) == 1
        assert _orders_of(member_id) == []


class TestRejectedCheckouts:
    def test_empty_cart(self, member_id, checkout):
        with pytest.raises(ValidationError):
            checkout(member_id, total_amount=0)

    def test_unlisted_product(self, member_id, lamp_id, fill_cart, checkout):
        fill_cart(member_id, lamp_id, 1)
        current_domain.process(UnlistProduct(product_id=lamp_id), asynchronous=False)
        with pytest.raises(ProductUnavailable):
            checkout(member_id, total_amount=1000)
        assert _inventory(lamp_id) == 10

    def test_short_line_undoes_earlier_decrements(self, member_id, lamp_id, mug_id, fill_cart, checkout):
        fill_cart(member_id, lamp_id, 2)
        fill_cart(member_id, mug_id, 1)
        current_domain.process(SetCartQuantity(member_id=member_id, product_id=mug_id, quantity=4), asynchronous=False)

        with pytest.raises(InsufficientInventory):
            checkout(member_id, total_amount=2000 + 4 * 250)

        assert _inventory(lamp_id) == 10
        assert _inventory(mug_id) == 3
        assert _cart_size(member_id) == 2
        assert _orders_of(member_id) == []


class TestNoOversell:
    def test_last_unit_goes_to_first_checkout(self, make_product, fill_cart, checkout):
        product_id = make_product(name="Last One", price=500, inventory=1)
        fill_cart("member-a", product_id, 1)
        fill_cart("member-b", product_id, 1)

        checkout("member-a", total_amount=500)
        with pytest.raises(InsufficientInventory):
            checkout("member-b", total_amount=500)

        assert _inventory(product_id) == 0
        assert len(_orders_of("member-a")) == 1
        assert _orders_of("member-b") == []

    def test_sequence_never_goes_negative(self, make_product, fill_cart, checkout):
        product_id = make_product(name="Limited", price=100, inventory=5)
        members = [f"member-{n}" for n in range(8)]
        for member in members:
            fill_cart(member, product_id, 1)

        placed = 0
        for member in members:
            try:
                checkout(member, total_amount=100)
                placed += 1
            except InsufficientInventory:
                pass

        assert placed == 5
        assert _inventory(product_id) == 0
