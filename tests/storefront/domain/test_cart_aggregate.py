"""Tests for cart line management on the Cart aggregate."""

import pytest
from protean.exceptions import ValidationError

from storefront.cart.cart import Cart
from storefront.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantitySet, GuestCartMerged
from storefront.shared.errors import InsufficientInventory


def _make_cart():
    return Cart.create(member_id="member-001")


class TestAddItem:
    def test_add_item(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available_inventory=5)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_add_item_raises_event(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available_inventory=5)
        added = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(added) == 1
        assert added[0].product_id == "prod-001"
        assert added[0].line_quantity == 2

    def test_same_product_increases_existing_line(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available_inventory=5)
        cart.add_item("prod-001", 2, available_inventory=5)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3

    def test_existing_quantity_counts_against_inventory(self):
        cart = _make_cart()
        cart.add_item("prod-001", 3, available_inventory=4)
        with pytest.raises(InsufficientInventory) as exc_info:
            cart.add_item("prod-001", 2, available_inventory=4)
        assert exc_info.value.available == 4
        assert exc_info.value.requested == 5
        assert cart.items[0].quantity == 3

    def test_exactly_the_inventory_is_allowed(self):
        cart = _make_cart()
        cart.add_item("prod-001", 4, available_inventory=4)
        assert cart.items[0].quantity == 4

    def test_zero_quantity_rejected(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_item("prod-001", 0, available_inventory=4)


class TestSetQuantity:
    def test_overwrites_quantity(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available_inventory=5)
        cart.set_quantity("prod-001", 4)
        assert cart.items[0].quantity == 4
        event = [e for e in cart._events if isinstance(e, CartQuantitySet)][0]
        assert event.previous_quantity == 1
        assert event.new_quantity == 4

    def test_does_not_check_inventory(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available_inventory=1)
        cart.set_quantity("prod-001", 50)
        assert cart.items[0].quantity == 50

    def test_missing_line_is_noop(self):
        cart = _make_cart()
        cart.set_quantity("prod-404", 3)
        assert len(cart.items) == 0
        assert not [e for e in cart._events if isinstance(e, CartQuantitySet)]


class TestRemoveItem:
    def test_remove_item(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available_inventory=5)
        cart.remove_item("prod-001")
        assert len(cart.items) == 0
        assert [e for e in cart._events if isinstance(e, CartItemRemoved)]

    def test_remove_absent_item_is_idempotent(self):
        cart = _make_cart()
        cart.remove_item("prod-001")
        cart.remove_item("prod-001")
        assert len(cart.items) == 0


class TestMergeGuestLines:
    def test_sums_into_existing_lines(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available_inventory=10)
        cart.merge_guest_lines([{"product_id": "prod-001", "quantity": 3}])
        assert cart.line_for("prod-001").quantity == 5

    def test_inserts_new_lines(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available_inventory=10)
        merged = cart.merge_guest_lines(
            [
                {"product_id": "prod-002", "quantity": 1},
                {"product_id": "prod-003", "quantity": 4},
            ]
        )
        assert merged == 2
        assert {str(i.product_id): i.quantity for i in cart.items} == {"prod-001": 1, "prod-002": 1, "prod-003": 4}

    def test_ignores_non_positive_quantities(self):
        cart = _make_cart()
        merged = cart.merge_guest_lines([{"product_id": "prod-001", "quantity": 0}])
        assert merged == 0
        assert len(cart.items) == 0

    def test_raises_merge_event(self):
        cart = _make_cart()
        cart.merge_guest_lines([{"product_id": "prod-001", "quantity": 1}])
        event = [e for e in cart._events if isinstance(e, GuestCartMerged)][0]
        assert event.lines_merged == 1


class TestClear:
    def test_clear_removes_every_line(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available_inventory=5)
        cart.add_item("prod-002", 2, available_inventory=5)
        cart.clear()
        assert len(cart.items) == 0
        event = [e for e in cart._events if isinstance(e, CartCleared)][0]
        assert event.lines_removed == 2
