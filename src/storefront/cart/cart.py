"""Cart aggregate (CQRS): the member's pending selection before checkout.

One cart per member, created lazily on first use. A cart holds at most one
line per product; adding a product that is already present increases that
line instead of adding a second one. Emptying the cart at checkout removes
its lines but keeps the cart itself.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantitySet,
    GuestCartMerged,
)
from storefront.domain import storefront
from storefront.shared.errors import InsufficientInventory


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class Cart:
    member_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, member_id):
        now = datetime.now(UTC)
        return cls(member_id=member_id, created_at=now, updated_at=now)

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, available_inventory):
        """Add ``quantity`` of a product, refusing to exceed live inventory.

        The check covers what is already in the cart: 3 in the cart plus 2
        more needs an inventory of at least 5.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.line_for(product_id)
        in_cart = existing.quantity if existing else 0
        if in_cart + quantity > available_inventory:
            raise InsufficientInventory(product_id, available=available_inventory, requested=in_cart + quantity)

        now = datetime.now(UTC)
        if existing:
            existing.quantity += quantity
            line_quantity = existing.quantity
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, added_at=now))
            line_quantity = quantity

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                member_id=str(self.member_id),
                product_id=str(product_id),
                quantity=quantity,
                line_quantity=line_quantity,
            )
        )

    def set_quantity(self, product_id, quantity):
        """Overwrite a line's quantity. Inventory is re-checked at checkout.

        Setting the quantity of a product that is not in the cart does nothing.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self.line_for(product_id)
        if item is None:
            return

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantitySet(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove a product's line. Removing an absent product is a no-op."""
        item = self.line_for(product_id)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    # -------------------------------------------------------------------
    # Cart merging (guest → member)
    # -------------------------------------------------------------------
    def merge_guest_lines(self, guest_lines):
        """Fold guest lines into this cart.

        Args:
            guest_lines: List of dicts with product_id and quantity.

        Quantities for products already in the cart are summed, so nothing
        the member had before logging in is lost. Lines with a non-positive
        quantity are ignored.
        """
        now = datetime.now(UTC)
        merged = 0

        for line in guest_lines:
            quantity = int(line["quantity"])
            if quantity < 1:
                continue

            existing = self.line_for(line["product_id"])
            if existing:
                existing.quantity += quantity
            else:
                self.add_items(CartItem(product_id=line["product_id"], quantity=quantity, added_at=now))
            merged += 1

        self.updated_at = now
        self.raise_(
            GuestCartMerged(
                cart_id=str(self.id),
                member_id=str(self.member_id),
                lines_merged=merged,
            )
        )
        return merged

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def clear(self):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)

        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), lines_removed=removed))
