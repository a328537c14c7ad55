"""Cart management: commands and handler.

Handles lazy cart creation and folding a guest's cart into the member's cart
at login.
"""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.cart.items import cart_for
from storefront.domain import storefront


@storefront.command(part_of="Cart")
class OpenCart:
    """Make sure the member has a cart. Idempotent."""

    member_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class MergeGuestCart:
    """Fold a guest cart's lines into the member's cart in one unit of work."""

    member_id = Identifier(required=True)
    guest_lines = Text(required=True)  # JSON: list of {product_id, quantity}


@storefront.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(OpenCart)
    def open_cart(self, command):
        cart = cart_for(command.member_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(MergeGuestCart)
    def merge_guest_cart(self, command):
        guest_lines = (
            json.loads(command.guest_lines) if isinstance(command.guest_lines, str) else command.guest_lines
        )

        cart = cart_for(command.member_id)
        merged = cart.merge_guest_lines(guest_lines)
        current_domain.repository_for(Cart).add(cart)
        return merged
