"""Cart item management: commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shared.errors import ProductUnavailable

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Cart")
class AddToCart:
    member_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class SetCartQuantity:
    member_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    member_id = Identifier(required=True)
    product_id = Identifier(required=True)


def cart_for(member_id) -> Cart:
    """Load the member's cart, creating an empty one on first use."""
    cart = current_domain.repository_for(Cart).for_member(member_id)
    if cart is None:
        cart = Cart.create(member_id=member_id)
        logger.info("Cart created", member_id=str(member_id), cart_id=str(cart.id))
    return cart


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).find(command.product_id)
        if product is None:
            raise ProductUnavailable(command.product_id, reason="Product does not exist")
        if not product.is_listed:
            raise ProductUnavailable(command.product_id, reason="Product is not listed")

        cart = cart_for(command.member_id)
        cart.add_item(
            product_id=command.product_id,
            quantity=command.quantity,
            available_inventory=product.inventory,
        )
        current_domain.repository_for(Cart).add(cart)

    @handle(SetCartQuantity)
    def set_cart_quantity(self, command):
        cart = cart_for(command.member_id)
        cart.set_quantity(product_id=command.product_id, quantity=command.quantity)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = cart_for(command.member_id)
        cart.remove_item(product_id=command.product_id)
        current_domain.repository_for(Cart).add(cart)
