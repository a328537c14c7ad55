"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Cart")
class CartItemAdded:
    """A quantity of a product was put in the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    member_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartQuantitySet:
    """The quantity of a cart line was overwritten."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartItemRemoved:
    """A product was taken out of the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.event(part_of="Cart")
class GuestCartMerged:
    """Lines collected before login were folded into the member's cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    member_id = Identifier(required=True)
    lines_merged = Integer(required=True)


@storefront.event(part_of="Cart")
class CartCleared:
    """Every line was removed after the cart was checked out."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)
