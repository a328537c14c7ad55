"""Domain events for the Product aggregate."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductRegistered:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Integer(required=True)
    inventory = Integer(required=True)
