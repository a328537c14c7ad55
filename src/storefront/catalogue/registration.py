"""Product registration and listing: commands and handler.

Catalogue management proper lives outside the storefront core; these
commands are the minimal surface that puts products in front of it.
"""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product, ProductStatus
from storefront.domain import storefront


@storefront.command(part_of="Product")
class RegisterProduct:
    name = String(required=True, max_length=200)
    price = Integer(required=True, min_value=0)
    inventory = Integer(default=0, min_value=0)
    listed = String(choices=ProductStatus, default=ProductStatus.LISTED.value)
    img_url = String(max_length=1000)


@storefront.command(part_of="Product")
class ListProduct:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class UnlistProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ProductRegistrationHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = Product.register(
            name=command.name,
            price=command.price,
            inventory=command.inventory or 0,
            status=command.listed,
            img_url=command.img_url,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ListProduct)
    def list_product(self, command):
        current_domain.repository_for(Product).set_status(command.product_id, ProductStatus.LISTED)

    @handle(UnlistProduct)
    def unlist_product(self, command):
        current_domain.repository_for(Product).set_status(command.product_id, ProductStatus.UNLISTED)
