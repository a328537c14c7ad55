"""Product aggregate: the catalogue record the core reads prices and stock from.

Inventory is never changed through this aggregate once it is registered.
Checkout and cancellation move it through
``ProductRepository.adjust_inventory`` so concurrent writers cannot lose
each other's updates.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Integer, String

from storefront.catalogue.events import ProductRegistered
from storefront.domain import storefront


class ProductStatus(Enum):
    LISTED = "listed"
    UNLISTED = "unlisted"


@storefront.aggregate
class Product:
    name = String(required=True, max_length=200)
    price = Integer(required=True, min_value=0)
    inventory = Integer(required=True, min_value=0, default=0)
    status = String(choices=ProductStatus, default=ProductStatus.UNLISTED.value)
    img_url = String(max_length=1000)
    created_at = DateTime()

    @classmethod
    def register(cls, name, price, inventory=0, status=ProductStatus.UNLISTED.value, img_url=None):
        product = cls(
            name=name,
            price=price,
            inventory=inventory,
            status=status,
            img_url=img_url,
            created_at=datetime.now(UTC),
        )
        product.raise_(
            ProductRegistered(
                product_id=str(product.id),
                name=name,
                price=price,
                inventory=inventory,
            )
        )
        return product

    @property
    def is_listed(self) -> bool:
        return self.status == ProductStatus.LISTED.value
