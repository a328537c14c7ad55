"""Repository for the Product aggregate.

Inventory and listing status are written through the aggregate's version
check: a write made from a stale read fails with ``ExpectedVersionError``
(immediately outside a unit of work, at commit inside one) and the caller
retries the whole command against fresh state.
"""

import structlog
from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product import Product, ProductStatus
from storefront.domain import storefront
from storefront.shared.errors import InsufficientInventory, ProductUnavailable

logger = structlog.get_logger(__name__)


@storefront.repository(part_of=Product)
class ProductRepository:
    def find(self, product_id) -> Product | None:
        """Return the product, or None when it does not exist."""
        try:
            return self._dao.get(str(product_id))
        except ObjectNotFoundError:
            return None

    def _existing(self, product_id) -> Product:
        product = self.find(product_id)
        if product is None:
            raise ProductUnavailable(product_id, reason="Product does not exist")
        return product

    def adjust_inventory(self, product_id, delta: int) -> int:
        """Apply ``delta`` to the product's inventory and return the new level.

        A delta that would take inventory below zero raises
        ``InsufficientInventory`` and writes nothing. The write carries the
        version that was read, so it never lands on top of a concurrent one.
        """
        product_id = str(product_id)
        product = self._existing(product_id)

        observed = product.inventory
        new_inventory = observed + delta
        if new_inventory < 0:
            raise InsufficientInventory(product_id, available=observed, requested=-delta)

        self._dao.update(product, inventory=new_inventory)
        logger.info(
            "Inventory adjusted",
            product_id=product_id,
            delta=delta,
            previous_inventory=observed,
            new_inventory=new_inventory,
        )
        return new_inventory

    def set_status(self, product_id, status: ProductStatus) -> None:
        """Change only the listing status, leaving inventory untouched."""
        product = self._existing(product_id)
        self._dao.update(product, status=status.value)
