"""Repository for the Cart aggregate."""

from storefront.cart.cart import Cart
from storefront.domain import storefront


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_member(self, member_id) -> Cart | None:
        """The member's cart, or None if they never had one."""
        items = self._dao.query.filter(member_id=str(member_id)).all().items
        if not items:
            return None
        # Reload through the repository so the cart joins the unit of work
        return self.get(items[0].id)
