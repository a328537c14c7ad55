"""Repository for the Order aggregate.

Ownership lookups fail with ``OrderNotFound`` whether the order is missing
or belongs to someone else, so callers cannot tell the two apart.
"""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.shared.clock import as_utc
from storefront.shared.errors import OrderNotFound


def _newest_first(orders):
    return sorted(orders, key=lambda order: as_utc(order.order_created_at), reverse=True)


@storefront.repository(part_of=Order)
class OrderRepository:
    def get_order(self, order_id) -> Order:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise OrderNotFound(order_id)

    def owned_by(self, order_id, member_id) -> Order:
        order = self.get_order(order_id)
        if str(order.member_id) != str(member_id):
            raise OrderNotFound(order_id)
        return order

    def for_member(self, member_id) -> list[Order]:
        return _newest_first(self._dao.query.filter(member_id=str(member_id)).all().items)

    def everything(self) -> list[Order]:
        return _newest_first(self._dao.query.all().items)
