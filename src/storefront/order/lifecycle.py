"""Order lifecycle: cancellation and administrative status changes.

Both paths into ``canceled`` return every item's quantity to stock through
the same version-checked write the checkout used to take it out. ``canceled``
is terminal, so the restore can only ever happen once per order.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.order.order import CancellationActor, Order, OrderStatus
from storefront.shared.errors import ProductUnavailable

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    """A member cancels one of their own orders."""

    order_id = Identifier(required=True)
    member_id = Identifier(required=True)


@storefront.command(part_of="Order")
class ChangeOrderStatus:
    """An administrator moves an order to another status."""

    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


def restore_stock(order):
    product_repo = current_domain.repository_for(Product)
    for item in order.items:
        try:
            product_repo.adjust_inventory(item.product_id, item.quantity)
        except ProductUnavailable:
            logger.warning(
                "Product gone, quantity not restored",
                order_id=str(order.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
            )


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.owned_by(command.order_id, command.member_id)

        order.cancel(canceled_by=CancellationActor.MEMBER.value)
        restore_stock(order)
        repo.add(order)

        logger.info("Order canceled", order_id=str(order.id), canceled_by=CancellationActor.MEMBER.value)

    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        previous_status = order.status

        changed = order.change_status(command.status, changed_by=CancellationActor.ADMIN.value)
        if not changed:
            logger.debug("Order status unchanged", order_id=str(order.id), status=order.status)
            return

        if order.current_status == OrderStatus.CANCELED:
            restore_stock(order)
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
        )
