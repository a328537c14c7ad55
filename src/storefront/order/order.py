"""Order aggregate (CQRS): the immutable record of a checkout.

Orders are a plain CQRS aggregate rather than event sourced so that creating
one, decrementing stock and emptying the cart commit together against the
same provider.

State machine:
    created → confirmed → shipped → delivered     (forward only, jumps allowed)
    created | confirmed → canceled
    delivered, canceled are terminal

Each status has its own timestamp, stamped once when the order first reaches
that status and never overwritten.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.order.events import OrderCanceled, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    CREATED = "created"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELED = "canceled"


class CancellationActor(Enum):
    MEMBER = "member"
    ADMIN = "admin"


_FORWARD_SEQUENCE = [
    OrderStatus.CREATED,
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]

_CANCELLABLE_STATES = {OrderStatus.CREATED, OrderStatus.CONFIRMED}

_TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELED}

_TIMESTAMP_FIELDS = {
    OrderStatus.CREATED: "order_created_at",
    OrderStatus.CONFIRMED: "order_confirmed_at",
    OrderStatus.SHIPPED: "order_shipped_at",
    OrderStatus.DELIVERED: "order_delivered_at",
    OrderStatus.CANCELED: "order_canceled_at",
}

# Label used for the creation step when presenting the timeline
_TIMELINE_LABELS = {
    OrderStatus.CREATED: "confirming",
    OrderStatus.CONFIRMED: "confirmed",
    OrderStatus.SHIPPED: "shipped",
    OrderStatus.DELIVERED: "delivered",
    OrderStatus.CANCELED: "canceled",
}


@storefront.entity(part_of="Order")
class OrderItem:
    """Snapshot of one cart line at checkout. Never changes afterwards."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Integer(required=True, min_value=0)
    discount_price = Integer(min_value=0)

    @property
    def charged(self) -> int:
        return self.discount_price if self.discount_price is not None else self.price


@storefront.aggregate
class Order:
    member_id = Identifier(required=True)
    recipient_name = String(required=True, max_length=100)
    recipient_phone = String(required=True, max_length=30)
    recipient_address = String(required=True, max_length=500)
    notes = Text()
    total_amount = Integer(required=True, min_value=0)
    status = String(choices=OrderStatus, default=OrderStatus.CREATED.value)
    items = HasMany(OrderItem)

    order_created_at = DateTime()
    order_confirmed_at = DateTime()
    order_shipped_at = DateTime()
    order_delivered_at = DateTime()
    order_canceled_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        member_id,
        recipient_name,
        recipient_phone,
        recipient_address,
        total_amount,
        lines,
        notes=None,
    ):
        """Create an order from priced cart lines.

        Args:
            lines: List of dicts with product_id, quantity, price and
                discount_price (None when no promotion applied).
        """
        now = datetime.now(UTC)
        order = cls(
            member_id=member_id,
            recipient_name=recipient_name,
            recipient_phone=recipient_phone,
            recipient_address=recipient_address,
            notes=notes,
            total_amount=total_amount,
            status=OrderStatus.CREATED.value,
            order_created_at=now,
        )
        for line in lines:
            order.add_items(
                OrderItem(
                    product_id=line["product_id"],
                    quantity=line["quantity"],
                    price=line["price"],
                    discount_price=line.get("discount_price"),
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                member_id=str(member_id),
                total_amount=total_amount,
                items=json.dumps(
                    [
                        {
                            "product_id": str(line["product_id"]),
                            "quantity": line["quantity"],
                            "price": line["price"],
                            "discount_price": line.get("discount_price"),
                        }
                        for line in lines
                    ]
                ),
                placed_at=now,
            )
        )
        return order

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.current_status in _TERMINAL_STATES

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def change_status(self, new_status, changed_by=CancellationActor.ADMIN.value) -> bool:
        """Move the order to ``new_status``. Returns False when nothing changed.

        Re-applying the current non-terminal status is a no-op that keeps the
        original timestamp. Moving to ``canceled`` follows the cancellation
        rules.
        """
        target = OrderStatus(new_status)
        current = self.current_status

        if current in _TERMINAL_STATES:
            raise ValidationError({"status": [f"Order is already {current.value} and cannot change"]})

        if target == current:
            return False

        if target == OrderStatus.CANCELED:
            self.cancel(canceled_by=changed_by)
            return True

        if _FORWARD_SEQUENCE.index(target) < _FORWARD_SEQUENCE.index(current):
            raise ValidationError({"status": [f"Cannot move order from {current.value} back to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self._stamp(target, now)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True

    def cancel(self, canceled_by):
        current = self.current_status
        if current not in _CANCELLABLE_STATES:
            raise ValidationError({"status": [f"Order cannot be canceled once it is {current.value}"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELED.value
        self._stamp(OrderStatus.CANCELED, now)

        self.raise_(
            OrderCanceled(
                order_id=str(self.id),
                member_id=str(self.member_id),
                canceled_by=canceled_by,
                previous_status=current.value,
                canceled_at=now,
            )
        )

    def _stamp(self, status, when):
        field_name = _TIMESTAMP_FIELDS[status]
        if getattr(self, field_name) is None:
            setattr(self, field_name, when)

    # -------------------------------------------------------------------
    # Presentation helpers
    # -------------------------------------------------------------------
    def timeline(self) -> list[tuple[str, datetime]]:
        """``(label, timestamp)`` pairs for every status the order has reached.

        Always starts with ``("confirming", order_created_at)``; the others
        follow in lifecycle order and only when set.
        """
        steps = []
        for status in [*_FORWARD_SEQUENCE, OrderStatus.CANCELED]:
            stamped_at = getattr(self, _TIMESTAMP_FIELDS[status])
            if stamped_at is not None:
                steps.append((_TIMELINE_LABELS[status], stamped_at))
        return steps
