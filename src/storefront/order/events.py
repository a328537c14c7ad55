"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out into a new order."""

    __version__ = 1

    order_id = Identifier(required=True)
    member_id = Identifier(required=True)
    total_amount = Integer(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, price, discount_price}
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved an order forward in its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCanceled:
    """An order was canceled and its quantities are due back in stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    member_id = Identifier(required=True)
    canceled_by = String(required=True)
    previous_status = String(required=True)
    canceled_at = DateTime(required=True)
