"""Read views over orders for the member and admin endpoints."""

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product


def _iso(value):
    return value.isoformat() if value is not None else None


def order_timestamps(order) -> list[dict]:
    return [{"status": label, "at": _iso(stamped_at)} for label, stamped_at in order.timeline()]


def order_summary(order) -> dict:
    return {
        "order_id": str(order.id),
        "member_id": str(order.member_id),
        "status": order.status,
        "total_amount": order.total_amount,
        "item_count": sum(item.quantity for item in order.items),
        "order_created_at": _iso(order.order_created_at),
    }


def order_detail(order) -> dict:
    """Everything about one order, with item names looked up live.

    Prices come from the snapshot taken at checkout, never from the current
    catalogue.
    """
    product_repo = current_domain.repository_for(Product)
    items = []
    for item in order.items:
        product = product_repo.find(item.product_id)
        items.append(
            {
                "product_id": str(item.product_id),
                "name": product.name if product else None,
                "img_url": product.img_url if product else None,
                "quantity": item.quantity,
                "price": item.price,
                "discount_price": item.discount_price,
            }
        )

    return {
        **order_summary(order),
        "recipient_name": order.recipient_name,
        "recipient_phone": order.recipient_phone,
        "recipient_address": order.recipient_address,
        "notes": order.notes,
        "items": items,
        "order_timestamps": order_timestamps(order),
    }
