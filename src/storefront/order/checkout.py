"""Checkout: turns a member's cart into an order in one unit of work.

Steps, all inside the command's unit of work:

1. Load the cart and each line's live product and promotion.
2. Recompute the total from current prices; reject a declared total that
   differs before anything is written.
3. Create the order with a price snapshot per line.
4. Decrement stock for every line with a version-checked write. If any line
   runs short, decrements already applied are put back before the error
   propagates, so the unit aborts with stock untouched. Losing a version
   race to another checkout fails the commit and the handler runs again.
5. Empty the cart.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.pricing.resolver import quote_for
from storefront.shared.clock import utc_now
from storefront.shared.errors import AmountMismatch, ProductUnavailable

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    member_id = Identifier(required=True)
    recipient_name = String(required=True, max_length=100)
    recipient_phone = String(required=True, max_length=30)
    recipient_address = String(required=True, max_length=500)
    notes = Text()
    total_amount = Integer(required=True, min_value=0)


def _priced_lines(cart, now):
    product_repo = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        product = product_repo.find(item.product_id)
        if product is None:
            raise ProductUnavailable(item.product_id, reason="Product does not exist")
        if not product.is_listed:
            raise ProductUnavailable(item.product_id, reason=f"{product.name} is not listed")

        quote = quote_for(product, now)
        lines.append(
            {
                "product_id": str(product.id),
                "quantity": item.quantity,
                "price": quote.unit_price,
                "discount_price": quote.discount_price,
                "charged": quote.charged,
            }
        )
    return lines


def _decrement_stock(lines):
    product_repo = current_domain.repository_for(Product)
    applied = []
    try:
        for line in lines:
            product_repo.adjust_inventory(line["product_id"], -line["quantity"])
            applied.append(line)
    except Exception:
        for line in reversed(applied):
            product_repo.adjust_inventory(line["product_id"], line["quantity"])
        if applied:
            logger.warning("Stock decrements reversed", lines_reversed=len(applied))
        raise


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_member(command.member_id)
        if cart is None or not cart.items:
            raise ValidationError({"cart": ["Cart is empty"]})

        now = utc_now()
        lines = _priced_lines(cart, now)

        server_total = sum(line["charged"] * line["quantity"] for line in lines)
        if server_total != command.total_amount:
            logger.info(
                "Checkout total rejected",
                member_id=str(command.member_id),
                declared_amount=command.total_amount,
                correct_amount=server_total,
            )
            raise AmountMismatch(correct_amount=server_total, declared_amount=command.total_amount)

        order = Order.place(
            member_id=command.member_id,
            recipient_name=command.recipient_name,
            recipient_phone=command.recipient_phone,
            recipient_address=command.recipient_address,
            notes=command.notes,
            total_amount=server_total,
            lines=lines,
        )

        _decrement_stock(lines)

        cart.clear()
        cart_repo.add(cart)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            member_id=str(command.member_id),
            total_amount=server_total,
            line_count=len(lines),
        )
        return str(order.id)
