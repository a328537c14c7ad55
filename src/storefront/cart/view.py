"""Read side of the cart: priced lines and the pre-checkout sanity check."""

from dataclasses import asdict, dataclass

import structlog
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.pricing.resolver import quote_for
from storefront.shared.clock import utc_now

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    price: int
    discount_price: int | None
    img_url: str | None
    quantity: int
    status: str
    inventory: int

    def to_dict(self) -> dict:
        return asdict(self)


def cart_lines(member_id, now=None) -> list[CartLine]:
    """The member's cart lines joined with live product data and current prices."""
    cart = current_domain.repository_for(Cart).for_member(member_id)
    if cart is None:
        return []

    now = now or utc_now()
    product_repo = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        product = product_repo.find(item.product_id)
        if product is None:
            logger.warning(
                "Cart line references a missing product",
                member_id=str(member_id),
                product_id=str(item.product_id),
            )
            continue

        quote = quote_for(product, now)
        lines.append(
            CartLine(
                product_id=str(product.id),
                name=product.name,
                price=quote.unit_price,
                discount_price=quote.discount_price,
                img_url=product.img_url,
                quantity=item.quantity,
                status=product.status,
                inventory=product.inventory,
            )
        )
    return lines


def check_cart(member_id) -> list[str]:
    """Human-readable problems that would make checkout fail, one per finding.

    A single line can yield two messages when its product is both unlisted and
    short on stock. An empty list means the cart is ready to check out.
    """
    cart = current_domain.repository_for(Cart).for_member(member_id)
    if cart is None:
        return []

    product_repo = current_domain.repository_for(Product)
    problems = []
    for item in cart.items:
        product = product_repo.find(item.product_id)
        if product is None:
            problems.append(f"Product not found: {item.product_id}")
            continue
        if not product.is_listed:
            problems.append(f"{product.name} is no longer listed, please remove it from your cart")
        if item.quantity > product.inventory:
            problems.append(f"{product.name} exceeds available inventory, {product.inventory} in stock")
    return problems
