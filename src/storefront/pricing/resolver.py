"""Pricing resolver: the price a product sells for at a given instant.

``effective_price`` is pure and is the only place discount arithmetic
happens; the cart view, the checkout and the order snapshot all go through
it so they can never disagree about a total.
"""

from dataclasses import dataclass
from datetime import datetime

from protean.utils.globals import current_domain

from storefront.promotion.promotion import Promotion, PromotionLink
from storefront.shared.clock import as_utc, utc_now


@dataclass(frozen=True)
class PriceQuote:
    unit_price: int
    discount_price: int | None = None

    @property
    def charged(self) -> int:
        return self.discount_price if self.discount_price is not None else self.unit_price


def promotion_applies(promotion, now: datetime) -> bool:
    """Active and ``start_date <= now <= end_date``, inclusive on both ends."""
    if promotion is None or not promotion.is_active:
        return False
    now = as_utc(now)
    return as_utc(promotion.start_date) <= now <= as_utc(promotion.end_date)


def discounted(price: int, discount_value: int) -> int:
    """``ceil(price * discount_value / 100)`` in exact integer arithmetic."""
    return -(-(price * discount_value) // 100)


def effective_price(product, promotion, now: datetime) -> PriceQuote:
    if not promotion_applies(promotion, now):
        return PriceQuote(unit_price=product.price)
    return PriceQuote(
        unit_price=product.price,
        discount_price=discounted(product.price, promotion.discount_value),
    )


def promotion_for(product_id) -> Promotion | None:
    """The promotion linked to a product, if any."""
    link = current_domain.repository_for(PromotionLink).link_for(product_id)
    if link is None:
        return None
    return current_domain.repository_for(Promotion).find(link.promotion_id)


def quote_for(product, now: datetime | None = None) -> PriceQuote:
    return effective_price(product, promotion_for(product.id), now or utc_now())
