"""Read views over promotions for the admin endpoints."""

from protean.utils.globals import current_domain

from storefront.promotion.promotion import PromotionLink


def _iso(value):
    return value.isoformat() if value is not None else None


def promotion_summary(promotion) -> dict:
    return {
        "promotion_id": str(promotion.id),
        "name": promotion.name,
        "discount_type": promotion.discount_type,
        "discount_value": promotion.discount_value,
        "start_date": _iso(promotion.start_date),
        "end_date": _iso(promotion.end_date),
        "is_active": promotion.is_active,
    }


def promotion_detail(promotion) -> dict:
    """One promotion with the products currently linked to it."""
    links = current_domain.repository_for(PromotionLink).links_of(promotion.id)
    return {
        **promotion_summary(promotion),
        "description": promotion.description,
        "img_url": promotion.img_url,
        "product_ids": sorted(str(link.product_id) for link in links),
    }
