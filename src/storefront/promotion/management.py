"""Promotion administration: commands and handler.

Creating or editing a promotion with ``product_ids`` makes that list the set of
products it applies to. A product already attached to a different promotion
is rejected rather than silently moved.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.promotion.promotion import Promotion, PromotionLink

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Promotion")
class CreatePromotion:
    name = String(required=True, max_length=200)
    description = Text()
    discount_value = Integer(required=True, min_value=1, max_value=100)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    is_active = Boolean(default=True)
    img_url = String(max_length=1000)
    product_ids = Text()  # JSON array of product ids


@storefront.command(part_of="Promotion")
class UpdatePromotion:
    promotion_id = Identifier(required=True)
    name = String(max_length=200)
    description = Text()
    discount_value = Integer(min_value=1, max_value=100)
    start_date = DateTime()
    end_date = DateTime()
    img_url = String(max_length=1000)
    product_ids = Text()  # JSON array; when given, replaces every existing link


@storefront.command(part_of="Promotion")
class SetPromotionActive:
    promotion_id = Identifier(required=True)
    is_active = Boolean(required=True)


def _parse_product_ids(raw) -> list[str] | None:
    if raw is None:
        return None
    ids = json.loads(raw) if isinstance(raw, str) else raw
    # Keep first occurrence order, drop duplicates
    return list(dict.fromkeys(str(pid) for pid in ids))


def _replace_links(promotion, product_ids):
    """Make ``product_ids`` exactly the set of products linked to the promotion."""
    product_repo = current_domain.repository_for(Product)
    link_repo = current_domain.repository_for(PromotionLink)

    current = {str(link.product_id): link for link in link_repo.links_of(promotion.id)}
    for product_id, link in current.items():
        if product_id not in product_ids:
            link_repo.unlink(link)

    for product_id in product_ids:
        if product_id in current:
            continue

        if product_repo.find(product_id) is None:
            raise ValidationError({"product_ids": [f"Product {product_id} does not exist"]})

        existing = link_repo.link_for(product_id)
        if existing is not None and str(existing.promotion_id) != str(promotion.id):
            raise ValidationError(
                {"product_ids": [f"Product {product_id} already belongs to promotion {existing.promotion_id}"]}
            )

        link_repo.add(PromotionLink(promotion_id=str(promotion.id), product_id=product_id))


@storefront.command_handler(part_of=Promotion)
class ManagePromotionHandler:
    @handle(CreatePromotion)
    def create_promotion(self, command):
        promotion = Promotion.create(
            name=command.name,
            description=command.description,
            discount_value=command.discount_value,
            start_date=command.start_date,
            end_date=command.end_date,
            is_active=command.is_active if command.is_active is not None else True,
            img_url=command.img_url,
        )

        product_ids = _parse_product_ids(command.product_ids)
        if product_ids:
            _replace_links(promotion, product_ids)
            promotion.record_products_replaced(product_ids)

        current_domain.repository_for(Promotion).add(promotion)
        logger.info(
            "Promotion created",
            promotion_id=str(promotion.id),
            product_count=len(product_ids or []),
        )
        return str(promotion.id)

    @handle(UpdatePromotion)
    def update_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)

        promotion.update_details(
            name=command.name,
            description=command.description,
            discount_value=command.discount_value,
            start_date=command.start_date,
            end_date=command.end_date,
            img_url=command.img_url,
        )

        product_ids = _parse_product_ids(command.product_ids)
        if product_ids is not None:
            _replace_links(promotion, product_ids)
            promotion.record_products_replaced(product_ids)

        repo.add(promotion)

    @handle(SetPromotionActive)
    def set_promotion_active(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        promotion.set_active(command.is_active)
        repo.add(promotion)
