"""Promotion expiry: command and handler used by the nightly sweep.

Each expired promotion is handled in its own command so one bad record never
blocks the rest. Re-running against an already inactive promotion changes
nothing.
"""

import structlog
from protean import handle
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.promotion.promotion import Promotion, PromotionLink
from storefront.shared.clock import utc_now

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Promotion")
class ExpirePromotion:
    """Drop all product links of an ended promotion, then deactivate it."""

    promotion_id = Identifier(required=True)
    as_of = DateTime()  # Optional: defaults to now


@storefront.command_handler(part_of=Promotion)
class ExpirePromotionHandler:
    @handle(ExpirePromotion)
    def expire_promotion(self, command):
        as_of = command.as_of or utc_now()
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)

        if not promotion.is_active:
            logger.debug("Promotion already inactive", promotion_id=str(promotion.id))
            return False

        if not promotion.has_ended_by(as_of):
            logger.info(
                "Promotion window still open, skipping",
                promotion_id=str(promotion.id),
                end_date=str(promotion.end_date),
            )
            return False

        removed = current_domain.repository_for(PromotionLink).unlink_all(promotion.id)
        promotion.expire(links_removed=removed)
        repo.add(promotion)

        logger.info(
            "Promotion expired",
            promotion_id=str(promotion.id),
            end_date=str(promotion.end_date),
            links_removed=removed,
        )
        return True
