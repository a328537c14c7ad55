"""Repositories for Promotion and PromotionLink."""

import structlog

from storefront.domain import storefront
from storefront.promotion.promotion import Promotion, PromotionLink
from storefront.shared.clock import as_utc

logger = structlog.get_logger(__name__)


@storefront.repository(part_of=Promotion)
class PromotionRepository:
    def find(self, promotion_id) -> Promotion | None:
        items = self._dao.query.filter(id=str(promotion_id)).all().items
        return items[0] if items else None

    def everything(self) -> list[Promotion]:
        """All promotions, latest start first."""
        return sorted(self._dao.query.all().items, key=lambda promotion: as_utc(promotion.start_date), reverse=True)

    def expired_active(self, as_of) -> list[Promotion]:
        """Active promotions whose window ended strictly before ``as_of``."""
        active = self._dao.query.filter(is_active=True).all().items
        return [promotion for promotion in active if promotion.has_ended_by(as_of)]


@storefront.repository(part_of=PromotionLink)
class PromotionLinkRepository:
    def link_for(self, product_id) -> PromotionLink | None:
        items = self._dao.query.filter(product_id=str(product_id)).all().items
        return items[0] if items else None

    def links_of(self, promotion_id) -> list[PromotionLink]:
        return self._dao.query.filter(promotion_id=str(promotion_id)).all().items

    def unlink(self, link) -> None:
        self._dao.delete(link)

    def unlink_all(self, promotion_id) -> int:
        """Delete every link of the promotion and return how many went."""
        links = self.links_of(promotion_id)
        for link in links:
            self.unlink(link)

        if links:
            logger.info("Promotion links removed", promotion_id=str(promotion_id), count=len(links))
        return len(links)
