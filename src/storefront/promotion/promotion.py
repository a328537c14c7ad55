"""Promotion and PromotionLink aggregates.

A Promotion is a percentage discount valid over a closed time window. A
PromotionLink attaches one product to one promotion; a product has at most
one link. Links are separate aggregates: expiring a promotion deletes its links and
leaves the Promotion row in place.
"""

import json
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.promotion.events import (
    PromotionActivationChanged,
    PromotionCreated,
    PromotionExpired,
    PromotionProductsReplaced,
    PromotionUpdated,
)
from storefront.shared.clock import as_utc


class DiscountType(Enum):
    PERCENTAGE = "PERCENTAGE"


@storefront.aggregate
class Promotion:
    name = String(required=True, max_length=200)
    description = Text()
    discount_type = String(choices=DiscountType, default=DiscountType.PERCENTAGE.value)
    # Percentage of the list price that is charged: 80 means "pay 80%"
    discount_value = Integer(required=True, min_value=1, max_value=100)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    is_active = Boolean(default=True)
    img_url = String(max_length=1000)

    @invariant.post
    def window_must_not_end_before_it_starts(self):
        if self.start_date and self.end_date and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date cannot be before start date"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        discount_value,
        start_date,
        end_date,
        description=None,
        is_active=True,
        img_url=None,
    ):
        promotion = cls(
            name=name,
            description=description,
            discount_type=DiscountType.PERCENTAGE.value,
            discount_value=discount_value,
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
            img_url=img_url,
        )
        promotion.raise_(
            PromotionCreated(
                promotion_id=str(promotion.id),
                name=name,
                discount_value=discount_value,
                start_date=start_date,
                end_date=end_date,
                is_active=is_active,
            )
        )
        return promotion

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_details(
        self,
        name=None,
        description=None,
        discount_value=None,
        start_date=None,
        end_date=None,
        img_url=None,
    ):
        # Both ends of the window may move together; validate once at the end
        with atomic_change(self):
            if name is not None:
                self.name = name
            if description is not None:
                self.description = description
            if discount_value is not None:
                self.discount_value = discount_value
            if start_date is not None:
                self.start_date = start_date
            if end_date is not None:
                self.end_date = end_date
            if img_url is not None:
                self.img_url = img_url

        self.raise_(
            PromotionUpdated(
                promotion_id=str(self.id),
                discount_value=self.discount_value,
                start_date=self.start_date,
                end_date=self.end_date,
            )
        )

    def record_products_replaced(self, product_ids):
        self.raise_(
            PromotionProductsReplaced(
                promotion_id=str(self.id),
                product_ids=json.dumps([str(pid) for pid in product_ids]),
            )
        )

    def set_active(self, is_active: bool):
        if self.is_active == is_active:
            return

        self.is_active = is_active
        self.raise_(PromotionActivationChanged(promotion_id=str(self.id), is_active=is_active))

    # -------------------------------------------------------------------
    # Expiry
    # -------------------------------------------------------------------
    def has_ended_by(self, as_of) -> bool:
        return as_utc(self.end_date) < as_utc(as_of)

    def expire(self, links_removed: int):
        """Deactivate after the window closed. A no-op when already inactive."""
        if not self.is_active:
            return

        self.is_active = False
        self.raise_(
            PromotionExpired(
                promotion_id=str(self.id),
                end_date=self.end_date,
                links_removed=links_removed,
            )
        )


@storefront.aggregate
class PromotionLink:
    promotion_id = Identifier(required=True)
    product_id = Identifier(required=True, unique=True)
