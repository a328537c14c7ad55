"""Domain events for the Promotion aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Promotion")
class PromotionCreated:
    """A promotion was defined by an administrator."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    name = String(required=True)
    discount_value = Integer(required=True)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    is_active = Boolean(required=True)


@storefront.event(part_of="Promotion")
class PromotionUpdated:
    """Descriptive fields, the discount or the window of a promotion changed."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    discount_value = Integer(required=True)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)


@storefront.event(part_of="Promotion")
class PromotionProductsReplaced:
    """The set of products a promotion applies to was replaced."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    product_ids = Text(required=True)  # JSON array


@storefront.event(part_of="Promotion")
class PromotionActivationChanged:
    """A promotion was switched on or off by hand."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    is_active = Boolean(required=True)


@storefront.event(part_of="Promotion")
class PromotionExpired:
    """The nightly sweep deactivated a promotion whose window had closed."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    end_date = DateTime(required=True)
    links_removed = Integer(required=True)
