"""Storefront bounded context: catalogue stock, promotions, carts and orders.

Everything that must commit together at checkout (products, promotions,
carts, orders) lives in this single domain so a command handler's unit of
work covers all of it.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging(log_file_prefix="storefront")

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
