"""Storefront API package."""

from storefront.api.admin import admin_router, maintenance_router
from storefront.api.routes import cart_router, order_router, password_reset_router

__all__ = ["cart_router", "order_router", "password_reset_router", "admin_router", "maintenance_router"]
