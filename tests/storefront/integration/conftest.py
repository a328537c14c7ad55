import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers

from storefront.api import admin_router, cart_router, maintenance_router, order_router, password_reset_router
from storefront.api.errors import register_error_handlers
from storefront.auth import Role, get_token_issuer


def _build_app():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(password_reset_router)
    app.include_router(admin_router)
    app.include_router(maintenance_router)
    register_exception_handlers(app)
    register_error_handlers(app)
    return app


@pytest.fixture()
def app():
    return _build_app()


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def member_headers(member_id):
    token = get_token_issuer().issue(member_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_member_headers():
    token = get_token_issuer().issue("member-002")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers():
    token = get_token_issuer().issue("admin-001", role=Role.ADMIN.value)
    return {"Authorization": f"Bearer {token}"}
