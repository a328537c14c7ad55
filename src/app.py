"""Storefront FastAPI application.

Web server that processes storefront commands synchronously via HTTP. Each
request runs inside the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml:
#   - unset / "test" → in-memory providers
#   - "production"   → PostgreSQL
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.domain import storefront
from storefront.utils.logging import bind_request_context, clear_request_context, get_logger

storefront.init()

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Carts, checkout, orders and promotions",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and tag log lines with a request id."""
    clear_request_context()
    bind_request_context(request_id=request.headers.get("X-Request-ID", uuid4().hex), path=request.url.path)
    with storefront.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
from storefront.api.errors import register_error_handlers  # noqa: E402

register_exception_handlers(app)
# Storefront-specific mappings replace the generic ones for the same types
register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api import (  # noqa: E402
    admin_router,
    cart_router,
    maintenance_router,
    order_router,
    password_reset_router,
)

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(password_reset_router)
app.include_router(admin_router)
app.include_router(maintenance_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
