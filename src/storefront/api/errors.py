"""Maps domain exceptions to HTTP responses.

Every error body has an ``error`` key. Unexpected exceptions are logged with
their traceback and answered with a generic 500 that reveals nothing.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.shared.errors import AmountMismatch, InsufficientInventory, OrderNotFound, ProductUnavailable

logger = structlog.get_logger(__name__)


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.messages})


async def _product_unavailable(request: Request, exc: ProductUnavailable) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.messages, "product_id": exc.product_id})


async def _insufficient_inventory(request: Request, exc: InsufficientInventory) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"error": exc.messages, "product_id": exc.product_id, "available": exc.available},
    )


async def _amount_mismatch(request: Request, exc: AmountMismatch) -> JSONResponse:
    return JSONResponse(status_code=409, content={"error": exc.messages, "correct_amount": exc.correct_amount})


async def _order_not_found(request: Request, exc: OrderNotFound) -> JSONResponse:
    # Same body whether the order is missing or owned by someone else
    return JSONResponse(status_code=400, content={"error": "Order not found"})


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc) or "Not found"})


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent modification rejected", path=request.url.path)
    return JSONResponse(
        status_code=409,
        content={"error": "The resource was modified concurrently, please retry"},
    )


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(ProductUnavailable, _product_unavailable)
    app.add_exception_handler(InsufficientInventory, _insufficient_inventory)
    app.add_exception_handler(AmountMismatch, _amount_mismatch)
    app.add_exception_handler(OrderNotFound, _order_not_found)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unexpected)
