"""FastAPI routes for administrators: orders, promotions and maintenance."""

import json

from fastapi import APIRouter, Depends, Response
from protean.utils.globals import current_domain
from starlette.concurrency import run_in_threadpool

from storefront.api.dependencies import require_admin
from storefront.api.schemas import (
    ChangeOrderStatusRequest,
    CreatePromotionRequest,
    ExpirySweepRequest,
    PromotionIdResponse,
    UpdatePromotionRequest,
)
from storefront.auth import Principal
from storefront.maintenance.sweep import sweep_expired
from storefront.order.lifecycle import ChangeOrderStatus
from storefront.order.order import Order
from storefront.order.view import order_detail, order_summary
from storefront.promotion.management import CreatePromotion, SetPromotionActive, UpdatePromotion
from storefront.promotion.promotion import Promotion
from storefront.promotion.view import promotion_detail, promotion_summary

# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/orders")
async def list_all_orders(admin: Principal = Depends(require_admin)) -> dict:
    orders = current_domain.repository_for(Order).everything()
    return {"orders": [order_summary(order) for order in orders]}


@admin_router.get("/orders/{order_id}")
async def get_any_order(order_id: str, admin: Principal = Depends(require_admin)) -> dict:
    return order_detail(current_domain.repository_for(Order).get_order(order_id))


@admin_router.patch("/orders/{order_id}", status_code=204)
async def change_order_status(
    order_id: str, body: ChangeOrderStatusRequest, admin: Principal = Depends(require_admin)
) -> Response:
    await run_in_threadpool(
        current_domain.process, ChangeOrderStatus(order_id=order_id, status=body.status), asynchronous=False
    )
    return Response(status_code=204)


@admin_router.get("/promotions")
async def list_promotions(admin: Principal = Depends(require_admin)) -> dict:
    promotions = current_domain.repository_for(Promotion).everything()
    return {"promotions": [promotion_summary(promotion) for promotion in promotions]}


@admin_router.get("/promotions/{promotion_id}")
async def get_promotion(promotion_id: str, admin: Principal = Depends(require_admin)) -> dict:
    return promotion_detail(current_domain.repository_for(Promotion).get(promotion_id))


@admin_router.post("/promotions", status_code=201, response_model=PromotionIdResponse)
async def create_promotion(body: CreatePromotionRequest, admin: Principal = Depends(require_admin)) -> PromotionIdResponse:
    command = CreatePromotion(
        name=body.name,
        description=body.description,
        discount_value=body.discount_value,
        start_date=body.start_date,
        end_date=body.end_date,
        is_active=body.is_active,
        img_url=body.img_url,
        product_ids=json.dumps(body.product_ids),
    )
    promotion_id = await run_in_threadpool(current_domain.process, command, asynchronous=False)
    return PromotionIdResponse(promotion_id=promotion_id)


@admin_router.patch("/promotions/{promotion_id}", status_code=204)
async def update_promotion(
    promotion_id: str, body: UpdatePromotionRequest, admin: Principal = Depends(require_admin)
) -> Response:
    command = UpdatePromotion(
        promotion_id=promotion_id,
        name=body.name,
        description=body.description,
        discount_value=body.discount_value,
        start_date=body.start_date,
        end_date=body.end_date,
        img_url=body.img_url,
        product_ids=json.dumps(body.product_ids) if body.product_ids is not None else None,
    )
    await run_in_threadpool(current_domain.process, command, asynchronous=False)

    if body.is_active is not None:
        await run_in_threadpool(
            current_domain.process,
            SetPromotionActive(promotion_id=promotion_id, is_active=body.is_active),
            asynchronous=False,
        )
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Maintenance Router
# ---------------------------------------------------------------------------
maintenance_router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@maintenance_router.post("/expiry-sweep")
async def run_expiry_sweep(body: ExpirySweepRequest | None = None, admin: Principal = Depends(require_admin)) -> dict:
    as_of = body.as_of if body is not None else None
    report = await run_in_threadpool(sweep_expired, as_of=as_of)
    return report.to_dict()
