"""FastAPI routes for members: cart, orders and password resets."""

import json

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain
from starlette.concurrency import run_in_threadpool

from storefront.account.password_reset import RedeemPasswordReset, RequestPasswordReset
from storefront.api.dependencies import current_member
from storefront.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartCheckResponse,
    CartResponse,
    MergeGuestCartRequest,
    OrderIdResponse,
    PlaceOrderRequest,
    RedeemPasswordResetRequest,
    RedeemPasswordResetResponse,
    RequestPasswordResetRequest,
    SetCartQuantityRequest,
    StatusResponse,
)
from storefront.auth import Principal
from storefront.cart.items import AddToCart, RemoveFromCart, SetCartQuantity
from storefront.cart.management import MergeGuestCart, OpenCart
from storefront.cart.view import cart_lines, check_cart
from storefront.order.checkout import PlaceOrder
from storefront.order.lifecycle import CancelOrder
from storefront.order.order import Order
from storefront.order.view import order_detail, order_summary
from storefront.shared.locking import process_for_member

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(member: Principal = Depends(current_member)) -> CartResponse:
    await run_in_threadpool(process_for_member, member.member_id, OpenCart(member_id=member.member_id))
    return CartResponse(items=[line.to_dict() for line in cart_lines(member.member_id)])


@cart_router.post("/items", status_code=201, response_model=StatusResponse)
async def add_to_cart(body: AddToCartRequest, member: Principal = Depends(current_member)) -> StatusResponse:
    command = AddToCart(
        member_id=member.member_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    await run_in_threadpool(process_for_member, member.member_id, command)
    return StatusResponse()


@cart_router.patch("/items/{product_id}", status_code=204)
async def set_cart_quantity(
    product_id: str, body: SetCartQuantityRequest, member: Principal = Depends(current_member)
) -> Response:
    command = SetCartQuantity(
        member_id=member.member_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    await run_in_threadpool(process_for_member, member.member_id, command)
    return Response(status_code=204)


@cart_router.delete("/items/{product_id}", status_code=204)
async def remove_from_cart(product_id: str, member: Principal = Depends(current_member)) -> Response:
    command = RemoveFromCart(member_id=member.member_id, product_id=product_id)
    await run_in_threadpool(process_for_member, member.member_id, command)
    return Response(status_code=204)


@cart_router.post("/merge", status_code=204)
async def merge_guest_cart(body: MergeGuestCartRequest, member: Principal = Depends(current_member)) -> Response:
    command = MergeGuestCart(
        member_id=member.member_id,
        guest_lines=json.dumps([line.model_dump() for line in body.items]),
    )
    await run_in_threadpool(process_for_member, member.member_id, command)
    return Response(status_code=204)


@cart_router.get("/check", response_model=CartCheckResponse)
async def check_member_cart(member: Principal = Depends(current_member)):
    violations = check_cart(member.member_id)
    if violations:
        return JSONResponse(
            status_code=400,
            content={"error": "Cart cannot be checked out as it is", "violations": violations},
        )
    return CartCheckResponse(violations=[])


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest, member: Principal = Depends(current_member)) -> OrderIdResponse:
    command = PlaceOrder(
        member_id=member.member_id,
        recipient_name=body.recipient_name,
        recipient_phone=body.recipient_phone,
        recipient_address=body.recipient_address,
        notes=body.notes,
        total_amount=body.total_amount,
    )
    order_id = await run_in_threadpool(process_for_member, member.member_id, command)
    return OrderIdResponse(order_id=order_id)


@order_router.get("")
async def list_orders(member: Principal = Depends(current_member)) -> dict:
    orders = current_domain.repository_for(Order).for_member(member.member_id)
    return {"orders": [order_summary(order) for order in orders]}


@order_router.get("/{order_id}")
async def get_order(order_id: str, member: Principal = Depends(current_member)) -> dict:
    order = current_domain.repository_for(Order).owned_by(order_id, member.member_id)
    return order_detail(order)


@order_router.patch("/{order_id}", status_code=204)
async def cancel_order(order_id: str, body: CancelOrderRequest, member: Principal = Depends(current_member)) -> Response:
    command = CancelOrder(order_id=order_id, member_id=member.member_id)
    await run_in_threadpool(process_for_member, member.member_id, command)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Password Reset Router
# ---------------------------------------------------------------------------
password_reset_router = APIRouter(prefix="/password-resets", tags=["password-resets"])


@password_reset_router.post("", status_code=202, response_model=StatusResponse)
async def request_password_reset(body: RequestPasswordResetRequest) -> StatusResponse:
    current_domain.process(
        RequestPasswordReset(member_id=body.member_id, email=body.email),
        asynchronous=False,
    )
    return StatusResponse(status="accepted")


@password_reset_router.post("/redeem", response_model=RedeemPasswordResetResponse)
async def redeem_password_reset(body: RedeemPasswordResetRequest) -> RedeemPasswordResetResponse:
    member_id = current_domain.process(RedeemPasswordReset(token=body.token), asynchronous=False)
    return RedeemPasswordResetResponse(member_id=member_id)
