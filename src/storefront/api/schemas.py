"""Pydantic request/response schemas for the storefront API.

These are external contracts, kept separate from the internal Protean
commands they are translated into.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    product_id: str
    name: str
    price: int
    discount_price: int | None = None
    img_url: str | None = None
    quantity: int
    status: str
    inventory: int


class CartResponse(BaseModel):
    items: list[CartLineSchema]


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "0f0b5a6e-3f1c-4a7e-9a55-7b7c1d2e9f10",
                    "quantity": 2,
                }
            ]
        }
    }


class SetCartQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


class GuestLineSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class MergeGuestCartRequest(BaseModel):
    items: list[GuestLineSchema]


class CartCheckResponse(BaseModel):
    violations: list[str]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    recipient_name: str = Field(min_length=1, max_length=100)
    recipient_phone: str = Field(min_length=1, max_length=30)
    recipient_address: str = Field(min_length=1, max_length=500)
    notes: str | None = None
    total_amount: int = Field(ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "recipient_name": "Lin Mei",
                    "recipient_phone": "0912345678",
                    "recipient_address": "No. 1, Section 5, Xinyi Rd, Taipei",
                    "notes": "Leave with the concierge",
                    "total_amount": 1580,
                }
            ]
        }
    }


class OrderIdResponse(BaseModel):
    order_id: str


class CancelOrderRequest(BaseModel):
    status: str = Field(pattern="^canceled$")


class ChangeOrderStatusRequest(BaseModel):
    status: str = Field(pattern="^(created|confirmed|shipped|delivered|canceled)$")


# ---------------------------------------------------------------------------
# Promotions
# ---------------------------------------------------------------------------
class CreatePromotionRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    discount_value: int = Field(ge=1, le=100)
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    img_url: str | None = None
    product_ids: list[str] = Field(default_factory=list)


class UpdatePromotionRequest(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    discount_value: int | None = Field(default=None, ge=1, le=100)
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool | None = None
    img_url: str | None = None
    product_ids: list[str] | None = None


class PromotionIdResponse(BaseModel):
    promotion_id: str


# ---------------------------------------------------------------------------
# Password reset
# ---------------------------------------------------------------------------
class RequestPasswordResetRequest(BaseModel):
    member_id: str
    email: str = Field(min_length=3, max_length=254)


class RedeemPasswordResetRequest(BaseModel):
    token: str = Field(min_length=1, max_length=128)


class RedeemPasswordResetResponse(BaseModel):
    member_id: str


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------
class ExpirySweepRequest(BaseModel):
    as_of: datetime | None = None
