"""Pydantic request/response schemas for the cart API.

These are external contracts for the UI layer, separate from the internal
value objects.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class AddLineRequest(BaseModel):
    product_id: str
    name: str = ""
    unit_price: float = 0.0
    image_ref: str = ""
    quantity: int = 1
    per_line_unit_cap: int | None = None
    box_eligible: bool = False
    is_box: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-vacio",
                    "name": "Vacio",
                    "unit_price": 9800.0,
                    "quantity": 3,
                    "per_line_unit_cap": 5,
                    "box_eligible": True,
                    "is_box": False,
                }
            ]
        }
    }


class SetQuantityRequest(BaseModel):
    quantity: int


class SetUnitRequest(BaseModel):
    is_box: bool


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class ResultResponse(BaseModel):
    ok: bool
    error: str | None = None
    message: str | None = None


class CartLineSchema(BaseModel):
    product_id: str
    name: str
    unit_price: float
    image_ref: str
    quantity: int
    per_line_unit_cap: int
    box_eligible: bool
    is_box: bool
    unit: str
    unit_label: str
    detail: str


class CartResponse(BaseModel):
    state: str
    lines: list[CartLineSchema]
    line_count: int
    total_weight: int
    total_boxes: int
    total_price: float
    price_is_known: bool
    units_summary: str
    max_total_weight: int
    max_distinct_items: int
    within_limits: bool
    can_submit: bool


class CeilingsResponse(BaseModel):
    max_total_weight: int = Field(ge=1)
    max_distinct_items: int = Field(ge=1)


class CheckoutResponse(ResultResponse):
    order_id: str | None = None
    status: str | None = None
    created_at: datetime | None = None
