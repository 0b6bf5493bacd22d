"""Pydantic schemas for API request/response validation."""

from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class BuyXGetYCreate(BaseModel):
    buy_variant_id: str = Field(..., min_length=1, max_length=255)
    get_variant_id: str = Field(..., min_length=1, max_length=255)
    buy_quantity: int = Field(..., gt=0)
    get_quantity: int = Field(1, ge=1)
    discount_percentage: float = Field(..., gt=0, le=100)


class ProductDiscountCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    percentage: float = Field(..., gt=0, le=100)
    product_id: str = Field(..., min_length=1, max_length=255)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class BuyXGetYResponse(BaseModel):
    id: str
    shop: str
    buy_variant_id: str
    get_variant_id: str
    buy_quantity: int
    get_quantity: int
    discount_percentage: float
    created_at: Optional[str] = None


class ProductDiscountResponse(BaseModel):
    id: str
    shop: str
    title: str
    percentage: float
    product_id: str
    created_at: Optional[str] = None


class PublicDiscountResponse(BaseModel):
    """Storefront lookup result; ``discount`` is null when nothing applies."""

    discount: Optional[ProductDiscountResponse] = None


class RuleConfigRecord(BaseModel):
    buyVariantId: str
    getVariantId: str
    buyQuantity: int
    discountPercentage: float


class FunctionConfigResponse(BaseModel):
    """Payload handed to the discount function as its configuration."""

    rules: list[RuleConfigRecord] = Field(default_factory=list)


class ListResponse(BaseModel):
    data: list
    count: int
