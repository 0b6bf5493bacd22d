"""Discount API routers.

- Admin CRUD for Buy X Get Y rules and single-item product discounts
- Config fetch endpoint: the ``{"rules": [...]}`` payload for the function
- Function run endpoint: checkout input document in, operations out
- Public storefront lookup (separate router, permissive CORS)

Shop isolation via middleware; repository injection via FastAPI Depends.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from api.middleware import get_current_shop
from core.observability.otel_setup import create_run_span, get_tracer
from verticals.discounts.config import config as engine_config
from verticals.discounts.engine import SpanObserver, log_observer, run_function
from verticals.discounts.models.schemas import (
    BuyXGetYCreate,
    BuyXGetYResponse,
    FunctionConfigResponse,
    ListResponse,
    ProductDiscountCreate,
    ProductDiscountResponse,
    PublicDiscountResponse,
)
from verticals.discounts.repository import (
    BuyXGetYRepository,
    ProductDiscountRepository,
    get_product_discount_repository,
    get_rule_repository,
)

logger = structlog.get_logger(__name__)

router = APIRouter()
public_router = APIRouter()

FUNCTION_NAME = "cart_lines_discounts_generate_run"


# ============================================================================
# Buy X Get Y rules
# ============================================================================

@router.get("/buy-x-get-y", response_model=ListResponse)
async def list_rules(repo: BuyXGetYRepository = Depends(get_rule_repository)):
    """List the shop's Buy X Get Y rules, newest first."""
    rules = await repo.list(get_current_shop())
    return {"data": rules, "count": len(rules)}


@router.post("/buy-x-get-y", status_code=201, response_model=BuyXGetYResponse)
async def create_rule(
    request: BuyXGetYCreate,
    repo: BuyXGetYRepository = Depends(get_rule_repository),
):
    """Create a Buy X Get Y rule."""
    shop = get_current_shop()
    rule = await repo.create(shop=shop, data=request.model_dump())
    logger.info("rule_created", rule_id=rule["id"])
    return rule


@router.delete("/buy-x-get-y/{rule_id}", status_code=204)
async def delete_rule(
    rule_id: str,
    repo: BuyXGetYRepository = Depends(get_rule_repository),
):
    """Delete one Buy X Get Y rule."""
    deleted = await repo.delete(item_id=rule_id, shop=get_current_shop())
    if not deleted:
        raise HTTPException(status_code=404, detail="Rule not found")
    logger.info("rule_deleted", rule_id=rule_id)


@router.get("/buy-x-get-y/config", response_model=FunctionConfigResponse)
async def function_config(repo: BuyXGetYRepository = Depends(get_rule_repository)):
    """Configuration payload consumed by the discount function's fetch step."""
    return await repo.function_config(get_current_shop())


# ============================================================================
# Single-item product discounts
# ============================================================================

@router.get("/product-discounts", response_model=ListResponse)
async def list_product_discounts(
    repo: ProductDiscountRepository = Depends(get_product_discount_repository),
):
    """List the shop's product discounts, newest first."""
    discounts = await repo.list(get_current_shop())
    return {"data": discounts, "count": len(discounts)}


@router.post("/product-discounts", status_code=201, response_model=ProductDiscountResponse)
async def create_product_discount(
    request: ProductDiscountCreate,
    repo: ProductDiscountRepository = Depends(get_product_discount_repository),
):
    """Create a product discount."""
    discount = await repo.create(shop=get_current_shop(), data=request.model_dump())
    logger.info("product_discount_created", discount_id=discount["id"])
    return discount


@router.delete("/product-discounts/{discount_id}", status_code=204)
async def delete_product_discount(
    discount_id: str,
    repo: ProductDiscountRepository = Depends(get_product_discount_repository),
):
    """Delete one product discount."""
    deleted = await repo.delete(item_id=discount_id, shop=get_current_shop())
    if not deleted:
        raise HTTPException(status_code=404, detail="Discount not found")


@router.delete("/product-discounts")
async def delete_all_product_discounts(
    repo: ProductDiscountRepository = Depends(get_product_discount_repository),
):
    """Delete every product discount of the shop."""
    removed = await repo.delete_all(get_current_shop())
    logger.info("product_discounts_cleared", count=removed)
    return {"deleted": removed}


# ============================================================================
# Discount function
# ============================================================================

@router.post("/functions/cart-lines-discounts-generate-run")
async def cart_lines_discounts_generate_run(request: Request):
    """Run the Buy X Get Y function on a checkout input document.

    Always answers 200: an unreadable body is treated as an empty input and
    yields no operations.
    """
    try:
        document = await request.json()
    except ValueError:
        document = None

    tracer = get_tracer()
    with create_run_span(tracer, FUNCTION_NAME, shop=get_current_shop()) as span:
        return run_function(
            document,
            config=engine_config,
            observers=(log_observer, SpanObserver(span)),
        )


# ============================================================================
# Public storefront lookup
# ============================================================================

@public_router.get("/product-discount", response_model=PublicDiscountResponse)
async def product_discount(
    response: Response,
    shop: Optional[str] = None,
    product_id: Optional[str] = Query(None, alias="productId"),
    repo: ProductDiscountRepository = Depends(get_product_discount_repository),
):
    """Discount for one product, or ``{"discount": null}``.

    Always 200: missing parameters and "no discount" are both just data for
    the storefront script.
    """
    response.headers["Access-Control-Allow-Origin"] = "*"

    if not shop or not product_id:
        logger.info("product_discount_missing_params", shop=shop, product_id=product_id)
        return {"discount": None}

    discount = await repo.get_for_product(shop, product_id)
    logger.info(
        "product_discount_lookup",
        shop=shop,
        product_id=product_id,
        found=discount is not None,
    )
    return {"discount": discount}
