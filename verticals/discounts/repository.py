"""Discount rule store: async database access scoped per shop.

Extends BaseRepository with the lookups the admin page, the storefront and
the discount function's config fetch need.
"""

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_session
from patterns.repository import BaseRepository
from verticals.discounts.models.db_models import BuyXGetYDiscount, ProductDiscount


# ---------------------------------------------------------------------------
# Buy X Get Y rules
# ---------------------------------------------------------------------------

class BuyXGetYRepository(BaseRepository[BuyXGetYDiscount]):
    """Repository for Buy X Get Y rules."""

    model = BuyXGetYDiscount

    async def function_config(self, shop: str) -> dict:
        """Build the ``{"rules": [...]}`` payload the discount function reads.

        Rules are returned oldest first so that configuration order (and with
        it the "first candidate wins" tie-break) follows creation order. Rules
        created at the same instant are ordered by id.
        """
        stmt = (
            select(BuyXGetYDiscount)
            .where(BuyXGetYDiscount.shop == shop)
            .order_by(BuyXGetYDiscount.created_at, BuyXGetYDiscount.id)
        )
        result = await self.session.execute(stmt)
        return {"rules": [row.to_rule_record() for row in result.scalars().all()]}


# ---------------------------------------------------------------------------
# Single-item product discounts
# ---------------------------------------------------------------------------

class ProductDiscountRepository(BaseRepository[ProductDiscount]):
    """Repository for single-item product discounts."""

    model = ProductDiscount

    async def get_for_product(self, shop: str, product_id: str) -> dict | None:
        """First discount stored for a product in a shop, if any."""
        stmt = (
            select(ProductDiscount)
            .where(
                ProductDiscount.shop == shop,
                ProductDiscount.product_id == product_id,
            )
            .order_by(ProductDiscount.created_at, ProductDiscount.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.scalar_one_or_none()
        return row.to_dict() if row else None


# ---------------------------------------------------------------------------
# FastAPI dependency factories
# ---------------------------------------------------------------------------

def get_rule_repository(
    session: AsyncSession = Depends(get_session),
) -> BuyXGetYRepository:
    """FastAPI dependency for BuyXGetYRepository."""
    return BuyXGetYRepository(session)


def get_product_discount_repository(
    session: AsyncSession = Depends(get_session),
) -> ProductDiscountRepository:
    """FastAPI dependency for ProductDiscountRepository."""
    return ProductDiscountRepository(session)
