"""Async repository pattern for the rule store.

Provides a generic base repository with CRUD operations and per-shop
isolation. Every query is scoped to one shop; a record belonging to another
shop behaves exactly like a missing one.
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.base import Base

# ---------------------------------------------------------------------------
# Type variable for model classes
# ---------------------------------------------------------------------------

ModelT = TypeVar("ModelT", bound=Base)


def _as_uuid(item_id: str | UUID) -> UUID | None:
    if isinstance(item_id, UUID):
        return item_id
    try:
        return UUID(str(item_id))
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Base repository
# ---------------------------------------------------------------------------

class BaseRepository(Generic[ModelT]):
    """Generic async repository with shop-scoped CRUD.

    Subclass and set `model` to your SQLAlchemy model::

        class RuleRepository(BaseRepository[BuyXGetYDiscount]):
            model = BuyXGetYDiscount
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    # -- List --

    async def list(self, shop: str) -> list[dict]:
        """All records for a shop, newest first."""
        stmt = (
            select(self.model)
            .where(self.model.shop == shop)
            .order_by(self.model.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row.to_dict() for row in result.scalars().all()]

    # -- Lookup by ID --

    async def _get_row(self, item_id: str | UUID, shop: str) -> ModelT | None:
        uuid_ = _as_uuid(item_id)
        if uuid_ is None:
            return None
        stmt = select(self.model).where(
            self.model.id == uuid_,
            self.model.shop == shop,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    # -- Create --

    async def create(self, shop: str, data: dict[str, Any]) -> dict:
        """Create a new record for a shop."""
        item = self.model(shop=shop, **data)
        self.session.add(item)
        await self.session.flush()
        return item.to_dict()

    # -- Delete --

    async def delete(self, item_id: str | UUID, shop: str) -> bool:
        """Delete a record. Returns True if deleted, False if not found."""
        item = await self._get_row(item_id, shop)
        if not item:
            return False

        await self.session.delete(item)
        await self.session.flush()
        return True

    async def delete_all(self, shop: str) -> int:
        """Delete every record of a shop. Returns the number removed."""
        stmt = delete(self.model).where(self.model.shop == shop)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
