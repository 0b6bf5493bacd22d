"""Base model and mixins for all SQLAlchemy models.

Provides:
- Base: Declarative base class for all models
- ShopMixin: Adds shop, UUID primary key, and timestamps

Every model inherits from Base and includes ShopMixin so that each merchant
only ever sees its own records. The shop column is indexed for efficient
per-shop queries.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for all discount service models."""
    pass


class ShopMixin:
    """Mixin providing per-shop isolation and standard audit columns.

    Adds:
    - id: UUID primary key (auto-generated)
    - shop: Indexed shop domain (e.g. "acme.myshopify.com")
    - created_at: Timestamp set on insert
    - updated_at: Timestamp updated on every change
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    shop: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
