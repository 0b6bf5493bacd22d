"""SQLAlchemy models for the discount rule store.

Each model inherits from Base and uses ShopMixin for per-shop isolation.
to_dict() is the serialisation interface used by repositories and routers.
"""

from sqlalchemy import String, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from core.models.base import Base, ShopMixin


def _timestamp(value) -> str | None:
    return value.isoformat() if value else None


class BuyXGetYDiscount(ShopMixin, Base):
    """A merchant's Buy X Get Y rule: buy N of one variant, get % off another."""

    __tablename__ = "buy_x_get_y_discounts"

    buy_variant_id: Mapped[str] = mapped_column(String(255), nullable=False)
    get_variant_id: Mapped[str] = mapped_column(String(255), nullable=False)
    buy_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    # Stored for the admin UI; the engine always discounts whole lines
    get_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    discount_percentage: Mapped[float] = mapped_column(Float, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "shop": self.shop,
            "buy_variant_id": self.buy_variant_id,
            "get_variant_id": self.get_variant_id,
            "buy_quantity": self.buy_quantity,
            "get_quantity": self.get_quantity,
            "discount_percentage": self.discount_percentage,
            "created_at": _timestamp(self.created_at),
        }

    def to_rule_record(self) -> dict:
        """The camelCase record the discount function reads from its config."""
        return {
            "buyVariantId": self.buy_variant_id,
            "getVariantId": self.get_variant_id,
            "buyQuantity": self.buy_quantity,
            "discountPercentage": self.discount_percentage,
        }


class ProductDiscount(ShopMixin, Base):
    """A single-item percentage discount shown on the storefront."""

    __tablename__ = "product_discounts"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    percentage: Mapped[float] = mapped_column(Float, nullable=False)
    product_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "shop": self.shop,
            "title": self.title,
            "percentage": self.percentage,
            "product_id": self.product_id,
            "created_at": _timestamp(self.created_at),
        }
