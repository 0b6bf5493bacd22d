"""Shared fixtures: in-memory rule store and an HTTP client bound to the app."""
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from api.main import app
from core.database import get_session
from core.models.base import Base
import verticals.discounts.models.db_models  # noqa: F401


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def client(session_factory):
    async def _session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def make_document(lines, rules=None, classes=("PRODUCT",), config=None):
    """Checkout function input document for (line_id, variant_id, quantity) tuples."""
    if config is None:
        config = {"rules": rules or []}
    return {
        "cart": {
            "lines": [
                {"id": line_id, "quantity": qty, "merchandise": {"id": variant}}
                for line_id, variant, qty in lines
            ]
        },
        "discount": {"discountClasses": list(classes)},
        "fetchResult": {"jsonBody": config},
    }


def rule(buy, get, qty, pct):
    return {
        "buyVariantId": buy,
        "getVariantId": get,
        "buyQuantity": qty,
        "discountPercentage": pct,
    }
