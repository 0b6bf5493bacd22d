"""Buy X Get Y discount service: FastAPI entry point.

Registers middleware, routers, and lifecycle hooks. Admin and function
routes live under /api/discounts/; the public storefront lookup under /api/.
"""

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import ShopMiddleware
from core.database import close_db, init_db
from core.observability import configure_logging, setup_otel

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

VERSION = "0.1.0"
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS", "http://localhost:3000,http://localhost:3001"
).split(",")
DEBUG = os.getenv("DEBUG", "true").lower() == "true"
AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "false").lower() == "true"

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown hooks."""
    configure_logging(level="DEBUG" if DEBUG else None)
    setup_otel()
    if AUTO_CREATE_TABLES:
        await init_db()

    logger.info("discount_service_started", version=VERSION)
    yield
    await close_db()
    logger.info("discount_service_stopped")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Buy X Get Y Discounts",
    description="Merchant-configured Buy X Get Y cart discounts for checkout",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shop isolation middleware
app.add_middleware(ShopMiddleware)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from verticals.discounts.router import public_router, router as discounts_router  # noqa: E402

app.include_router(discounts_router, prefix="/api/discounts", tags=["Discounts"])
app.include_router(public_router, prefix="/api", tags=["Storefront"])


# ---------------------------------------------------------------------------
# Health & root
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


@app.get("/")
async def root():
    return {
        "name": "bxgy-discounts",
        "version": VERSION,
        "docs": "/docs",
        "function": "/api/discounts/functions/cart-lines-discounts-generate-run",
    }
