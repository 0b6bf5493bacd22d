"""Shop isolation middleware using ContextVar.

Extracts the current shop from the X-Shop-Domain request header (or falls
back to the ``shop`` query parameter). The shop is stored in a ContextVar so
that routes and repositories can call get_current_shop() without explicit
parameter passing, and is bound into structlog's context for every log line
of the request.
"""

from contextvars import ContextVar

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

DEFAULT_SHOP = "default"
SHOP_HEADER = "X-Shop-Domain"

# ---------------------------------------------------------------------------
# Context variable: task-safe shop state
# ---------------------------------------------------------------------------

_current_shop: ContextVar[str] = ContextVar("current_shop", default=DEFAULT_SHOP)


def get_current_shop() -> str:
    """Return the shop domain for the current request.

    Safe to call from any async context within the request lifecycle::

        shop = get_current_shop()
        rules = await repo.list(shop)
    """
    return _current_shop.get()


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

class ShopMiddleware(BaseHTTPMiddleware):
    """Resolve the shop a request acts for.

    Priority:
    1. X-Shop-Domain header (set by the embedded admin app)
    2. ``shop`` query parameter
    3. Falls back to "default"
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        shop = request.headers.get(SHOP_HEADER) or request.query_params.get("shop")

        token = _current_shop.set(shop or DEFAULT_SHOP)
        structlog.contextvars.bind_contextvars(shop=shop or DEFAULT_SHOP)
        try:
            response = await call_next(request)
            return response
        finally:
            structlog.contextvars.unbind_contextvars("shop")
            _current_shop.reset(token)
