"""Buy X Get Y discounts vertical.

- engine/: pure discount function (no I/O, never raises)
- SQLAlchemy rule store with shop isolation
- Async repositories with FastAPI dependency injection
- Admin, function-run and public storefront routers
- Dataclass engine configuration
"""
