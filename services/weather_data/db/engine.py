"""
AsyncEngine factory and standalone engine context manager.

NullPool because each request does at most one read and one write against
the cache tables; holding a pool of idle connections buys nothing.
"""

from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from services.weather_data.config import settings


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """Create the async engine, forcing the asyncpg driver."""
    url = (database_url or settings.database_url).replace("postgresql://", "postgresql+asyncpg://", 1)
    return create_async_engine(
        url,
        poolclass=NullPool,
        echo=settings.debug and settings.environment == "development",
    )


@asynccontextmanager
async def standalone_engine(database_url: str | None = None):
    """
    For scripts (init_cache_tables.py) that run outside FastAPI.
    Handles engine lifecycle to prevent connection leaks.
    """
    engine = create_engine(database_url)
    try:
        yield engine
    finally:
        await engine.dispose()

