"""
Snapshot cache backed by the append-only cache tables.

Freshness is evaluated at read time: a row is usable if its fetched_at is
within the window of the handler reading it. Nothing is ever expired or
deleted.

  current weather  ->  weather_cache.weather_data    30 minutes
  forecast         ->  forecast_cache.forecast_data  6 hours

Reads degrade to a miss on any store error; writes log and carry on. The
caller always gets its freshly fetched data back regardless of whether it
could be cached.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from services.weather_data.db.models import ForecastCacheEntry, WeatherCacheEntry

logger = logging.getLogger(__name__)

CURRENT_WEATHER_FRESHNESS = timedelta(minutes=30)
FORECAST_FRESHNESS = timedelta(hours=6)


class SnapshotCache:
    """
    Read-newest / append-only cache over one table.

    Usage:
        cache = SnapshotCache(factory, WeatherCacheEntry, "weather_data", timedelta(minutes=30))
        data = await cache.get("Santiago")
        if data is None:
            data = await fetch(...)
            await cache.put("Santiago", data)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker | None,
        table: type,
        payload_column: str,
        freshness: timedelta,
    ) -> None:
        """
        Args:
            session_factory: async_sessionmaker for the cache store. May be
                             None, in which case every read misses and every
                             write is skipped.
            table:           mapped class of the cache table.
            payload_column:  name of the JSON payload column on ``table``.
            freshness:       maximum age of a row still served from cache.
        """
        self._session_factory = session_factory
        self._table = table
        self._payload = getattr(table, payload_column)
        self._payload_column = payload_column
        self.freshness = freshness

    @property
    def table_name(self) -> str:
        return self._table.__tablename__

    async def get(self, location: str, now: datetime | None = None) -> dict[str, Any] | None:
        """Return the newest payload fetched within the freshness window, or None."""
        if self._session_factory is None:
            return None

        cutoff = (now or datetime.now(timezone.utc)) - self.freshness
        stmt = (
            select(self._payload)
            .where(self._table.location == location)
            .where(self._table.fetched_at >= cutoff)
            .order_by(self._table.fetched_at.desc())
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                payload = result.scalars().first()
        except Exception:
            logger.warning(
                "Cache read failed for %s location=%r", self.table_name, location, exc_info=True
            )
            return None

        if payload is None:
            logger.debug("Cache miss: %s location=%r", self.table_name, location)
        else:
            logger.debug("Cache hit: %s location=%r", self.table_name, location)
        return payload

    async def put(
        self,
        location: str,
        payload: dict[str, Any],
        fetched_at: datetime | None = None,
    ) -> None:
        """Append one row. Failures are logged, never raised."""
        if self._session_factory is None:
            return

        row = self._table(
            location=location,
            fetched_at=fetched_at or datetime.now(timezone.utc),
            **{self._payload_column: payload},
        )
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
            logger.debug("Cached snapshot: %s location=%r", self.table_name, location)
        except Exception:
            logger.error(
                "Error caching data in %s for location=%r", self.table_name, location, exc_info=True
            )


def current_weather_cache(session_factory: async_sessionmaker | None) -> SnapshotCache:
    return SnapshotCache(session_factory, WeatherCacheEntry, "weather_data", CURRENT_WEATHER_FRESHNESS)


def forecast_cache(session_factory: async_sessionmaker | None) -> SnapshotCache:
    return SnapshotCache(session_factory, ForecastCacheEntry, "forecast_data", FORECAST_FRESHNESS)
