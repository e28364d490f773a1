"""
WeatherDataService: the cache-or-fetch decision procedure for both handlers.

Per request:
  1. cache lookup (newest row inside the freshness window)
  2. hit  -> return it, upstream is never called
  3. miss -> fetch upstream (or synthesize, current weather only)
          -> normalise / aggregate
          -> append to cache (best effort)
          -> return

At most one cache read, one upstream call and one cache write, in that order.
No locking: two concurrent misses for the same location both fetch and both
insert.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import async_sessionmaker

from services.weather_data.config import Settings
from services.weather_data.weather.cache import (
    SnapshotCache,
    current_weather_cache,
    forecast_cache,
)
from services.weather_data.weather.errors import MissingAPIKeyError
from services.weather_data.weather.forecast import aggregate_forecast
from services.weather_data.weather.models import ForecastSnapshot, WeatherResult
from services.weather_data.weather.provider import (
    OpenWeatherClient,
    mock_current,
    parse_current,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Santiago"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeatherDataService:
    """
    Usage:
        service = WeatherDataService(current_cache, forecast_cache, OpenWeatherClient(key))
        result = await service.get_forecast("Santiago")
        result.model_dump()  # {"data": ..., "source": "api", "message": ...}
    """

    def __init__(
        self,
        current_cache: SnapshotCache,
        forecast_cache: SnapshotCache,
        client: OpenWeatherClient | None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Args:
            client: None when OPENWEATHER_API_KEY is not configured.
            clock:  returns the current UTC time; used for cache cutoffs,
                    fetched_at and the "today" of forecast aggregation.
        """
        self._current_cache = current_cache
        self._forecast_cache = forecast_cache
        self._client = client
        self._clock = clock

    async def get_current(self, location: str) -> WeatherResult:
        logger.info("Fetching current weather for: %s", location)
        now = self._clock()

        cached = await self._current_cache.get(location, now=now)
        if cached is not None:
            logger.info("Returning cached current weather for %s", location)
            return WeatherResult(
                data=cached,
                source="cache",
                message="Data from cache (less than 30 minutes old)",
            )

        if self._client is None:
            logger.info("OPENWEATHER_API_KEY not set; returning mock weather for %s", location)
            snapshot = mock_current(location, fetched_at=now)
            source = "mock"
            message = "Mock data (OPENWEATHER_API_KEY not configured)"
        else:
            raw = await self._client.fetch_current(location)
            snapshot = parse_current(location, raw, fetched_at=now)
            source = "api"
            message = "Fresh weather data from OpenWeatherMap"

        data = snapshot.model_dump(mode="json")
        await self._current_cache.put(location, data, fetched_at=now)

        logger.info("Returning fresh current weather for %s (source=%s)", location, source)
        return WeatherResult(data=data, source=source, message=message)

    async def get_forecast(self, location: str) -> WeatherResult:
        logger.info("Fetching 5-day forecast for: %s", location)
        now = self._clock()

        cached = await self._forecast_cache.get(location, now=now)
        if cached is not None:
            logger.info("Returning cached 5-day forecast for %s", location)
            return WeatherResult(
                data=cached,
                source="cache",
                message="Data from cache (less than 6 hours old)",
            )

        if self._client is None:
            raise MissingAPIKeyError()

        raw = await self._client.fetch_forecast(location)
        snapshot = ForecastSnapshot(
            location=location,
            forecast=aggregate_forecast(raw.get("list") or [], today=now.date()),
            fetched_at=now,
        )

        data = snapshot.model_dump(mode="json")
        await self._forecast_cache.put(location, data, fetched_at=now)

        logger.info("Returning fresh 5-day forecast for %s", location)
        return WeatherResult(
            data=data,
            source="api",
            message="Fresh 5-day forecast from OpenWeatherMap",
        )


def build_service(
    settings: Settings,
    session_factory: async_sessionmaker | None,
) -> WeatherDataService:
    """Wire collaborators from configuration read for this invocation."""
    client = None
    if settings.openweather_api_key:
        client = OpenWeatherClient(
            api_key=settings.openweather_api_key,
            base_url=settings.openweather_base_url,
        )
    return WeatherDataService(
        current_cache=current_weather_cache(session_factory),
        forecast_cache=forecast_cache(session_factory),
        client=client,
    )
