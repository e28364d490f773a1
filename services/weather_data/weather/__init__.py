"""
Weather package.

Current conditions and aggregated 5-day forecasts from OpenWeatherMap, with
append-only PostgreSQL snapshot caching (30 minutes / 6 hours).
"""

from services.weather_data.weather.cache import SnapshotCache
from services.weather_data.weather.provider import OpenWeatherClient
from services.weather_data.weather.service import WeatherDataService, build_service

__all__ = ["SnapshotCache", "OpenWeatherClient", "WeatherDataService", "build_service"]
