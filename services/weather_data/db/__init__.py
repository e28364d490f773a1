"""
SQLAlchemy async database module for the weather cache store.
"""

from services.weather_data.db.engine import create_engine, standalone_engine
from services.weather_data.db.session import get_session_factory
from services.weather_data.db.models import Base, ForecastCacheEntry, WeatherCacheEntry

__all__ = [
    "create_engine",
    "standalone_engine",
    "get_session_factory",
    "Base",
    "ForecastCacheEntry",
    "WeatherCacheEntry",
]
