"""
SQLAlchemy DeclarativeBase models for the two cache tables.

Both tables are append-only: one row per upstream fetch, never updated.
There is no unique constraint on (location, fetched_at):
concurrent requests may insert near-duplicate rows and readers simply take
the newest one.
"""

import uuid as _uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSONB on PostgreSQL, plain JSON elsewhere (sqlite in local experiments)
_Payload = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class WeatherCacheEntry(Base):
    """Current-weather snapshots (30 minute freshness window)."""

    __tablename__ = "weather_cache"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(_uuid.uuid4()))
    location: Mapped[str] = mapped_column(String, index=True)
    weather_data: Mapped[dict] = mapped_column(_Payload)
    fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, default=_utcnow)


class ForecastCacheEntry(Base):
    """Aggregated 5-day forecasts (6 hour freshness window)."""

    __tablename__ = "forecast_cache"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(_uuid.uuid4()))
    location: Mapped[str] = mapped_column(String, index=True)
    forecast_data: Mapped[dict] = mapped_column(_Payload)
    fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, default=_utcnow)
