"""
Weather payload models.

Snapshots are what gets persisted in the cache tables and returned to the
client. They are frozen: one snapshot per fetch, never updated.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class WeatherSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: str
    temperature: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None  # km/h
    wind_direction: str | None = None
    description: str | None = None
    fetched_at: datetime


class DayForecast(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str  # YYYY-MM-DD (UTC)
    temperature_max: float
    temperature_min: float
    temperature_avg: float
    conditions: str
    wind_speed: int  # km/h


class ForecastSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: str
    forecast: list[DayForecast] = Field(default_factory=list, max_length=5)
    fetched_at: datetime


class WeatherResult(BaseModel):
    """Success envelope body: {data, source, message}."""

    data: dict[str, Any]
    source: Literal["cache", "api", "mock"]
    message: str
