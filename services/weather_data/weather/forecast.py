"""
Daily aggregation of the OpenWeatherMap 5-day / 3-hour forecast.

The /forecast endpoint returns up to 40 samples:
  {"list": [{"dt": 1760000400,
             "main": {"temp": 14.2},
             "weather": [{"description": "nubes dispersas"}],
             "wind": {"speed": 3.6}}, ...]}

Samples are bucketed by UTC calendar date. Whatever is left of today is
dropped, and at most five future days are kept in the order they first
appear.

The day's condition is the sample at the middle index of the day, not a
majority vote.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterable

from services.weather_data.weather.models import DayForecast
from services.weather_data.weather.provider import ms_to_kmh, round_one_decimal

MAX_FORECAST_DAYS = 5


@dataclass
class _DayBucket:
    temps: list[float] = field(default_factory=list)
    conditions: list[str] = field(default_factory=list)
    wind_speeds: list[float] = field(default_factory=list)


def _sample_date(sample: dict[str, Any]) -> date:
    return datetime.fromtimestamp(sample["dt"], tz=timezone.utc).date()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _summarise(day: date, bucket: _DayBucket) -> DayForecast:
    t_max = max(bucket.temps)
    t_min = min(bucket.temps)
    t_avg = round_one_decimal(sum(bucket.temps) / len(bucket.temps))
    # rounding can push the average a hair outside the observed range
    t_avg = min(max(t_avg, t_min), t_max)

    wind = (
        _round_half_up(sum(bucket.wind_speeds) / len(bucket.wind_speeds))
        if bucket.wind_speeds
        else 0
    )
    conditions = bucket.conditions[len(bucket.conditions) // 2] if bucket.conditions else ""

    return DayForecast(
        date=day.isoformat(),
        temperature_max=t_max,
        temperature_min=t_min,
        temperature_avg=t_avg,
        conditions=conditions,
        wind_speed=wind,
    )


def aggregate_forecast(samples: Iterable[dict[str, Any]], today: date) -> list[DayForecast]:
    """Collapse 3-hour samples into at most five daily summaries.

    Args:
        samples: the ``list`` array of an OpenWeatherMap /forecast response.
        today:   UTC date whose remaining samples are discarded.
    """
    buckets: dict[date, _DayBucket] = {}

    for sample in samples:
        day = _sample_date(sample)
        if day == today:
            continue

        bucket = buckets.setdefault(day, _DayBucket())

        temp = (sample.get("main") or {}).get("temp")
        if temp is not None:
            bucket.temps.append(temp)

        weather_list = sample.get("weather") or []
        if weather_list and weather_list[0].get("description") is not None:
            bucket.conditions.append(weather_list[0]["description"])

        speed = (sample.get("wind") or {}).get("speed")
        if speed is not None:
            bucket.wind_speeds.append(ms_to_kmh(speed))

    forecast: list[DayForecast] = []
    # dicts keep insertion order, so this is order of first appearance
    for day, bucket in list(buckets.items())[:MAX_FORECAST_DAYS]:
        if not bucket.temps:
            continue
        forecast.append(_summarise(day, bucket))
    return forecast
