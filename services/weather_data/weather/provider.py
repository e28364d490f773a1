"""
OpenWeatherMap client plus the pure helpers that normalise its payloads.

Endpoints used (free tier):
  /weather   current conditions
  /forecast  5 days at 3-hour resolution (40 samples)

Queries are always qualified with the CL country code, metric units and
Spanish descriptions.

OpenWeatherMap /weather returns:
  {
    "weather": [{"id": 800, "main": "Clear", "description": "cielo claro"}],
    "main":    {"temp": 21.4, "humidity": 55, ...},
    "wind":    {"speed": 4.1, "deg": 220},
    ...
  }
"""

from __future__ import annotations

import logging
import math
import random
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import httpx

from services.weather_data.weather.errors import WeatherAPIError
from services.weather_data.weather.models import WeatherSnapshot

logger = logging.getLogger(__name__)

_COUNTRY_CODE = "CL"
_UNITS = "metric"
_LANG = "es"

CARDINAL_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

# Synthetic ranges used when no API key is configured
MOCK_TEMPERATURE_RANGE = (18.0, 28.0)
MOCK_HUMIDITY_RANGE = (50, 80)
MOCK_WIND_SPEED_RANGE = (5.0, 20.0)
MOCK_DESCRIPTIONS = (
    "cielo claro",
    "nubes dispersas",
    "parcialmente nublado",
    "lluvia ligera",
)


def round_one_decimal(value: float) -> float:
    """Round to one decimal, exact halves away from zero (15.25 -> 15.3, -15.25 -> -15.3)."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def ms_to_kmh(speed: float) -> float:
    """Convert m/s to km/h, rounded to one decimal."""
    return round_one_decimal(speed * 3.6)


def degrees_to_cardinal(degrees: float) -> str:
    """Map a wind direction in degrees to the nearest of 8 compass points.

    0 -> N, 45 -> NE, 90 -> E, 22.5 -> NE (half-way rounds up), 360 -> N
    """
    index = math.floor(degrees / 45 + 0.5) % len(CARDINAL_POINTS)
    return CARDINAL_POINTS[index]


def parse_current(location: str, payload: dict[str, Any], fetched_at: datetime) -> WeatherSnapshot:
    """Normalise an OpenWeatherMap /weather response. Missing fields become None."""
    main = payload.get("main") or {}
    wind = payload.get("wind") or {}
    weather_list = payload.get("weather") or []
    primary = weather_list[0] if weather_list else {}

    speed = wind.get("speed")
    deg = wind.get("deg")

    return WeatherSnapshot(
        location=location,
        temperature=main.get("temp"),
        humidity=main.get("humidity"),
        wind_speed=ms_to_kmh(speed) if speed is not None else None,
        wind_direction=degrees_to_cardinal(deg) if deg is not None else None,
        description=primary.get("description"),
        fetched_at=fetched_at,
    )


def mock_current(
    location: str,
    fetched_at: datetime,
    rng: random.Random | None = None,
) -> WeatherSnapshot:
    """Synthetic snapshot so the endpoint stays usable without an API key."""
    rng = rng or random.Random()
    return WeatherSnapshot(
        location=location,
        temperature=round(rng.uniform(*MOCK_TEMPERATURE_RANGE), 1),
        humidity=rng.randint(*MOCK_HUMIDITY_RANGE),
        wind_speed=round(rng.uniform(*MOCK_WIND_SPEED_RANGE), 1),
        wind_direction=rng.choice(CARDINAL_POINTS),
        description=rng.choice(MOCK_DESCRIPTIONS),
        fetched_at=fetched_at,
    )


class OpenWeatherClient:
    """
    Thin async client for the two OpenWeatherMap endpoints we use.

    Usage:
        client = OpenWeatherClient(api_key="...")
        raw = await client.fetch_forecast("Santiago")
    """

    def __init__(self, api_key: str, base_url: str = "https://api.openweathermap.org/data/2.5") -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def fetch_current(self, location: str) -> dict[str, Any]:
        return await self._get("weather", location)

    async def fetch_forecast(self, location: str) -> dict[str, Any]:
        return await self._get("forecast", location)

    async def _get(self, endpoint: str, location: str) -> dict[str, Any]:
        async with httpx.AsyncClient() as client:
            resp = await client.get(
                f"{self._base_url}/{endpoint}",
                params={
                    "q": f"{location},{_COUNTRY_CODE}",
                    "appid": self._api_key,
                    "units": _UNITS,
                    "lang": _LANG,
                },
            )

        if not resp.is_success:
            logger.warning(
                "OpenWeatherMap /%s returned %d for location=%r: %s",
                endpoint,
                resp.status_code,
                location,
                resp.text[:200],
            )
            raise WeatherAPIError(resp.status_code)

        return resp.json()
