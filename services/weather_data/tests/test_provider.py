"""
Tests for the OpenWeatherMap client and payload helpers.

All tests run without network access; httpx.AsyncClient is patched.
"""

from __future__ import annotations

import random

import pytest

from services.weather_data.tests.helpers.factories import make_http_response, make_owm_current, utc
from services.weather_data.weather.errors import WeatherAPIError
from services.weather_data.weather.provider import (
    CARDINAL_POINTS,
    MOCK_DESCRIPTIONS,
    OpenWeatherClient,
    degrees_to_cardinal,
    mock_current,
    ms_to_kmh,
    parse_current,
    round_one_decimal,
)

FETCHED_AT = utc(2026, 10, 16, 15)


class TestDegreesToCardinal:
    @pytest.mark.parametrize(
        "degrees,expected",
        [(0, "N"), (45, "NE"), (90, "E"), (135, "SE"), (180, "S"), (225, "SW"), (270, "W"), (315, "NW")],
    )
    def test_compass_points(self, degrees, expected):
        assert degrees_to_cardinal(degrees) == expected

    def test_nearest_bucket(self):
        assert degrees_to_cardinal(22.4) == "N"
        assert degrees_to_cardinal(68) == "E"
        assert degrees_to_cardinal(200) == "S"

    def test_half_way_rounds_up(self):
        assert degrees_to_cardinal(22.5) == "NE"

    def test_wraps_to_north(self):
        assert degrees_to_cardinal(350) == "N"
        assert degrees_to_cardinal(360) == "N"


class TestMsToKmh:
    def test_ten_ms(self):
        assert ms_to_kmh(10) == 36.0

    def test_rounded_to_one_decimal(self):
        assert ms_to_kmh(4.1) == 14.8

    def test_zero(self):
        assert ms_to_kmh(0) == 0.0


class TestRoundOneDecimal:
    def test_tie_rounds_up(self):
        assert round_one_decimal(15.25) == 15.3

    def test_negative_tie_rounds_away_from_zero(self):
        assert round_one_decimal(-15.25) == -15.3

    def test_non_tie(self):
        assert round_one_decimal(10.333) == 10.3
        assert round_one_decimal(14.76) == 14.8


class TestParseCurrent:
    def test_full_payload(self):
        snapshot = parse_current("Santiago", make_owm_current(), FETCHED_AT)
        assert snapshot.location == "Santiago"
        assert snapshot.temperature == 21.4
        assert snapshot.humidity == 55
        assert snapshot.wind_speed == 14.8
        assert snapshot.wind_direction == "SW"
        assert snapshot.description == "cielo claro"
        assert snapshot.fetched_at == FETCHED_AT

    def test_missing_fields_become_none(self):
        raw = make_owm_current(temp=None, wind_deg=None, description=None)
        snapshot = parse_current("Valparaíso", raw, FETCHED_AT)
        assert snapshot.temperature is None
        assert snapshot.wind_direction is None
        assert snapshot.description is None
        # the rest still parsed
        assert snapshot.humidity == 55
        assert snapshot.wind_speed == 14.8

    def test_empty_payload(self):
        snapshot = parse_current("Santiago", {}, FETCHED_AT)
        assert snapshot.model_dump(exclude={"location", "fetched_at"}) == {
            "temperature": None,
            "humidity": None,
            "wind_speed": None,
            "wind_direction": None,
            "description": None,
        }

    def test_serialises_fetched_at_as_iso(self):
        data = parse_current("Santiago", make_owm_current(), FETCHED_AT).model_dump(mode="json")
        assert data["fetched_at"].startswith("2026-10-16T15:00:00")


class TestMockCurrent:
    def test_values_within_synthetic_ranges(self):
        rng = random.Random(42)
        for _ in range(200):
            snapshot = mock_current("Santiago", FETCHED_AT, rng=rng)
            assert 18 <= snapshot.temperature <= 28
            assert 50 <= snapshot.humidity <= 80
            assert 5 <= snapshot.wind_speed <= 20
            assert snapshot.wind_direction in CARDINAL_POINTS
            assert snapshot.description in MOCK_DESCRIPTIONS

    def test_keeps_location_and_timestamp(self):
        snapshot = mock_current("Temuco", FETCHED_AT)
        assert snapshot.location == "Temuco"
        assert snapshot.fetched_at == FETCHED_AT


class TestOpenWeatherClient:
    @pytest.mark.asyncio
    async def test_fetch_current_query(self, mock_http):
        client = OpenWeatherClient(api_key="test-key-123")
        raw = await client.fetch_current("Santiago")

        assert raw["name"] == "Santiago"
        url = mock_http.get.call_args[0][0]
        params = mock_http.get.call_args[1]["params"]
        assert url == "https://api.openweathermap.org/data/2.5/weather"
        assert params == {"q": "Santiago,CL", "appid": "test-key-123", "units": "metric", "lang": "es"}

    @pytest.mark.asyncio
    async def test_fetch_forecast_endpoint(self, mock_http):
        mock_http.get.return_value = make_http_response(200, {"list": []})
        client = OpenWeatherClient(api_key="k", base_url="http://owm.test/data/2.5/")

        raw = await client.fetch_forecast("La Serena")

        assert raw == {"list": []}
        assert mock_http.get.call_args[0][0] == "http://owm.test/data/2.5/forecast"
        assert mock_http.get.call_args[1]["params"]["q"] == "La Serena,CL"

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self, mock_http):
        mock_http.get.return_value = make_http_response(404)
        client = OpenWeatherClient(api_key="k")

        with pytest.raises(WeatherAPIError) as exc_info:
            await client.fetch_current("Atlantis")

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "Weather API error: 404"

    @pytest.mark.asyncio
    async def test_network_error_propagates(self, mock_http):
        import httpx as _httpx

        mock_http.get.side_effect = _httpx.ConnectError("DNS failure")
        client = OpenWeatherClient(api_key="k")

        with pytest.raises(_httpx.ConnectError):
            await client.fetch_forecast("Santiago")
