"""
Weather endpoints.

  GET /current-weather?location=Santiago   30 minute cache, mock data without API key
  GET /forecast?location=Santiago          6 hour cache, 5 daily summaries, API key required

Any method except OPTIONS runs the handler (OPTIONS is answered by the CORS
middleware). Responses are always JSON:

  200  {"data": {...}, "source": "cache" | "api" | "mock", "message": "..."}
  500  {"error": "<message>", "details": "Failed to fetch weather data"}
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import async_sessionmaker

from services.weather_data.db.session import get_session_factory
from services.weather_data.weather.models import WeatherResult
from services.weather_data.weather.service import (
    DEFAULT_LOCATION,
    WeatherDataService,
    build_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["weather"])

# every RFC 9110 method except OPTIONS
_HANDLER_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "TRACE", "CONNECT"]
_ERROR_DETAILS = "Failed to fetch weather data"


def _error_response(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": str(exc) or "Unknown error",
            "details": _ERROR_DETAILS,
        },
    )


async def _run(
    request: Request,
    session_factory: async_sessionmaker | None,
    handler: Callable[[WeatherDataService], Awaitable[WeatherResult]],
    name: str,
) -> JSONResponse:
    try:
        service = build_service(request.app.state.settings, session_factory)
        result = await handler(service)
    except Exception as exc:
        logger.exception("Error in %s handler", name)
        return _error_response(exc)
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))


@router.api_route("/current-weather", methods=_HANDLER_METHODS)
async def current_weather(
    request: Request,
    location: str | None = Query(default=None),
    session_factory: async_sessionmaker | None = Depends(get_session_factory),
) -> JSONResponse:
    location = location or DEFAULT_LOCATION
    return await _run(
        request,
        session_factory,
        lambda service: service.get_current(location),
        "current-weather",
    )


@router.api_route("/forecast", methods=_HANDLER_METHODS)
async def forecast(
    request: Request,
    location: str | None = Query(default=None),
    session_factory: async_sessionmaker | None = Depends(get_session_factory),
) -> JSONResponse:
    location = location or DEFAULT_LOCATION
    return await _run(
        request,
        session_factory,
        lambda service: service.get_forecast(location),
        "forecast",
    )
