"""
Weather data FastAPI service: current conditions and 5-day forecasts.

Entrypoint: uvicorn services.weather_data.main:app --host 0.0.0.0 --port 8000
"""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from sqlalchemy.ext.asyncio import async_sessionmaker
from starlette.responses import JSONResponse

from services.weather_data.config import settings
from services.weather_data.middleware.cors import cors_headers, setup_cors
from services.weather_data.middleware.sentry import setup_sentry
from services.weather_data.routers import health, weather

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    setup_sentry()

    app.state.settings = settings
    app.state.db_session_factory = None

    from services.weather_data.db.engine import create_engine

    engine = None
    if settings.database_url:
        try:
            engine = create_engine(settings.database_url)
            app.state.db_session_factory = async_sessionmaker(engine, expire_on_commit=False)
        except Exception as e:
            # Caching degrades gracefully: every lookup misses, writes are skipped
            logger.warning("Cache store engine failed to init: %s", e)
    else:
        logger.info("DATABASE_URL is empty; running without a cache store")

    if not settings.openweather_api_key:
        logger.warning("OPENWEATHER_API_KEY not set; current weather serves mock data, forecast fails")

    yield

    if engine:
        await engine.dispose()


app = FastAPI(
    title="Weather Data API",
    version=settings.app_version,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(weather.router)

# CORS answers OPTIONS before routing and stamps headers on everything else
setup_cors(app)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# -- Exception Handlers --

@app.exception_handler(404)
async def not_found_handler(request: Request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": "Resource not found.", "details": f"No handler for {request.url.path}"},
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred.", "details": "Failed to fetch weather data"},
        headers=cors_headers(getattr(request.app.state, "settings", settings)),
    )
