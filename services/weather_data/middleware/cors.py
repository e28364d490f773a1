"""
CORS headers for the weather endpoints.

Browsers call these endpoints directly, so every response (errors included)
carries the allow-origin/allow-headers pair, and any OPTIONS request is
answered here with an empty 200 before routing.
"""

from fastapi import FastAPI, Request, Response

from services.weather_data.config import Settings, settings as default_settings


def cors_headers(settings: Settings) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.cors_allow_origin,
        "Access-Control-Allow-Headers": settings.cors_allow_headers,
    }


def setup_cors(app: FastAPI) -> None:
    @app.middleware("http")
    async def cors_middleware(request: Request, call_next) -> Response:
        settings = getattr(request.app.state, "settings", default_settings)
        headers = cors_headers(settings)

        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
