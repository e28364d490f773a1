"""Health check endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict:
    return {
        "status": "healthy",
        "version": request.app.state.settings.app_version,
        "store": getattr(request.app.state, "db_session_factory", None) is not None,
    }
