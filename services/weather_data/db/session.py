"""
FastAPI dependency exposing the app's session factory.

The handlers hand the factory (not a session) to the caches so a cache read
and a cache write each get their own short-lived session.
"""

from fastapi import Request
from sqlalchemy.ext.asyncio import async_sessionmaker


def get_session_factory(request: Request) -> async_sessionmaker | None:
    """None when the store could not be configured at startup."""
    return getattr(request.app.state, "db_session_factory", None)
