"""
FastAPI dependency injection providers.

Provides database sessions and the application settings for use with
FastAPI's Depends() mechanism.

CHANGELOG:
- 2026-10-19: Add settings provider
- 2026-10-19: Initial creation
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from webmeter.config import Settings
from webmeter.db.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session.

    Yields:
        AsyncSession: An async SQLAlchemy session.
    """
    async for session in get_async_session():
        yield session


def get_settings(request: Request) -> Settings:
    """Return the Settings validated at application startup."""
    return request.app.state.settings


# Type aliases for injecting dependencies in route handlers:
#   async def my_route(db: DbSession, settings: AppSettings): ...
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
