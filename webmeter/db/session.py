"""
Async database engine and session factory.

Uses SQLAlchemy 2.x async engine (asyncpg driver for PostgreSQL). Provides
module-level engine and session factory singletons, plus an async
generator for FastAPI dependency injection.

The engine is created by the application lifespan from the settings the
app was built with; sessions cannot be opened before that.

CHANGELOG:
- 2026-10-19: Engine URL comes from the app settings via the lifespan
- 2026-10-19: Initial creation
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Module-level singletons, initialized via init_engine().
async_engine: AsyncEngine | None = None
async_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Args:
        database_url: SQLAlchemy async connection URL.

    Returns:
        AsyncEngine: Configured async engine. Connections are checked
        before use so a restarted database does not fail the first query.
    """
    return create_async_engine(database_url, echo=False, pool_pre_ping=True)


def init_engine(database_url: str) -> None:
    """Initialize the module-level async engine and session factory.

    Call this at application startup (FastAPI lifespan). Safe to call
    multiple times; subsequent calls are no-ops until dispose_engine().
    """
    global async_engine, async_session_factory  # noqa: PLW0603
    if async_engine is None:
        async_engine = create_engine(database_url)
        async_session_factory = async_sessionmaker(
            async_engine, class_=AsyncSession, expire_on_commit=False
        )


async def dispose_engine() -> None:
    """Dispose the module-level engine, closing pooled connections."""
    global async_engine, async_session_factory  # noqa: PLW0603
    if async_engine is not None:
        await async_engine.dispose()
    async_engine = None
    async_session_factory = None


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session for FastAPI dependency injection.

    The session is automatically closed after the request completes.

    Yields:
        AsyncSession: An async SQLAlchemy session.

    Raises:
        RuntimeError: If init_engine() has not been called.
    """
    if async_session_factory is None:
        raise RuntimeError("Database engine not initialized; call init_engine() at startup")
    async with async_session_factory() as session:
        yield session
