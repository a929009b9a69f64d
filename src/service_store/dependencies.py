"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


async def get_db(request: Request) -> AsyncGenerator:
    """Yield a read session from the app's session factory."""
    session_factory = request.app.state.db_session_factory
    async with session_factory() as session:
        yield session


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Return the session factory; write operations open their own unit of work."""
    return request.app.state.db_session_factory


def get_isolation_level(request: Request) -> str | None:
    """Isolation level for lifecycle writes, configured at app creation."""
    return getattr(request.app.state, "isolation_level", None)
