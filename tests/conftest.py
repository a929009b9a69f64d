"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select, update

from service_store.db.engine import create_db_engine, create_session_factory, create_tables
from service_store.db.models import BuildRow, EnvironmentRow


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_db_engine("sqlite+aiosqlite:///")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(db_engine, session_factory):
    """Create a test application instance with in-memory DB."""
    from service_store.main import create_app

    _app = create_app()
    _app.state.db_engine = db_engine
    _app.state.db_session_factory = session_factory
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------

async def set_environment_status(session_factory, name: str, status: str) -> None:
    async with session_factory() as session:
        await session.execute(
            update(EnvironmentRow).where(EnvironmentRow.name == name).values(status=status)
        )
        await session.commit()


async def get_environment(session_factory, name: str) -> EnvironmentRow | None:
    async with session_factory() as session:
        result = await session.execute(select(EnvironmentRow).where(EnvironmentRow.name == name))
        return result.scalar_one_or_none()


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()


async def build_uuids(session_factory) -> list[str]:
    async with session_factory() as session:
        result = await session.execute(select(BuildRow.uuid).order_by(BuildRow.id))
        return list(result.scalars().all())
