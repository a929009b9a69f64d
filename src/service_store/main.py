"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from service_store.config import settings
from service_store.db.engine import create_db_engine, create_session_factory, create_tables
from service_store.logging_config import configure_logging

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=settings.json_logs and not settings.local_mode)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Acquire the store handle at startup and release it at shutdown."""
    db_url = settings.effective_database_url
    engine = create_db_engine(db_url)

    # Auto-create tables for SQLite (local dev, no migrations)
    if "sqlite" in db_url:
        await create_tables(engine)
        logger.info("SQLite tables created (local mode)")

    app.state.db_engine = engine
    app.state.db_session_factory = create_session_factory(engine)

    logger.info("Service store started (db=%s)", "sqlite" if "sqlite" in db_url else "postgresql")
    yield

    await engine.dispose()
    logger.info("Service store shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Service Store",
        version="1.0.0",
        description="Environment and build lifecycle store.",
        lifespan=lifespan,
    )
    app.state.isolation_level = settings.isolation_level

    from service_store.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    from service_store.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from service_store.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
