"""Scoped transaction used by every write on the service lifecycle path."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from service_store.errors.exceptions import PersistenceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
    isolation_level: str | None = "SERIALIZABLE",
) -> AsyncIterator[AsyncSession]:
    """Open a session, begin a transaction and close it on every exit path.

    The body commits only if it finishes without raising. Any exception
    rolls the transaction back and is re-raised unchanged; a failing
    rollback is logged and does not replace the original error. Store
    errors (from the body or from the commit) surface as
    :class:`PersistenceError` with the driver message verbatim.

    Usage::

        async with unit_of_work(factory) as session:
            env = await EnvironmentRepository(session).get_by_name("web")
    """
    async with session_factory() as session:
        try:
            if isolation_level:
                await session.connection(execution_options={"isolation_level": isolation_level})
            yield session
        except Exception as exc:
            logger.warning("Rolling back unit of work: %s", exc)
            try:
                await session.rollback()
            except SQLAlchemyError:
                logger.exception("Rollback failed")
            if isinstance(exc, SQLAlchemyError):
                raise PersistenceError(str(exc)) from exc
            raise

        try:
            await session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Commit failed: %s", exc)
            try:
                await session.rollback()
            except SQLAlchemyError:
                logger.exception("Rollback failed")
            raise PersistenceError(str(exc)) from exc
