"""Base repository and the capability interface shared by entity repositories."""

from typing import Any, Protocol, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from service_store.db.base import Base

T = TypeVar("T", bound=Base)


class EntityRepository(Protocol[T]):
    """What the lifecycle code needs from a persisted record type.

    Each entity type gets its own repository satisfying this; the
    lifecycle functions depend on the protocol, not on a shared base.
    """

    async def get_by_key(self, key: str) -> T | None: ...

    async def create(self, **kwargs: Any) -> T: ...

    async def update(self, row: T, **kwargs: Any) -> T: ...

    async def delete(self, row: T) -> None: ...


class BaseRepository:
    """Generic async repository for SQLAlchemy models."""

    def __init__(self, session: AsyncSession, model_class: type[T]):
        self.session = session
        self.model_class = model_class

    async def get_by_field(self, field: str, value: Any) -> T | None:
        """Get a single record by a unique column."""
        stmt = select(self.model_class).where(
            getattr(self.model_class, field) == value
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> T:
        """Create and persist a new record."""
        row = self.model_class(**kwargs)
        self.session.add(row)
        await self.session.flush()
        return row

    async def update(self, row: T, **kwargs: Any) -> T:
        """Update an existing record."""
        for key, value in kwargs.items():
            setattr(row, key, value)
        await self.session.flush()
        return row

    async def delete(self, row: T) -> None:
        """Delete a record; relationship cascades are applied by the ORM."""
        await self.session.delete(row)
        await self.session.flush()
