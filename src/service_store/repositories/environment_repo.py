"""Environment repository."""

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from service_store.db.base import utcnow
from service_store.db.models.environment import EnvironmentRow
from service_store.models.enums import BUILDABLE_STATUSES, EnvironmentStatus
from service_store.repositories.base import BaseRepository


class EnvironmentRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, EnvironmentRow)

    async def get_by_key(self, name: str) -> EnvironmentRow | None:
        return await self.get_by_field("name", name)

    async def get_or_create(self, name: str, **defaults) -> tuple[EnvironmentRow, bool]:
        """Return the environment called ``name``, creating it from ``defaults`` if absent."""
        row = await self.get_by_key(name)
        if row is not None:
            return row, False
        return await self.create(name=name, **defaults), True

    async def claim_for_build(self, row: EnvironmentRow) -> bool:
        """Move ``row`` to in_progress if, in the store, it is still in a buildable state.

        The status check and the write are one statement, so of several
        transactions claiming the same environment at most one matches.
        Returns False when the stored status no longer allows a build.
        """
        stmt = (
            update(EnvironmentRow)
            .where(
                EnvironmentRow.id == row.id,
                EnvironmentRow.status.in_(BUILDABLE_STATUSES),
            )
            .values(status=EnvironmentStatus.IN_PROGRESS.value, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return False
        await self.session.refresh(row)
        return True
