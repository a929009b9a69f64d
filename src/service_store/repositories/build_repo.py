"""Build repository."""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from service_store.db.base import as_utc
from service_store.db.models.build import BuildRow
from service_store.repositories.base import BaseRepository


class BuildRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, BuildRow)

    async def get_by_key(self, uuid: str) -> BuildRow | None:
        return await self.get_by_field("uuid", uuid)

    async def latest_version(self, environment_id: int) -> datetime | None:
        """Creation time of the environment's most recent build, if any."""
        stmt = select(func.max(BuildRow.created_at)).where(BuildRow.environment_id == environment_id)
        result = await self.session.execute(stmt)
        return as_utc(result.scalar_one_or_none())
