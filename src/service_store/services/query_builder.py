"""Search over environment/build pairs, newest build first."""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from service_store.db.base import as_utc
from service_store.db.models.build import BuildRow
from service_store.db.models.environment import EnvironmentRow
from service_store.models.service import ServiceView


def service_select() -> Select:
    """SELECT joining every environment with each of its builds."""
    return (
        select(
            BuildRow.id.label("row_id"),
            BuildRow.uuid,
            BuildRow.user_id,
            BuildRow.status,
            BuildRow.definition,
            BuildRow.mapping,
            BuildRow.created_at.label("version"),
            EnvironmentRow.name,
            EnvironmentRow.datacenter_id,
            EnvironmentRow.type,
            EnvironmentRow.options,
            EnvironmentRow.credentials,
        )
        .select_from(EnvironmentRow)
        .join(BuildRow, BuildRow.environment_id == EnvironmentRow.id)
    )


def newest_first(stmt: Select) -> Select:
    return stmt.order_by(BuildRow.created_at.desc(), BuildRow.id.desc())


def apply_filters(stmt: Select, view: ServiceView) -> Select:
    """Narrow ``stmt`` by the first matching criterion of ``view``.

    Precedence: ``ids``, then ``names``, then ``name`` (optionally pinned to
    one build by ``uuid``), then ``uuid`` alone, then ``datacenter_id``.
    With none of them set the statement is returned unfiltered.
    """
    if view.ids:
        return stmt.where(BuildRow.uuid.in_(view.ids))
    if view.names:
        return stmt.where(EnvironmentRow.name.in_(view.names))
    if view.name:
        stmt = stmt.where(EnvironmentRow.name == view.name)
        if view.uuid:
            stmt = stmt.where(BuildRow.uuid == view.uuid)
        return stmt
    if view.uuid:
        return stmt.where(BuildRow.uuid == view.uuid)
    if view.datacenter_id:
        return stmt.where(EnvironmentRow.datacenter_id == view.datacenter_id)
    return stmt


def row_to_view(row) -> ServiceView:
    fields = dict(row._mapping)
    row_id = fields.pop("row_id")
    fields["version"] = as_utc(fields["version"])
    return ServiceView.from_stored(row_id, **fields)


async def find_services(session: AsyncSession, view: ServiceView) -> list[ServiceView]:
    """Return the services matching ``view``; an empty list is a valid answer."""
    stmt = newest_first(apply_filters(service_select(), view))
    result = await session.execute(stmt)
    return [row_to_view(row) for row in result.all()]
