"""Write path for services: the environment/build state machine.

Every operation here runs inside one :func:`unit_of_work`. Mutual
exclusion between concurrent saves for the same environment comes from the
store, not from any in-process lock: the move to ``in_progress`` is a
conditional UPDATE that only one transaction can match, and under
SERIALIZABLE a racing save that loses fails with a conflict or with a
store error surfacing as :class:`PersistenceError`. Nothing here retries.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from service_store.db.base import utcnow
from service_store.db.models.environment import EnvironmentRow
from service_store.db.unit_of_work import unit_of_work
from service_store.errors.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from service_store.models.enums import BUILDABLE_STATUSES, BuildStatus, EnvironmentStatus
from service_store.models.service import ServiceView
from service_store.repositories.base import EntityRepository
from service_store.repositories.build_repo import BuildRepository
from service_store.repositories.environment_repo import EnvironmentRepository

logger = logging.getLogger(__name__)

_VERSION_STEP = timedelta(microseconds=1)


def _require_name(view: ServiceView) -> None:
    if not view.name:
        raise ValidationError("service name was not specified")


def check_status_gate(env: EnvironmentRow) -> None:
    """Raise unless a new build may start from the environment's current status."""
    if env.status in BUILDABLE_STATUSES:
        return
    if env.status == EnvironmentStatus.IN_PROGRESS:
        raise ConflictError("could not create environment build: service in progress")
    raise InvalidStateError(
        "could not create environment build: unknown service state", status=env.status
    )


async def next_version(builds: BuildRepository, environment_id: int) -> datetime:
    """Timestamp for a new build, strictly after the environment's latest one."""
    now = utcnow()
    latest = await builds.latest_version(environment_id)
    if latest is not None and latest >= now:
        return latest + _VERSION_STEP
    return now


async def save_service(
    session_factory: async_sessionmaker[AsyncSession],
    view: ServiceView,
    isolation_level: str | None = "SERIALIZABLE",
) -> ServiceView:
    """Create the environment if needed and, when build info is given, start a build.

    Returns ``view`` with ``version`` and ``status`` taken from the new
    build. A request without build uuid and type only establishes the
    environment.
    """
    _require_name(view)

    async with unit_of_work(session_factory, isolation_level) as session:
        environments = EnvironmentRepository(session)
        env, created = await environments.get_or_create(
            view.name,
            datacenter_id=view.datacenter_id,
            type=view.type,
            options=view.options,
            credentials=view.credentials,
            status=EnvironmentStatus.INITIALIZING.value,
        )
        if created:
            logger.info("Created environment %s (id=%d)", env.name, env.id)

        if not view.has_build_info:
            return view

        check_status_gate(env)
        previous = env.status
        if not await environments.claim_for_build(env):
            # Another save moved the environment on since it was read
            raise ConflictError("could not create environment build: service in progress")

        builds = BuildRepository(session)
        build = await builds.create(
            uuid=view.uuid,
            environment_id=env.id,
            user_id=view.user_id,
            type=view.type,
            definition=view.definition,
            mapping=view.mapping,
            status=BuildStatus.IN_PROGRESS.value,
            created_at=await next_version(builds, env.id),
        )
        logger.info(
            "Started build %s for environment %s (%s -> %s)",
            build.uuid, env.name, previous, env.status,
        )

        view.version = build.created_at
        view.status = build.status

        if view.credentials is not None:
            await environments.update(env, credentials=view.credentials)

    return view


async def update_service(
    session_factory: async_sessionmaker[AsyncSession],
    view: ServiceView,
    isolation_level: str | None = None,
) -> ServiceView:
    """Overwrite the environment's options and credentials.

    Only the fields the request carries are written. An unknown name gets a
    fresh environment holding just those fields.
    """
    _require_name(view)

    async with unit_of_work(session_factory, isolation_level) as session:
        environments = EnvironmentRepository(session)
        env, created = await environments.get_or_create(
            view.name, status=EnvironmentStatus.INITIALIZING.value
        )
        if created:
            logger.info("Update created environment %s", env.name)

        changes = {}
        if view.options is not None:
            changes["options"] = view.options
        if view.credentials is not None:
            changes["credentials"] = view.credentials
        await environments.update(env, **changes)

    return view


async def delete_environment(repo: EntityRepository, name: str) -> None:
    env = await repo.get_by_key(name)
    if env is None:
        raise NotFoundError("Service", name)
    await repo.delete(env)


async def delete_service(
    session_factory: async_sessionmaker[AsyncSession],
    view: ServiceView,
    isolation_level: str | None = None,
) -> None:
    """Delete the named environment together with all of its builds."""
    _require_name(view)

    async with unit_of_work(session_factory, isolation_level) as session:
        await delete_environment(EnvironmentRepository(session), view.name)
    logger.info("Deleted environment %s", view.name)
