"""Decoding request payloads and resolving them to stored services."""

import logging

import pydantic
from sqlalchemy.ext.asyncio import AsyncSession

from service_store.db.models.build import BuildRow
from service_store.db.models.environment import EnvironmentRow
from service_store.errors.exceptions import DecodeError
from service_store.models.service import ServiceView
from service_store.services.query_builder import newest_first, row_to_view, service_select

logger = logging.getLogger(__name__)


def _error_details(exc: pydantic.ValidationError) -> list[dict]:
    return [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
        for err in exc.errors(include_url=False)
    ]


def decode_view(body: bytes | str, base: ServiceView | None = None) -> ServiceView:
    """Decode a JSON payload into a ServiceView.

    When ``base`` is given the payload is laid over it: keys present in the
    payload replace the base's values, absent keys keep them. A payload that
    is not a JSON object, or whose fields have the wrong types, raises
    :class:`DecodeError`; nothing is returned half-populated.
    """
    try:
        decoded = ServiceView.model_validate_json(body or b"")
    except pydantic.ValidationError as exc:
        logger.warning("Could not decode service payload: %s", exc)
        raise DecodeError("invalid service payload", _error_details(exc)) from exc

    if base is None:
        return decoded

    merged = base.model_copy(update={
        field: getattr(decoded, field) for field in decoded.model_fields_set
    })
    return merged


async def find_stored(session: AsyncSession, view: ServiceView) -> ServiceView | None:
    """Look up the stored service for ``view`` by build uuid, else by name (latest build)."""
    stmt = service_select()
    if view.uuid:
        stmt = stmt.where(BuildRow.uuid == view.uuid)
    elif view.name:
        stmt = stmt.where(EnvironmentRow.name == view.name)
    else:
        return None

    result = await session.execute(newest_first(stmt).limit(1))
    row = result.first()
    if row is None:
        return None

    stored = row_to_view(row)
    if not stored.has_id():
        return None
    return stored


async def load_from_input(session: AsyncSession, body: bytes | str) -> ServiceView | None:
    """Decode ``body`` and return the authoritative stored view it refers to.

    Returns None when the payload names no build uuid or environment name,
    or when nothing is stored under it. The decoded fields themselves are
    discarded on success.
    """
    return await find_stored(session, decode_view(body))
