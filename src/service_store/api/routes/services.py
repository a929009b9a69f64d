"""Service request handlers: create, set, get, find and delete.

Request bodies are passed raw to the view mapper so that every route
decodes payloads the same way. Failures raise ServiceStoreError subclasses,
which the registered exception handlers render as error replies.
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from service_store.dependencies import get_db, get_isolation_level, get_session_factory
from service_store.errors.exceptions import NotFoundError
from service_store.models.service import ServiceView
from service_store.services.lifecycle import delete_service, save_service, update_service
from service_store.services.query_builder import find_services
from service_store.services.view_mapper import decode_view, find_stored, load_from_input

router = APIRouter(tags=["Services"])


async def _load_or_fail(db: AsyncSession, body: bytes) -> ServiceView:
    stored = await load_from_input(db, body)
    if stored is None:
        raise NotFoundError("Service")
    return stored


@router.post("/services", status_code=201)
async def create_service(
    request: Request,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    isolation_level: str | None = Depends(get_isolation_level),
) -> dict:
    view = decode_view(await request.body())
    saved = await save_service(session_factory, view, isolation_level)
    return saved.to_wire()


@router.put("/services")
async def set_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> dict:
    body = await request.body()
    stored = await _load_or_fail(db, body)
    # Release the read transaction before the write opens its own
    await db.close()

    view = decode_view(body, base=stored)
    updated = await update_service(session_factory, view)
    return updated.to_wire()


@router.post("/services/get")
async def get_service(request: Request, db: AsyncSession = Depends(get_db)) -> dict:
    stored = await _load_or_fail(db, await request.body())
    return stored.to_wire()


@router.post("/services/find")
async def find_services_by_body(request: Request, db: AsyncSession = Depends(get_db)) -> list[dict]:
    view = decode_view(await request.body())
    return [found.to_wire() for found in await find_services(db, view)]


@router.get("/services")
async def list_services(
    name: str = "",
    build_id: str = Query("", alias="id"),
    datacenter_id: int = 0,
    ids: list[str] | None = Query(None),
    names: list[str] | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    view = ServiceView(name=name, uuid=build_id, datacenter_id=datacenter_id, ids=ids, names=names)
    return [found.to_wire() for found in await find_services(db, view)]


@router.get("/services/{name}")
async def get_service_by_name(name: str, db: AsyncSession = Depends(get_db)) -> dict:
    stored = await find_stored(db, ServiceView(name=name))
    if stored is None:
        raise NotFoundError("Service", name)
    return stored.to_wire()


@router.post("/services/delete")
async def delete_service_by_body(
    request: Request,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> dict:
    stored = await _load_or_fail(db, await request.body())
    await db.close()

    await delete_service(session_factory, stored)
    return {"deleted": stored.name}
