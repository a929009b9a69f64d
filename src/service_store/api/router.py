"""Master API router mounted at /api/v1."""

from fastapi import APIRouter

from service_store.api.routes import health, services

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health.router)
api_router.include_router(services.router)
