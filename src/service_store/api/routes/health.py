"""Health check endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "service-store", "version": "1.0.0"}


@router.get("/health/ready")
async def readiness(request: Request):
    """Readiness probe: checks the store connection."""
    try:
        async with request.app.state.db_session_factory() as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "checks": {"database": f"error: {exc}"}},
        )
    return {"status": "ready", "checks": {"database": "ok"}}
