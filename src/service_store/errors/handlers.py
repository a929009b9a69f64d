"""FastAPI exception handlers turning core errors into failure replies."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from service_store.errors.exceptions import ServiceStoreError
from service_store.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(ServiceStoreError)
    async def service_store_error_handler(request: Request, exc: ServiceStoreError):
        trace_id = getattr(request.state, "trace_id", "unknown")
        if exc.status_code >= 500:
            logger.error(
                "request_failed code=%s path=%s: %s", exc.code, request.url.path, exc.message,
            )
        else:
            logger.info("request_rejected code=%s path=%s: %s", exc.code, request.url.path, exc.message)

        error_response = ErrorResponse(
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
                trace_id=trace_id,
                timestamp=datetime.now(timezone.utc),
            ),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response.model_dump(mode="json", exclude_none=True),
        )
