"""FastAPI exception handlers producing the ErrorResponse envelope."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pkgmatch.errors.exceptions import PkgMatchError, RecordStoreError
from pkgmatch.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(PkgMatchError)
    async def pkgmatch_error_handler(request: Request, exc: PkgMatchError):
        trace_id = getattr(request.state, "trace_id", "unknown")
        if isinstance(exc, RecordStoreError):
            logger.error(
                "record_store_failure",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "trace_id": trace_id,
                    "reason": exc.message,
                },
            )
        error_response = ErrorResponse(
            schema_version="1.0",
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
