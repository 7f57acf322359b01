"""
Global exception handlers.

- AgoraError -> its HTTP status with the error envelope
- Exception (catch-all) -> 500 without internal details
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from agora.errors import AgoraError, StorageFailure
from agora.logging import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(AgoraError)
    async def agora_error_handler(request: Request, exc: AgoraError):
        log = logger.error if isinstance(exc, StorageFailure) else logger.info
        log(
            "request_rejected",
            code=exc.code,
            path=request.url.path,
            status=exc.http_status,
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_error",
            path=request.url.path,
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )
