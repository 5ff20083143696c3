"""
Exception handlers mapping application errors to HTTP responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ...core.exceptions import (
    GuildTrackerError,
    NotFoundError,
    RemoteTimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=exc.to_dict())


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=exc.to_dict())


async def remote_timeout_handler(request: Request, exc: RemoteTimeoutError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} timed out: {exc.message}")
    return JSONResponse(
        status_code=504,
        content={"error": exc.__class__.__name__, "message": "Remote source timed out"}
    )


async def application_error_handler(request: Request, exc: GuildTrackerError) -> JSONResponse:
    logger.error(
        f"{request.method} {request.url.path} failed: "
        f"{exc.__class__.__name__}: {exc.message} {exc.details}"
    )
    return JSONResponse(
        status_code=500,
        content={"error": "InternalError", "message": "Internal server error"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers; the most specific class wins."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(RemoteTimeoutError, remote_timeout_handler)
    app.add_exception_handler(GuildTrackerError, application_error_handler)
