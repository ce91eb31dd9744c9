"""
Exception Handlers

Turn exceptions into the API's error envelope:

    {"error": {"code": "...", "message": "...", "details": {...}}}

Mapping:
========
- VideoTubeException   → its own status_code and to_dict()
- RequestValidationError (malformed body or form) → 400 VALIDATION_ERROR
- Anything else        → 500 INTERNAL_ERROR, logged with traceback, no details

Usage:
======
    from src.api.middleware.error_handler import setup_exception_handlers

    setup_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.shared.core.exceptions import InternalError, ValidationError, VideoTubeException
from src.shared.core.logging import logger


def _error_response(exc: VideoTubeException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_application_error(request: Request, exc: VideoTubeException) -> JSONResponse:
    """Client errors log at warning level, server-side failures at error."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "request_failed",
        error_code=exc.error_code,
        error_message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return _error_response(exc)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    logger.warning("request_validation_failed", errors=errors, path=request.url.path)
    return _error_response(
        ValidationError("Request validation failed", details={"errors": errors})
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return _error_response(InternalError("An unexpected error occurred"))


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers above on `app`."""
    app.add_exception_handler(VideoTubeException, handle_application_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
