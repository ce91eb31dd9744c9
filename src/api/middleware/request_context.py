"""
Request Context Middleware

Binds a request id, method and path to every log line emitted while a
request is handled, and echoes the id back in X-Request-ID.

A client-supplied X-Request-ID is reused; otherwise a new one is minted.
"""

import uuid

from fastapi import FastAPI, Request

from src.shared.core.logging import clear_log_context, log_context

REQUEST_ID_HEADER = "X-Request-ID"


def setup_request_context(app: FastAPI) -> None:
    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        clear_log_context()
        log_context(request_id=request_id, method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_log_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
