"""
Route Registration

Mounts every router on the application.

Route Hierarchy:
================
    /health, /ready, /live          → Probes (no prefix)
    {API_PREFIX}/users/register     → auth_handler (register, login, logout, refresh-token)
    {API_PREFIX}/users/current-user → user_handler (own account)
    {API_PREFIX}/users/c/{username} → channel_handler (profiles, subscriptions)

Usage:
======
    from src.api.routes import register_routes

    register_routes(app, settings.API_PREFIX)
"""

from fastapi import FastAPI

from src.api.handlers import (
    auth_handler,
    user_handler,
    channel_handler,
    health_handler,
)
from src.shared.schemas.common import ErrorResponse

# Documented on every /users route; bodies come from the exception handlers
ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse}
    for status_code in (400, 401, 404, 409, 500)
}


def register_routes(app: FastAPI, api_prefix: str) -> None:
    """
    Register all API routes.

    Args:
        app: FastAPI application instance
        api_prefix: Versioned prefix, e.g. "/api/v1"
    """
    users_prefix = f"{api_prefix}/users"

    app.include_router(health_handler.router, tags=["Health"])

    for router, tag in (
        (auth_handler.router, "Authentication"),
        (user_handler.router, "Users"),
        (channel_handler.router, "Channels"),
    ):
        app.include_router(
            router,
            prefix=users_prefix,
            tags=[tag],
            responses=ERROR_RESPONSES,
        )
