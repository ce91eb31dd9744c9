"""
API Dependencies

FastAPI dependencies for injection into route handlers.

Dependencies:
=============
- Database: get_db(), DbSession, AppSettings
- Authentication: get_current_user(), CurrentUser, OptionalUser
- Services: get_*_service() functions
- Uploads: spool_upload(), discard_uploads()

Usage:
======
    from src.api.dependencies import CurrentUser

    @router.get("/current-user")
    async def current_user(user: CurrentUser):
        ...
"""

from src.api.dependencies.database import (
    get_db,
    get_app_settings,
    DbSession,
    AppSettings,
)
from src.api.dependencies.auth import (
    get_access_token,
    get_current_user,
    get_current_user_token,
    get_optional_user,
    CurrentUser,
    OptionalUser,
)

__all__ = [
    # Database
    "get_db",
    "get_app_settings",
    "DbSession",
    "AppSettings",
    # Authentication
    "get_access_token",
    "get_current_user",
    "get_current_user_token",
    "get_optional_user",
    "CurrentUser",
    "OptionalUser",
]
