"""
API Handlers

Route handlers for the VideoTube API.

Handlers follow the pattern:
- Parse HTTP requests
- Call service methods
- Format HTTP responses
- Set session cookies where the session changes

All business logic is delegated to the service layer.
"""

from src.api.handlers import (
    auth_handler,
    user_handler,
    channel_handler,
    health_handler,
)

__all__ = [
    "auth_handler",
    "user_handler",
    "channel_handler",
    "health_handler",
]
