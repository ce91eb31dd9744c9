"""
Core Module

Provides core functionality shared across the application:
- Structured logging
- Custom exceptions

Usage:
======
    from src.shared.core.logging import logger, get_logger
    from src.shared.core.exceptions import VideoTubeException, NotFoundError

    logger.info("Starting operation", user_id=user_id)
"""

from src.shared.core.logging import (
    logger,
    get_logger,
    log_context,
    clear_log_context,
)
from src.shared.core.exceptions import (
    VideoTubeException,
    ValidationError,
    UnauthorizedError,
    InvalidTokenError,
    NotFoundError,
    UserNotFoundError,
    ChannelNotFoundError,
    ConflictError,
    InternalError,
    AssetUploadError,
)

__all__ = [
    # Logging
    "logger",
    "get_logger",
    "log_context",
    "clear_log_context",
    # Exceptions
    "VideoTubeException",
    "ValidationError",
    "UnauthorizedError",
    "InvalidTokenError",
    "NotFoundError",
    "UserNotFoundError",
    "ChannelNotFoundError",
    "ConflictError",
    "InternalError",
    "AssetUploadError",
]
