"""
Logging Configuration

Structured logging setup using structlog.

Log Output:
===========
Development:
    2024-01-15 10:30:00 [info     ] user_registered                user_id=550e8400-... username=alice

Production (JSON):
    {"timestamp": "2024-01-15T10:30:00", "level": "info", "event": "user_registered", "user_id": "..."}

Usage:
======
    from src.shared.core.logging import get_logger, log_context

    logger = get_logger(__name__)
    logger.info("user_logged_in", user_id=str(user.id))

    # Bind request-scoped values to every subsequent log line
    log_context(request_id=request_id)
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.typing import Processor

from src.config.settings import Settings, settings as default_settings


def setup_logging(app_settings: Optional[Settings] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Development gets a colored console renderer; every other environment
    gets one JSON object per line.

    Args:
        app_settings: Settings to read LOG_LEVEL and APP_ENV from
    """
    app_settings = app_settings or default_settings
    level = getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if app_settings.is_development:
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + renderers,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """structlog logger named after the calling module (pass __name__)."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> None:
    """Bind key-value pairs to all log lines emitted from the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context() -> None:
    """Drop everything bound with log_context()."""
    structlog.contextvars.clear_contextvars()


setup_logging()

logger = get_logger("videotube")
