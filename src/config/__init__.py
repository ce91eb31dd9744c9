"""
Configuration Module

Settings are read from environment variables and `.env`.

Usage:
======
    from src.config import get_settings

    settings = get_settings()
    access_ttl = settings.ACCESS_TOKEN_EXPIRE_MINUTES
"""

from src.config.settings import Settings, get_settings, settings

__all__ = [
    "Settings",
    "get_settings",
    "settings",
]
