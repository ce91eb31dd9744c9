"""
Business Logic Services

Services encapsulate business logic and coordinate between repositories,
external services, and domain rules.

Service Pattern:
================
    Handler → Service → Repository → Database
                ↘ Asset store

Services should:
- Contain business logic and validation
- Raise typed exceptions from src.shared.core.exceptions
- Flush through repositories (the request commits)
- NOT handle HTTP concerns (cookies, status codes are for handlers)

Available Services:
===================
- TokenService: Token issuance, verification and refresh rotation
- AuthService: Registration, login/logout, refresh, password and profile updates
- ChannelService: Channel profiles and subscriptions

Usage:
======
    from src.shared.services import AuthService

    service = AuthService(session, asset_store)
    user, tokens = await service.login(password="secret123", email="a@x.com")
"""

from src.shared.services.token_service import TokenPair, TokenService
from src.shared.services.auth_service import AuthService
from src.shared.services.channel_service import ChannelService

__all__ = [
    "TokenPair",
    "TokenService",
    "AuthService",
    "ChannelService",
]
