"""
Service Dependencies

FastAPI dependencies for service injection.

Services are created per-request, which is fine because:
- Services are stateless (only hold the db session and collaborators)
- Each request gets its own db session
- The asset store and settings are app-wide, read from app.state

Usage:
======
    from src.api.dependencies.services import get_auth_service

    @router.post("/login")
    async def login(
        credentials: LoginRequest,
        auth_service: AuthService = Depends(get_auth_service),
    ):
        ...
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies.database import get_db
from src.shared.services.auth_service import AuthService
from src.shared.services.channel_service import ChannelService
from src.shared.services.token_service import TokenService


async def get_token_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> TokenService:
    """
    Dependency to get TokenService instance.
    """
    return TokenService(db, request.app.state.settings)


async def get_auth_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthService:
    """
    Dependency to get AuthService instance.

    Creates a new service instance per request with the request's db session.
    """
    return AuthService(db, request.app.state.asset_store, request.app.state.settings)


async def get_channel_service(
    db: AsyncSession = Depends(get_db),
) -> ChannelService:
    """
    Dependency to get ChannelService instance.
    """
    return ChannelService(db)
