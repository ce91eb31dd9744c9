"""
Authentication Dependencies

FastAPI dependencies for user authentication.

Dependency Hierarchy:
=====================
    get_access_token()        ← accessToken cookie, else Authorization: Bearer
           │
           ▼
    get_current_user_token()  ← Verify signature/expiry, return claims
           │
           ▼
    get_current_user()        ← Load the user the token names

    get_optional_user()       ← Same, but None when no token was sent

Type Aliases:
=============
    CurrentUser  - Authenticated User model
    OptionalUser - User or None (anonymous)

Usage:
======
    from src.api.dependencies.auth import CurrentUser

    @router.get("/current-user")
    async def current_user(user: CurrentUser):
        return UserResponse.model_validate(user)
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from ...shared.core.exceptions import InvalidTokenError, UnauthorizedError
from ...shared.models.user import User
from ...shared.repositories.user_repository import UserRepository
from ...shared.services.token_service import TokenService
from .database import get_db
from .services import get_token_service


# Bearer scheme is optional: browsers authenticate with the cookie instead
security = HTTPBearer(auto_error=False)


async def get_access_token(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)] = None,
) -> Optional[str]:
    """Read the access token from the session cookie or the Authorization header."""
    cookie_name = request.app.state.settings.ACCESS_TOKEN_COOKIE
    token = request.cookies.get(cookie_name)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


async def get_current_user_token(
    token: Annotated[Optional[str], Depends(get_access_token)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> dict:
    """
    Validate the access token.

    Returns:
        Decoded token claims

    Raises:
        UnauthorizedError: If the token is missing
        InvalidTokenError: If the token is invalid or expired
    """
    if not token:
        raise UnauthorizedError("Unauthorized request")
    return tokens.verify_access_token(token)


async def _load_user(claims: dict, db: AsyncSession) -> User:
    try:
        user_id = UUID(str(claims["id"]))
    except (KeyError, ValueError) as e:
        raise InvalidTokenError() from e

    user = await UserRepository(db).get(user_id)
    if not user:
        raise InvalidTokenError()
    return user


async def get_current_user(
    claims: Annotated[dict, Depends(get_current_user_token)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Get current authenticated user from token.

    Raises:
        InvalidTokenError: If the token names a user that no longer exists
    """
    return await _load_user(claims, db)


async def get_optional_user(
    token: Annotated[Optional[str], Depends(get_access_token)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Optional[User]:
    """
    Get the viewer if a token was sent, None for anonymous requests.

    A token that is present but invalid still fails.
    """
    if not token:
        return None
    return await _load_user(tokens.verify_access_token(token), db)


# ═══════════════════════════════════════════════════════════════════════════════
# TYPE ALIASES
# ═══════════════════════════════════════════════════════════════════════════════

CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
