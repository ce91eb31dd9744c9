"""
Authentication Handler

Handles registration and the session lifecycle: login, logout and
refresh-token rotation.

ARCHITECTURE:
=============
    Handler → Service → Repository → Model
          ↘ Utils  ↗

Handlers should ONLY:
- Parse HTTP requests
- Call service methods
- Format HTTP responses
- Set and clear session cookies

Business logic belongs in the SERVICE layer, not here. Service exceptions
propagate to the global exception handlers.

SESSION COOKIES:
================
Login and refresh set two http-only cookies (accessToken, refreshToken).
Logout clears both. The `secure` flag follows COOKIE_SECURE.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status

from src.api.dependencies.auth import CurrentUser
from src.api.dependencies.database import AppSettings
from src.api.dependencies.services import get_auth_service
from src.api.dependencies.uploads import discard_uploads, spool_upload
from src.config.settings import Settings
from src.shared.schemas.common import MessageResponse
from src.shared.schemas.user import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    TokenPairResponse,
    UserResponse,
)
from src.shared.services.auth_service import AuthService
from src.shared.services.token_service import TokenPair


router = APIRouter()


def set_session_cookies(response: Response, tokens: TokenPair, settings: Settings) -> None:
    """Attach both tokens as http-only session cookies."""
    for name, value in (
        (settings.ACCESS_TOKEN_COOKIE, tokens.access_token),
        (settings.REFRESH_TOKEN_COOKIE, tokens.refresh_token),
    ):
        response.set_cookie(
            key=name,
            value=value,
            httponly=True,
            secure=settings.COOKIE_SECURE,
        )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    for name in (settings.ACCESS_TOKEN_COOKIE, settings.REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            key=name,
            httponly=True,
            secure=settings.COOKIE_SECURE,
        )


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    settings: AppSettings,
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    full_name: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new user.

    Multipart form with the account fields, a required `avatar` file
    and an optional `cover_image` file.

    Returns:
        The sanitized user (no password hash, no refresh token)

    Raises:
        400: Missing field or avatar
        409: Username or email already registered
        500: Avatar upload failed
    """
    avatar_asset = await spool_upload(avatar, settings.UPLOAD_TEMP_DIR)
    cover_asset = await spool_upload(cover_image, settings.UPLOAD_TEMP_DIR)
    try:
        user = await auth_service.register(
            username=username,
            email=email,
            full_name=full_name,
            password=password,
            avatar=avatar_asset,
            cover_image=cover_asset,
        )
    finally:
        discard_uploads(avatar_asset, cover_asset)

    return UserResponse.model_validate(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    settings: AppSettings,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate by username or email and start a session.

    Returns:
        AuthResponse with the user and both tokens (also set as cookies)

    Raises:
        400: Neither username nor email given
        404: No such user
        401: Wrong password
    """
    user, tokens = await auth_service.login(
        password=credentials.password,
        username=credentials.username,
        email=credentials.email,
    )
    set_session_cookies(response, tokens, settings)

    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    user: CurrentUser,
    response: Response,
    settings: AppSettings,
    auth_service: AuthService = Depends(get_auth_service),
):
    """End the session: forget the refresh token and clear both cookies."""
    await auth_service.logout(user.id)
    clear_session_cookies(response, settings)
    return MessageResponse(message="User logged out")


@router.post("/refresh-token", response_model=TokenPairResponse)
async def refresh_token(
    request: Request,
    response: Response,
    settings: AppSettings,
    body: Optional[RefreshTokenRequest] = None,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Rotate the refresh token.

    The token is read from the refreshToken cookie, else from the
    `refresh_token` body field.

    Raises:
        401: Token missing, invalid, expired or already used
    """
    presented = request.cookies.get(settings.REFRESH_TOKEN_COOKIE)
    if not presented and body is not None:
        presented = body.refresh_token

    tokens = await auth_service.refresh(presented)
    set_session_cookies(response, tokens, settings)

    return TokenPairResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )
