"""
User Schemas

Request/response models for user and authentication endpoints.

UserResponse is the sanitized user: it has no password hash and no
refresh token field, so neither can leak into a response body.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.shared.schemas.common import BaseSchema


class UserResponse(BaseSchema):
    """Public view of a user."""

    id: UUID
    username: str
    email: str
    full_name: str
    avatar_url: str
    cover_image_url: str = ""
    watch_history: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class LoginRequest(BaseModel):
    """Schema for user login. One of username or email is required."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    """Schema for login response."""

    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenPairResponse(BaseModel):
    """Schema for refresh response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    """Body fallback for clients that cannot send the refresh cookie."""

    refresh_token: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    """Schema for password change."""

    old_password: Optional[str] = None
    new_password: Optional[str] = None


class UpdateAccountRequest(BaseModel):
    """Schema for profile detail updates. Both fields are required by the service."""

    full_name: Optional[str] = None
    email: Optional[str] = None
