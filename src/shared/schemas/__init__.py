"""
Pydantic Schemas

Request and response models for the API.

Schema Categories:
==================
- common: Base schemas, messages, error responses, health
- user: User and authentication schemas
- channel: Channel profile and subscription schemas

Usage:
======
    from src.shared.schemas.user import UserResponse, AuthResponse
    from src.shared.schemas.channel import ChannelProfile
"""

from src.shared.schemas.common import (
    BaseSchema,
    MessageResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
)
from src.shared.schemas.user import (
    UserResponse,
    LoginRequest,
    AuthResponse,
    TokenPairResponse,
    RefreshTokenRequest,
    ChangePasswordRequest,
    UpdateAccountRequest,
)
from src.shared.schemas.channel import (
    ChannelProfile,
    SubscriptionResponse,
)

__all__ = [
    # Common
    "BaseSchema",
    "MessageResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    # User
    "UserResponse",
    "LoginRequest",
    "AuthResponse",
    "TokenPairResponse",
    "RefreshTokenRequest",
    "ChangePasswordRequest",
    "UpdateAccountRequest",
    # Channel
    "ChannelProfile",
    "SubscriptionResponse",
]
