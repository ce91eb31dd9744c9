"""
User Handler

Endpoints for the authenticated user's own account: read it, change the
password, and update profile details and images.

All endpoints require authentication.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from src.api.dependencies.auth import CurrentUser
from src.api.dependencies.database import AppSettings
from src.api.dependencies.services import get_auth_service
from src.api.dependencies.uploads import discard_uploads, spool_upload
from src.shared.schemas.common import MessageResponse
from src.shared.schemas.user import (
    ChangePasswordRequest,
    UpdateAccountRequest,
    UserResponse,
)
from src.shared.services.auth_service import AuthService


router = APIRouter()


@router.get("/current-user", response_model=UserResponse)
async def current_user(user: CurrentUser):
    """Return the authenticated user."""
    return UserResponse.model_validate(user)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    user: CurrentUser,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Change the password.

    Raises:
        401: Old password is wrong
        400: New password missing
    """
    await auth_service.change_password(user.id, payload.old_password, payload.new_password)
    return MessageResponse(message="Password changed successfully")


@router.patch("/update-account", response_model=UserResponse)
async def update_account(
    payload: UpdateAccountRequest,
    user: CurrentUser,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Update full name and email.

    Raises:
        400: A field is missing
        409: Email belongs to another account
    """
    updated = await auth_service.update_account_details(user.id, payload.full_name, payload.email)
    return UserResponse.model_validate(updated)


@router.patch("/avatar", response_model=UserResponse)
async def update_avatar(
    user: CurrentUser,
    settings: AppSettings,
    avatar: Optional[UploadFile] = File(None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Replace the avatar image."""
    asset = await spool_upload(avatar, settings.UPLOAD_TEMP_DIR)
    try:
        updated = await auth_service.update_avatar(user.id, asset)
    finally:
        discard_uploads(asset)
    return UserResponse.model_validate(updated)


@router.patch("/cover-image", response_model=UserResponse)
async def update_cover_image(
    user: CurrentUser,
    settings: AppSettings,
    cover_image: Optional[UploadFile] = File(None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Replace the cover image."""
    asset = await spool_upload(cover_image, settings.UPLOAD_TEMP_DIR)
    try:
        updated = await auth_service.update_cover_image(user.id, asset)
    finally:
        discard_uploads(asset)
    return UserResponse.model_validate(updated)
