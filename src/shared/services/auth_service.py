"""
Authentication Service

Business logic for the account and session lifecycle: registration, login,
logout, token refresh, password change and profile updates.

Service Pattern:
================
Services encapsulate business logic and coordinate between:
- Repositories (data access)
- The token service (issuing and rotating token pairs)
- The asset store (avatar and cover image uploads)

Session States:
===============
    Anonymous ──login──▶ Authenticated ──access token expiry──▶ Anonymous
                              │  ▲
                       refresh│  │rotated pair
                              ▼  │
                         RefreshPending

Usage:
======
    from src.shared.services.auth_service import AuthService

    service = AuthService(session, asset_store)
    user, tokens = await service.login(password="secret123", username="alice")
"""

from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import Settings, get_settings
from src.shared.adapters.storage_adapter import AssetStore, UploadedAsset
from src.shared.core.exceptions import (
    AssetUploadError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    UserNotFoundError,
    ValidationError,
)
from src.shared.core.logging import get_logger
from src.shared.models.user import User
from src.shared.repositories.user_repository import UserRepository
from src.shared.services.token_service import TokenPair, TokenService

logger = get_logger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class AuthService:
    """
    Service for authentication-related business logic.

    Handles:
    - User registration with avatar/cover upload
    - Login by username or email
    - Logout and refresh-token rotation
    - Password change and profile updates

    Attributes:
        session: Database session
        repo: UserRepository instance
        tokens: TokenService instance
        asset_store: Where avatars and cover images are uploaded
    """

    def __init__(
        self,
        session: AsyncSession,
        asset_store: AssetStore,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize AuthService.

        Args:
            session: Async database session
            asset_store: Asset store adapter
            settings: Application settings (defaults to the cached instance)
        """
        self.session = session
        self.repo = UserRepository(session)
        self.tokens = TokenService(session, settings or get_settings())
        self.asset_store = asset_store

    # ═══════════════════════════════════════════════════════════════════════════
    # REGISTRATION
    # ═══════════════════════════════════════════════════════════════════════════

    async def register(
        self,
        *,
        username: Optional[str],
        email: Optional[str],
        full_name: Optional[str],
        password: Optional[str],
        avatar: Optional[UploadedAsset],
        cover_image: Optional[UploadedAsset] = None,
    ) -> User:
        """
        Register a new user.

        Args:
            username: Requested handle (stored trimmed and lowercase)
            email: Email address (stored trimmed and lowercase)
            full_name: Display name
            password: Plain text password (hashed before storage)
            avatar: Uploaded avatar file (required)
            cover_image: Uploaded cover image (optional)

        Returns:
            The persisted user

        Raises:
            ValidationError: A required field or the avatar is missing
            ConflictError: Username or email already registered
            AssetUploadError: The avatar upload returned no URL
            InternalError: The user could not be read back after insert
        """
        if any(_is_blank(field) for field in (username, email, full_name, password)):
            raise ValidationError("All fields are required")

        username = username.strip().lower()
        email = email.strip().lower()
        full_name = full_name.strip()

        if await self.repo.username_or_email_exists(username, email):
            raise ConflictError("User with same username or email already exists")

        if avatar is None:
            raise ValidationError("Avatar file is required")

        avatar_result = await self.asset_store.upload(avatar)
        if not avatar_result:
            raise AssetUploadError("Avatar")

        cover_result = await self.asset_store.upload(cover_image) if cover_image else None

        try:
            user = await self.repo.create_user(
                username=username,
                email=email,
                full_name=full_name,
                password=password,
                avatar_url=avatar_result.url,
                cover_image_url=cover_result.url if cover_result else "",
            )
        except IntegrityError as e:
            # Lost a race with a concurrent registration
            raise ConflictError("User with same username or email already exists") from e

        created = await self.repo.get(user.id)
        if not created:
            raise InternalError("Something went wrong while registering the user")

        logger.info("user_registered", user_id=str(created.id), username=created.username)
        return created

    # ═══════════════════════════════════════════════════════════════════════════
    # SESSION LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════════════

    async def login(
        self,
        password: Optional[str],
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Tuple[User, TokenPair]:
        """
        Authenticate by username or email and issue a token pair.

        Returns:
            Tuple of (user, token_pair)

        Raises:
            ValidationError: Neither username nor email given
            NotFoundError: No matching user
            UnauthorizedError: Wrong password
        """
        if _is_blank(username) and _is_blank(email):
            raise ValidationError("Username or email is required")

        user = await self.repo.get_by_username_or_email(
            username=username.strip().lower() if username else None,
            email=email.strip().lower() if email else None,
        )
        if not user:
            raise NotFoundError("User", message="User does not exist")

        if not password or not user.verify_password(password):
            raise UnauthorizedError("Invalid user credentials")

        tokens = await self.tokens.issue_token_pair(user)
        logger.info("user_logged_in", user_id=str(user.id))
        return user, tokens

    async def logout(self, user_id: UUID) -> None:
        """Forget the stored refresh token. Safe to call repeatedly."""
        await self.repo.clear_refresh_token(user_id)
        logger.info("user_logged_out", user_id=str(user_id))

    async def refresh(self, presented_refresh_token: Optional[str]) -> TokenPair:
        """
        Rotate a refresh token into a new pair.

        Raises:
            UnauthorizedError: Token missing, invalid, expired or already used
        """
        if _is_blank(presented_refresh_token):
            raise UnauthorizedError("Unauthorized request")
        return await self.tokens.rotate_refresh_token(presented_refresh_token)

    # ═══════════════════════════════════════════════════════════════════════════
    # ACCOUNT
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_current_user(self, user_id: UUID) -> User:
        """Load the authenticated user."""
        user = await self.repo.get(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))
        return user

    async def change_password(
        self,
        user_id: UUID,
        old_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """
        Replace the password after checking the current one.

        Only the password_hash column is written.

        Raises:
            UnauthorizedError: old_password does not verify
            ValidationError: new_password is blank
        """
        user = await self.get_current_user(user_id)

        if not old_password or not user.verify_password(old_password):
            raise UnauthorizedError("Invalid old password")

        if _is_blank(new_password):
            raise ValidationError("New password is required")

        user.set_password(new_password)
        await self.session.flush()
        logger.info("password_changed", user_id=str(user.id))

    async def update_account_details(
        self,
        user_id: UUID,
        full_name: Optional[str],
        email: Optional[str],
    ) -> User:
        """
        Update display name and email.

        Raises:
            ValidationError: Either field missing
            ConflictError: Email belongs to another account
        """
        if _is_blank(full_name) or _is_blank(email):
            raise ValidationError("All fields are required")

        email = email.strip().lower()
        if await self.repo.email_taken_by_other(email, user_id):
            raise ConflictError("Email is already in use")

        try:
            user = await self.repo.update(user_id, full_name=full_name.strip(), email=email)
        except IntegrityError as e:
            # Another account claimed the email after the check above
            raise ConflictError("Email is already in use") from e
        if not user:
            raise UserNotFoundError(str(user_id))
        return user

    async def update_avatar(self, user_id: UUID, avatar: Optional[UploadedAsset]) -> User:
        """Upload a new avatar and point the user at it."""
        url = await self._upload_required(avatar, "Avatar")
        return await self._set_asset_url(user_id, avatar_url=url)

    async def update_cover_image(self, user_id: UUID, cover_image: Optional[UploadedAsset]) -> User:
        """Upload a new cover image and point the user at it."""
        url = await self._upload_required(cover_image, "Cover image")
        return await self._set_asset_url(user_id, cover_image_url=url)

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════════════════════════

    async def _upload_required(self, asset: Optional[UploadedAsset], asset_name: str) -> str:
        if asset is None:
            raise ValidationError(f"{asset_name} file is missing")
        result = await self.asset_store.upload(asset)
        if not result:
            raise AssetUploadError(asset_name)
        return result.url

    async def _set_asset_url(self, user_id: UUID, **fields: str) -> User:
        user = await self.repo.update(user_id, **fields)
        if not user:
            raise UserNotFoundError(str(user_id))
        logger.info("profile_asset_updated", user_id=str(user_id), fields=list(fields))
        return user
