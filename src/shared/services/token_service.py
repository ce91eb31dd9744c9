"""
Token Service

Issues, verifies and rotates access/refresh token pairs.

Token Shapes:
=============
    access  → {id, email, username, full_name}   signed with ACCESS_TOKEN_SECRET
    refresh → {id}                               signed with REFRESH_TOKEN_SECRET

The user row stores exactly one refresh token. Issuing a pair overwrites
it, so any older refresh token becomes unusable and presenting one is
reported as "expired or used".

Rotation Flow:
==============
    presented token
        │ verify signature + expiry (refresh secret)  ── fail → "Invalid refresh token"
        ▼
    load user by decoded id                          ── none → "Invalid refresh token"
        │
        ▼
    compare with stored token (constant time)        ── differs → "Refresh token is expired or used"
        │
        ▼
    UPDATE users SET refresh_token = :new
    WHERE id = :id AND refresh_token = :presented    ── 0 rows → "Refresh token is expired or used"
        │
        ▼
    COMMIT                                           ── fails → InternalError (500)
        │
        ▼
    new TokenPair

Usage:
======
    service = TokenService(session)
    pair = await service.issue_token_pair(user)
    claims = service.verify_access_token(pair.access_token)
    new_pair = await service.rotate_refresh_token(pair.refresh_token)
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import Settings, get_settings
from src.shared.core.exceptions import InternalError, InvalidTokenError, UnauthorizedError
from src.shared.core.logging import get_logger
from src.shared.models.user import User
from src.shared.repositories.user_repository import UserRepository
from src.shared.utils.security import SecurityUtils

logger = get_logger(__name__)

INVALID_REFRESH_TOKEN = "Invalid refresh token"
REFRESH_TOKEN_REUSED = "Refresh token is expired or used"


@dataclass(frozen=True)
class TokenPair:
    """Access token plus the refresh token that was just persisted."""

    access_token: str
    refresh_token: str


class TokenService:
    """
    Service for token issuance and validation.

    Attributes:
        session: Database session
        repo: UserRepository instance
        settings: Secrets, expiries and algorithm
    """

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None) -> None:
        """
        Initialize TokenService.

        Args:
            session: Async database session
            settings: Application settings (defaults to the cached instance)
        """
        self.session = session
        self.repo = UserRepository(session)
        self.settings = settings or get_settings()

    # ═══════════════════════════════════════════════════════════════════════════
    # ISSUANCE
    # ═══════════════════════════════════════════════════════════════════════════

    def issue_access_token(self, user: User) -> str:
        """Sign a short-lived access token carrying the user's identity claims."""
        return SecurityUtils.create_token(
            data={
                "id": str(user.id),
                "email": user.email,
                "username": user.username,
                "full_name": user.full_name,
            },
            secret_key=self.settings.ACCESS_TOKEN_SECRET,
            expires_delta=timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            algorithm=self.settings.JWT_ALGORITHM,
        )

    def issue_refresh_token(self, user: User) -> str:
        """Sign a long-lived refresh token carrying only the user id."""
        return SecurityUtils.create_token(
            data={"id": str(user.id)},
            secret_key=self.settings.REFRESH_TOKEN_SECRET,
            expires_delta=timedelta(days=self.settings.REFRESH_TOKEN_EXPIRE_DAYS),
            algorithm=self.settings.JWT_ALGORITHM,
        )

    async def issue_token_pair(
        self,
        user: User,
        expected_refresh_token: Optional[str] = None,
    ) -> TokenPair:
        """
        Generate a token pair and persist its refresh token on the user.

        Commits the session before returning, so a caller never receives a
        refresh token the database does not hold.

        Args:
            user: Token owner
            expected_refresh_token: When rotating, the token being replaced;
                the write only happens if it is still the stored one

        Returns:
            TokenPair (only after the refresh token was stored)

        Raises:
            UnauthorizedError: Rotation lost to a concurrent rotation
            InternalError: The refresh token could not be stored
        """
        access_token = self.issue_access_token(user)
        refresh_token = self.issue_refresh_token(user)

        try:
            stored = await self.repo.store_refresh_token(
                user.id,
                refresh_token,
                expected=expected_refresh_token,
            )
            if stored:
                # The pair leaves the service only once the token is durable
                await self.session.commit()
        except SQLAlchemyError as e:
            logger.error("refresh_token_store_failed", user_id=str(user.id), error=str(e))
            raise InternalError(
                "Something went wrong while generating refresh and access token"
            ) from e

        if not stored:
            if expected_refresh_token is not None:
                logger.warning("refresh_token_rotation_conflict", user_id=str(user.id))
                raise UnauthorizedError(REFRESH_TOKEN_REUSED)
            raise InternalError("Something went wrong while generating refresh and access token")

        # Reload columns the bulk UPDATE changed behind the identity map
        await self.session.refresh(user)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    # ═══════════════════════════════════════════════════════════════════════════
    # VERIFICATION
    # ═══════════════════════════════════════════════════════════════════════════

    def verify_access_token(self, token: str) -> dict:
        """
        Decode an access token.

        Returns:
            Claims dict with id, email, username, full_name

        Raises:
            InvalidTokenError: Bad signature, expired, or missing id claim
        """
        try:
            payload = SecurityUtils.decode_token(
                token,
                self.settings.ACCESS_TOKEN_SECRET,
                algorithm=self.settings.JWT_ALGORITHM,
            )
        except ValueError as e:
            raise InvalidTokenError() from e

        if not payload.get("id"):
            raise InvalidTokenError()
        return payload

    async def rotate_refresh_token(self, presented_token: str) -> TokenPair:
        """
        Exchange a valid refresh token for a new pair.

        Raises:
            UnauthorizedError: "Invalid refresh token" for bad signatures,
                expiry or unknown users; "Refresh token is expired or used"
                when the token is not the one currently stored
        """
        try:
            payload = SecurityUtils.decode_token(
                presented_token,
                self.settings.REFRESH_TOKEN_SECRET,
                algorithm=self.settings.JWT_ALGORITHM,
            )
            user_id = UUID(str(payload.get("id")))
        except ValueError as e:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN) from e

        user = await self.repo.get(user_id)
        if not user:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        if not SecurityUtils.tokens_match(presented_token, user.refresh_token):
            logger.warning("refresh_token_reuse_detected", user_id=str(user.id))
            raise UnauthorizedError(REFRESH_TOKEN_REUSED)

        pair = await self.issue_token_pair(user, expected_refresh_token=presented_token)
        logger.info("refresh_token_rotated", user_id=str(user.id))
        return pair
