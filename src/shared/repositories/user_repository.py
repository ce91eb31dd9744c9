"""
User Repository

Database operations specific to the User model.
Extends BaseRepository with user-specific query methods.

Common Operations:
==================
- get_by_username()          → Find user by (normalized) username
- get_by_username_or_email() → Login lookup by either identifier
- username_or_email_exists() → Uniqueness check on registration
- create_user()              → Insert with a hashed password
- store_refresh_token()      → Atomic (optionally conditional) token write
- clear_refresh_token()      → Atomic token clear on logout

Refresh-token writes never read the row first: each is a single
`UPDATE users SET refresh_token = ... WHERE id = ...` so concurrent
rotations for the same user cannot lose an update.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.repositories.base import BaseRepository
from src.shared.models.user import User


class UserRepository(BaseRepository[User]):
    """
    Repository for User database operations.

    Usernames and emails are stored lowercase; callers normalize before
    querying.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize UserRepository.

        Args:
            session: Async database session
        """
        super().__init__(User, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # LOOKUP METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_by_username(self, username: str) -> Optional[User]:
        """
        Get user by username.

        SQL Generated:
            SELECT * FROM users WHERE username = 'alice'
        """
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_username_or_email(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[User]:
        """
        Get the user matching either identifier.

        Args:
            username: Normalized username, or None
            email: Normalized email, or None

        Returns:
            First matching user, or None (also when both identifiers are None)

        SQL Generated:
            SELECT * FROM users WHERE username = 'alice' OR email = 'a@x.com' LIMIT 1
        """
        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email)
        if not conditions:
            return None

        result = await self.session.execute(select(User).where(or_(*conditions)).limit(1))
        return result.scalar_one_or_none()

    async def username_or_email_exists(self, username: str, email: str) -> bool:
        """
        Check whether the username or the email is already registered.

        Example:
            if await repo.username_or_email_exists("alice", "a@x.com"):
                raise ConflictError("User with same username or email already exists")
        """
        user = await self.get_by_username_or_email(username=username, email=email)
        return user is not None

    async def email_taken_by_other(self, email: str, user_id: UUID) -> bool:
        """Check whether another account already uses `email`."""
        result = await self.session.execute(
            select(User.id).where(User.email == email, User.id != user_id).limit(1)
        )
        return result.first() is not None

    # ═══════════════════════════════════════════════════════════════════════════
    # WRITE METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create_user(
        self,
        *,
        username: str,
        email: str,
        full_name: str,
        password: str,
        avatar_url: str,
        cover_image_url: str = "",
    ) -> User:
        """
        Insert a new user, hashing the plaintext password on the way in.

        Raises:
            sqlalchemy.exc.IntegrityError: On a username/email unique violation
        """
        user = User(
            username=username,
            email=email,
            full_name=full_name,
            avatar_url=avatar_url,
            cover_image_url=cover_image_url,
            watch_history=[],
        )
        user.set_password(password)
        return await self.add(user)

    async def store_refresh_token(
        self,
        user_id: UUID,
        token: str,
        expected: Optional[str] = None,
    ) -> bool:
        """
        Atomically set the stored refresh token.

        Args:
            user_id: Owner of the token
            token: New refresh token
            expected: If given, only write when the stored token still equals
                this value (compare-and-swap for rotation)

        Returns:
            True if exactly one row was updated

        SQL Generated:
            UPDATE users SET refresh_token = :token, updated_at = :now
            WHERE id = :user_id [AND refresh_token = :expected]
        """
        stmt = update(User).where(User.id == user_id)
        if expected is not None:
            stmt = stmt.where(User.refresh_token == expected)
        result = await self.session.execute(stmt.values(refresh_token=token))
        return result.rowcount == 1

    async def clear_refresh_token(self, user_id: UUID) -> None:
        """Atomically null out the stored refresh token."""
        await self.session.execute(
            update(User).where(User.id == user_id).values(refresh_token=None)
        )
