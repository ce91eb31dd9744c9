"""
User Entity Model

Represents a registered account. Every user is also a channel that other
users can subscribe to.

Model Hierarchy:
================
    User
       ├── subscriptions (Subscription[])  - edges where this user is the subscriber
       └── subscribers (Subscription[])    - edges where this user is the channel

SAMPLE USER RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 550e8400-e29b-41d4-a716-446655440000                      │
│ username         │ "alice"                                                   │
│ email            │ "a@x.com"                                                 │
│ full_name        │ "Alice A"                                                 │
│ avatar_url       │ "https://cdn.example.com/assets/4f1c...-me.png"           │
│ cover_image_url  │ ""                                                        │
│ password_hash    │ "$2b$10$..."                                              │
│ refresh_token    │ "eyJhbGciOiJIUzI1NiIs..." (or NULL after logout)          │
│ watch_history    │ ["b1c2...", "d3e4..."]                                    │
│ created_at       │ 2024-01-01T00:00:00Z                                      │
│ updated_at       │ 2024-01-15T10:30:00Z                                      │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.models.base import Base, TimestampMixin
from src.shared.utils.security import SecurityUtils


if TYPE_CHECKING:
    from src.shared.models.subscription import Subscription


class User(Base, TimestampMixin):
    """
    User model representing a registered account.

    The password hash can only be written through set_password(); it is
    exposed read-only as `password_hash`.

    Attributes:
        id: Unique identifier (UUID v4)
        username: Lowercase, trimmed, unique handle
        email: Lowercase, trimmed, unique address
        full_name: Display name
        avatar_url: Asset store URL of the avatar (required)
        cover_image_url: Asset store URL of the cover image ("" when none)
        refresh_token: The single currently-valid refresh token, or None
        watch_history: Ordered list of watched video ids
    """

    __tablename__ = "users"

    # ═══════════════════════════════════════════════════════════════════════════
    # PRIMARY KEY
    # ═══════════════════════════════════════════════════════════════════════════

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # IDENTITY
    # ═══════════════════════════════════════════════════════════════════════════

    username: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # PROFILE ASSETS
    # ═══════════════════════════════════════════════════════════════════════════

    avatar_url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    cover_image_url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # CREDENTIALS
    # ═══════════════════════════════════════════════════════════════════════════

    _password_hash: Mapped[str] = mapped_column(
        "password_hash",
        Text,
        nullable=False,
    )

    refresh_token: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # ACTIVITY
    # ═══════════════════════════════════════════════════════════════════════════

    # Video ids, most recent last
    watch_history: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # RELATIONSHIPS
    # ═══════════════════════════════════════════════════════════════════════════

    subscriptions: Mapped[list["Subscription"]] = relationship(
        "Subscription",
        foreign_keys="Subscription.subscriber_id",
        back_populates="subscriber",
        cascade="all, delete-orphan",
    )

    subscribers: Mapped[list["Subscription"]] = relationship(
        "Subscription",
        foreign_keys="Subscription.channel_id",
        back_populates="channel",
        cascade="all, delete-orphan",
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def password_hash(self) -> str:
        """Stored bcrypt hash (read-only; use set_password to change it)."""
        return self._password_hash

    def set_password(self, plain_password: str) -> None:
        """Hash and store a new password."""
        self._password_hash = SecurityUtils.hash_password(plain_password)

    def verify_password(self, plain_password: str) -> bool:
        """Check a plaintext password against the stored hash."""
        return SecurityUtils.verify_password(plain_password, self._password_hash)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<User(id={self.id}, username={self.username})>"
