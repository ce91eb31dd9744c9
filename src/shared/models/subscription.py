"""
Subscription Entity Model

Directed follow edge between two users: `subscriber` follows `channel`.

This is the many-to-many self-relation on users. A user appears as the
channel for each of its subscribers and as the subscriber for each channel
it follows.

SAMPLE SUBSCRIPTION RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 550e8400-e29b-41d4-a716-446655440000                      │
│ subscriber_id    │ 660e8400-e29b-41d4-a716-446655440000                      │
│ channel_id       │ 770e8400-e29b-41d4-a716-446655440000                      │
│ created_at       │ 2024-01-01T00:00:00Z                                      │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from typing import TYPE_CHECKING
import uuid

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.models.base import Base, TimestampMixin


if TYPE_CHECKING:
    from src.shared.models.user import User


class Subscription(Base, TimestampMixin):
    """
    Subscription model - one user following one channel.

    Attributes:
        id: Unique identifier (UUID v4)
        subscriber_id: The user who follows
        channel_id: The user being followed

    Relationships:
        subscriber: The following user
        channel: The followed user
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
        CheckConstraint("subscriber_id <> channel_id", name="ck_subscriptions_not_self"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    subscriber_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    channel_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    subscriber: Mapped["User"] = relationship(
        "User",
        foreign_keys=[subscriber_id],
        back_populates="subscriptions",
    )

    channel: Mapped["User"] = relationship(
        "User",
        foreign_keys=[channel_id],
        back_populates="subscribers",
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Subscription(subscriber_id={self.subscriber_id}, channel_id={self.channel_id})>"
