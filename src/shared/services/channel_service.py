"""
Channel service.
Business logic for channel profiles and subscriptions.

A channel is just a user seen from the subscriber side. The profile view
combines the channel's public fields with:
- subscribers_count: edges pointing at the channel
- channels_subscribed_to_count: edges leaving the channel
- is_subscribed: whether the viewer owns one of the incoming edges

All three come from one read-only query (SubscriptionRepository).
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ChannelNotFoundError, ConflictError, ValidationError
from ..core.logging import get_logger
from ..models.subscription import Subscription
from ..models.user import User
from ..repositories.subscription_repository import SubscriptionRepository
from ..repositories.user_repository import UserRepository
from ..schemas.channel import ChannelProfile

logger = get_logger(__name__)


def _normalize_username(username: Optional[str]) -> str:
    if username is None or not username.strip():
        raise ValidationError("Username is missing")
    return username.strip().lower()


class ChannelService:
    """Service for channel profile and subscription logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.subscription_repo = SubscriptionRepository(db)
        self.user_repo = UserRepository(db)

    async def get_channel_profile(
        self,
        username: Optional[str],
        viewer_id: Optional[UUID] = None,
    ) -> ChannelProfile:
        """
        Build the public profile of a channel relative to a viewer.

        Args:
            username: Channel username (any case)
            viewer_id: Viewing user, or None for anonymous viewers

        Returns:
            ChannelProfile

        Raises:
            ValidationError: Username blank
            ChannelNotFoundError: No user with that username
        """
        username = _normalize_username(username)

        row = await self.subscription_repo.get_channel_profile_row(username, viewer_id)
        if row is None:
            raise ChannelNotFoundError(username)

        channel: User = row.User
        return ChannelProfile(
            full_name=channel.full_name,
            username=channel.username,
            email=channel.email,
            avatar_url=channel.avatar_url,
            cover_image_url=channel.cover_image_url,
            subscribers_count=row.subscribers_count or 0,
            channels_subscribed_to_count=row.channels_subscribed_to_count or 0,
            is_subscribed=bool(row.is_subscribed),
        )

    async def subscribe(self, subscriber_id: UUID, channel_username: Optional[str]) -> Subscription:
        """
        Follow a channel. Returns the existing edge if already subscribed.

        Raises:
            ValidationError: Username blank, or subscribing to yourself
            ChannelNotFoundError: No user with that username
        """
        channel = await self._get_channel(channel_username)
        if channel.id == subscriber_id:
            raise ValidationError("Cannot subscribe to your own channel")

        existing = await self.subscription_repo.get_edge(subscriber_id, channel.id)
        if existing:
            return existing

        try:
            subscription = await self.subscription_repo.create(
                subscriber_id=subscriber_id,
                channel_id=channel.id,
            )
        except IntegrityError as e:
            # A concurrent request created the same edge
            raise ConflictError("Already subscribed to this channel") from e

        logger.info("channel_subscribed", subscriber_id=str(subscriber_id), channel_id=str(channel.id))
        return subscription

    async def unsubscribe(self, subscriber_id: UUID, channel_username: Optional[str]) -> bool:
        """
        Stop following a channel.

        Returns:
            True if an edge was removed, False if there was none
        """
        channel = await self._get_channel(channel_username)
        existing = await self.subscription_repo.get_edge(subscriber_id, channel.id)
        if not existing:
            return False

        await self.subscription_repo.delete(existing.id)
        logger.info("channel_unsubscribed", subscriber_id=str(subscriber_id), channel_id=str(channel.id))
        return True

    async def _get_channel(self, channel_username: Optional[str]) -> User:
        username = _normalize_username(channel_username)
        channel = await self.user_repo.get_by_username(username)
        if not channel:
            raise ChannelNotFoundError(username)
        return channel
