"""
Subscription Repository

Database operations for subscriber → channel edges, including the
channel profile aggregation.

Common Operations:
==================
- get_edge()                → Find one subscriber/channel edge
- get_channel_profile_row() → Channel user + counts + viewer flag in one query
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import exists, false, func, select
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.repositories.base import BaseRepository
from src.shared.models.subscription import Subscription
from src.shared.models.user import User


class SubscriptionRepository(BaseRepository[Subscription]):
    """
    Repository for Subscription database operations.

    The profile aggregation is a single SELECT with correlated
    subqueries, so counts and the viewer flag come from one snapshot.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize SubscriptionRepository.

        Args:
            session: Async database session
        """
        super().__init__(Subscription, session)

    async def get_edge(self, subscriber_id: UUID, channel_id: UUID) -> Optional[Subscription]:
        """Get the edge from `subscriber_id` to `channel_id`, if any."""
        result = await self.session.execute(
            select(Subscription).where(
                Subscription.subscriber_id == subscriber_id,
                Subscription.channel_id == channel_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_channel_profile_row(
        self,
        username: str,
        viewer_id: Optional[UUID] = None,
    ) -> Optional[Row]:
        """
        Load a channel together with its subscription statistics.

        Args:
            username: Normalized channel username
            viewer_id: User viewing the channel, or None for anonymous

        Returns:
            Row with attributes User, subscribers_count,
            channels_subscribed_to_count, is_subscribed; or None when no
            user has that username

        SQL Generated:
            SELECT users.*,
                   (SELECT count(*) FROM subscriptions WHERE channel_id = users.id),
                   (SELECT count(*) FROM subscriptions WHERE subscriber_id = users.id),
                   EXISTS (SELECT 1 FROM subscriptions
                           WHERE channel_id = users.id AND subscriber_id = :viewer)
            FROM users WHERE username = :username
        """
        subscribers_count = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        channels_subscribed_to_count = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )

        if viewer_id is None:
            is_subscribed = false()
        else:
            is_subscribed = exists().where(
                Subscription.channel_id == User.id,
                Subscription.subscriber_id == viewer_id,
            )

        result = await self.session.execute(
            select(
                User,
                subscribers_count.label("subscribers_count"),
                channels_subscribed_to_count.label("channels_subscribed_to_count"),
                is_subscribed.label("is_subscribed"),
            ).where(User.username == username)
        )
        return result.first()
