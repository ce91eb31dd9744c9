"""
Channel-related Pydantic schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.shared.schemas.common import BaseSchema


class ChannelProfile(BaseModel):
    """
    Public channel profile as seen by one viewer.

    is_subscribed is always False for anonymous viewers.
    """

    full_name: str
    username: str
    email: str
    avatar_url: str
    cover_image_url: str = ""
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


class SubscriptionResponse(BaseSchema):
    """Response for a subscribe call."""

    subscriber_id: UUID
    channel_id: UUID
    created_at: datetime

