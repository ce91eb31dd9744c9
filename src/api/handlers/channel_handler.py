"""
Channel Handler

Public channel profiles and subscriptions.

Endpoints:
==========
    GET    /c/{username}               → Channel profile (optional auth)
    POST   /c/{username}/subscription  → Subscribe (auth)
    DELETE /c/{username}/subscription  → Unsubscribe (auth)

The profile is viewer-relative: `is_subscribed` reflects the caller when
a valid token is sent and is False for anonymous requests.
"""

from fastapi import APIRouter, Depends, status

from src.api.dependencies.auth import CurrentUser, OptionalUser
from src.api.dependencies.services import get_channel_service
from src.shared.schemas.channel import ChannelProfile, SubscriptionResponse
from src.shared.schemas.common import MessageResponse
from src.shared.services.channel_service import ChannelService


router = APIRouter()


@router.get("/c/{username}", response_model=ChannelProfile)
async def get_channel_profile(
    username: str,
    viewer: OptionalUser,
    channel_service: ChannelService = Depends(get_channel_service),
):
    """
    Get a channel profile with subscriber counts.

    Raises:
        404: Channel does not exist
    """
    return await channel_service.get_channel_profile(
        username,
        viewer_id=viewer.id if viewer else None,
    )


@router.post(
    "/c/{username}/subscription",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def subscribe(
    username: str,
    user: CurrentUser,
    channel_service: ChannelService = Depends(get_channel_service),
):
    """
    Subscribe to a channel. Subscribing twice returns the existing subscription.

    Raises:
        400: Subscribing to yourself
        404: Channel does not exist
    """
    subscription = await channel_service.subscribe(user.id, username)
    return SubscriptionResponse.model_validate(subscription)


@router.delete("/c/{username}/subscription", response_model=MessageResponse)
async def unsubscribe(
    username: str,
    user: CurrentUser,
    channel_service: ChannelService = Depends(get_channel_service),
):
    """Unsubscribe from a channel. Safe to call when not subscribed."""
    removed = await channel_service.unsubscribe(user.id, username)
    return MessageResponse(
        message="Unsubscribed from channel" if removed else "Not subscribed to channel",
    )
