"""
VideoTube SQLAlchemy Models

Model Hierarchy:
================
    User
       ├── subscriptions (Subscription[])   ← channels this user follows
       └── subscribers (Subscription[])     ← users following this channel

Models Overview:
================
- Base: Base class and timestamp mixin
- User: Registered account (also a channel)
- Subscription: Directed subscriber → channel edge

Usage:
======
    from src.shared.models import User, Subscription
"""

from src.shared.models.base import Base, TimestampMixin
from src.shared.models.user import User
from src.shared.models.subscription import Subscription

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Subscription",
]
