"""
Repository Pattern Implementations

Repositories encapsulate database queries and provide a clean API for data access.

Repository Hierarchy:
=====================
    BaseRepository[ModelType]           ← Generic CRUD operations
         │
         ├── UserRepository             ← Lookups, creation, atomic token writes
         └── SubscriptionRepository     ← Follow edges and channel aggregation

Usage Example:
==============
    from src.shared.repositories import UserRepository

    async with database.session() as session:
        user = await UserRepository(session).get_by_username("alice")
"""

from src.shared.repositories.base import BaseRepository
from src.shared.repositories.user_repository import UserRepository
from src.shared.repositories.subscription_repository import SubscriptionRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "SubscriptionRepository",
]
