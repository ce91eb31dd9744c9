"""
Base Repository

Generic data access shared by UserRepository and SubscriptionRepository.

Operations:
===========
- get(id)            → One row by primary key, or None
- add(instance)      → INSERT an already-built instance
- create(**fields)   → Build and INSERT
- update(id, **f)    → Assign non-None fields on a loaded row
- delete(id)         → Hard delete

Typing:
=======
    class SubscriptionRepository(BaseRepository[Subscription]):
        ...

    edge = await repo.get(edge_id)   # Optional[Subscription]

Transactions:
=============
Nothing here commits. Writes are flushed so constraint violations surface
as IntegrityError inside the service call; Database.session() commits
once the whole request has succeeded.
"""

from typing import Any, Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.models.base import Base


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Primary-key CRUD for one mapped class.

    Attributes:
        model: Mapped class handled by this repository
        session: Request-scoped AsyncSession
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def get(self, record_id: UUID) -> Optional[ModelType]:
        """
        Load one row by id.

        SQL Generated:
            SELECT * FROM users WHERE id = :record_id
        """
        result = await self.session.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def add(self, instance: ModelType) -> ModelType:
        """
        INSERT `instance` and reload server-generated columns.

        Raises:
            IntegrityError: Unique, foreign key or check constraint violated
        """
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def create(self, **fields: Any) -> ModelType:
        """Build a model from `fields` and add it."""
        return await self.add(self.model(**fields))

    async def update(self, record_id: UUID, **fields: Any) -> Optional[ModelType]:
        """
        Assign the given non-None fields and flush.

        Only the assigned columns appear in the UPDATE, so unrelated columns
        (the password hash in particular) are never rewritten.

        Returns:
            The refreshed row, or None if no row has that id
        """
        instance = await self.get(record_id)
        if instance is None:
            return None

        for name, value in fields.items():
            if value is not None and hasattr(instance, name):
                setattr(instance, name, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, record_id: UUID) -> bool:
        """Hard delete. Returns False when there was nothing to delete."""
        instance = await self.get(record_id)
        if instance is None:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True
