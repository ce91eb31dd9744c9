"""
Database Dependency

FastAPI dependency for database sessions.

The Database handle is owned by the application (app.state.database);
this dependency opens one session per request from it. The session is
committed on success and rolled back on error.

Usage:
======
    from src.api.dependencies.database import DbSession

    @router.get("/users/{id}")
    async def get_user(id: UUID, db: DbSession):
        return await UserRepository(db).get(id)
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import Settings
from src.shared.db import Database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Yields:
        AsyncSession: Database session for the current request
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


# Type aliases for cleaner route signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
