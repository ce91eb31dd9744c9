"""
Shared Module

Domain code used by the API layer and by migrations:
- Models: SQLAlchemy ORM models (users, subscriptions)
- Repositories: Data access layer
- Services: Business logic layer (auth, tokens, channels)
- Schemas: Pydantic request/response models
- Core: Logging, exceptions
- Adapters: Asset store integrations

Package Structure:
==================
    shared/
    ├── core/           ← Logging, exceptions
    ├── db/             ← Database handle and sessions
    ├── models/         ← SQLAlchemy models
    ├── repositories/   ← Data access layer
    ├── services/       ← Business logic
    ├── schemas/        ← Pydantic schemas
    ├── adapters/       ← Asset stores (local, S3)
    ├── migrations/     ← Alembic environment and revisions
    └── utils/          ← Password hashing and JWT helpers

Usage:
======
    from src.shared.models import User, Subscription
    from src.shared.repositories import UserRepository
    from src.shared.services import AuthService
    from src.shared.schemas import UserResponse, AuthResponse
    from src.shared.core import logger, VideoTubeException
"""
