"""
VideoTube Backend

User accounts, sessions and channel profiles for a video platform.

Package Structure:
==================
    src/
    ├── api/        ← FastAPI application
    ├── shared/     ← Shared code (models, services, etc.)
    └── config/     ← Configuration

Running the Application:
========================
    # API Server
    uvicorn src.api.main:app --reload

    # Migrations
    alembic upgrade head
"""
