"""
Database Module

Database connectivity and session management for VideoTube.

Architecture Overview:
======================
┌─────────────────────────────────────────────────────────────────────────────┐
│                        DATABASE LAYER                                       │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   FastAPI app  ── owns ──▶  Database (app.state.database)                   │
│       │                        │ connect() on startup, close() on shutdown  │
│       │  Dependency Injection: get_db()                                     │
│       ▼                        ▼                                            │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │              AsyncSession (Database.session())              │          │
│   │  - One session per request                                  │          │
│   │  - Auto-commit on success, auto-rollback on exception       │          │
│   └─────────────────────────────────────────────────────────────┘          │
│       │                                                                     │
│       ▼                                                                     │
│   Repositories (UserRepository, SubscriptionRepository)                     │
│       │                                                                     │
│       ▼                                                                     │
│   PostgreSQL                                                                │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘
"""

from src.shared.db.session import Database

__all__ = [
    "Database",
]
