"""
VideoTube API

Application factory and the module-level `app` uvicorn serves.

Request path:
=============
    CORS → router (/health, /api/v1/users/...) → dependencies → service
                                                     │
                         app.state.settings ─────────┤
                         app.state.database ─────────┤  one session per request
                         app.state.asset_store ──────┘

Errors raised anywhere below the router come back through the handlers in
src/api/middleware/error_handler.py.

Startup pings the database; shutdown disposes its engine.

Usage:
======
    uvicorn src.api.main:app --host 0.0.0.0 --port 8000 --reload

    # Tests build their own app around an in-memory database
    app = create_application(settings, database=db, asset_store=store)
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from src.config.settings import Settings, get_settings
from src.shared.adapters.storage_adapter import AssetStore, build_storage_adapter
from src.shared.db import Database
from src.shared.core.logging import logger
from src.api.middleware import setup_exception_handlers, setup_request_context
from src.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Ping the database before serving; dispose its pool on shutdown."""
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(
        "Starting VideoTube API",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
        asset_store=settings.ASSET_STORE_BACKEND,
    )

    await database.connect()
    logger.info("VideoTube API started successfully")

    yield

    logger.info("Shutting down VideoTube API")
    await database.close()
    logger.info("VideoTube API shutdown complete")


def create_application(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    asset_store: Optional[AssetStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build with (defaults to the cached instance)
        database: Database handle (defaults to one built from settings)
        asset_store: Asset store (defaults to ASSET_STORE_BACKEND)

    Anything not passed in is built from settings, so `create_application()`
    alone gives the production wiring.
    """
    settings = app_settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Accounts, sessions and channel subscriptions for VideoTube",
        version=settings.APP_VERSION,
        # Only show docs in development
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.asset_store = asset_store or build_storage_adapter(settings)

    # Credentials allowed so session cookies travel cross-origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)
    setup_request_context(app)

    register_routes(app, settings.API_PREFIX)

    # The local asset store hands out URLs under /static/assets
    if settings.ASSET_STORE_BACKEND == "local":
        asset_dir = Path(settings.LOCAL_ASSET_DIR)
        asset_dir.mkdir(parents=True, exist_ok=True)
        app.mount("/static/assets", StaticFiles(directory=asset_dir), name="assets")

    return app


app = create_application()
