"""
Health Check Handler

Probes for load balancers and orchestrators. Mounted without the API prefix.

    /health → service name and version
    /ready  → database answers SELECT 1
    /live   → process is up
"""

from fastapi import APIRouter
from sqlalchemy import text

from src.api.dependencies.database import AppSettings, DbSession
from src.shared.schemas.common import HealthResponse


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: AppSettings):
    return HealthResponse(
        service=settings.APP_NAME.lower(),
        version=settings.APP_VERSION,
    )


@router.get("/ready")
async def readiness_check(db: DbSession):
    """Fails with a 500 when the database cannot be reached."""
    await db.execute(text("SELECT 1"))
    return {"status": "ready"}


@router.get("/live")
async def liveness_check():
    return {"status": "alive"}
