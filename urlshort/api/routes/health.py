"""Health check endpoints for monitoring service status."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from urlshort.api import schemas
from urlshort.core.config import settings
from urlshort.core.migrations import get_current_revision
from urlshort.db.base import DatabaseHealthCheck
from urlshort.db.session import get_db

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=schemas.HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def health_check():
    """Static payload confirming the process is serving requests."""
    return schemas.HealthResponse(status="healthy", service=settings.APP_NAME)


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness probe",
)
async def readiness_probe(db: AsyncSession = Depends(get_db)):
    """Check whether the database can serve queries."""
    database = await DatabaseHealthCheck.check_connection(db)
    ready = database["status"] == "healthy"
    return {
        "ready": ready,
        "components": {"database": database},
        "schema_revision": await get_current_revision(db.bind) if ready else None,
    }
