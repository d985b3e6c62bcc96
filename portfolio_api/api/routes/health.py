"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/health/ always returns 200 if the process is up (liveness)
    - GET /api/health/ready returns 503 if the database is unreachable (readiness)
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from portfolio_api.core import envelope
from portfolio_api.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return envelope.success(
        {"status": "healthy", "service": "portfolio-api"}, "Service is healthy",
    )


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=envelope.error(
                "Service not ready", {"database": "unavailable"},
            ),
        )
    return envelope.success(
        {"status": "ready", "checks": {"database": "healthy"}}, "Service is ready",
    )
