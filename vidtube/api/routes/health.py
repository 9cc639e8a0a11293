"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /healthcheck always returns 200 if the process is up (liveness)
    - GET /healthcheck/ready returns 503 if the database is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - db_manager read through the module at call time (it is created in the lifespan)
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from vidtube.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/healthcheck", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "success": True,
        "message": "OK",
        "data": {"status": "healthy", "service": "vidtube-api"},
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        logger.warning("Readiness check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "message": "Service not ready",
                "errors": [{"code": "DATABASE_UNAVAILABLE", "category": "database"}],
            },
        )
    return {
        "success": True,
        "message": "ready",
        "data": {"status": "ready", "checks": {"database": "healthy"}},
    }
