"""
api.routers.health - Health check endpoints.

Provides endpoints for monitoring service health and status.
"""

from __future__ import annotations

import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException

from api import __version__
from api.dependencies import get_filter_service
from api.models import HealthResponse
from lootfilter.filter_service import FilterService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    service: FilterService = Depends(get_filter_service),
) -> HealthResponse:
    """
    Check API health status.

    Reports database connectivity and how many filters are registered.
    """
    registered = 0
    try:
        registered = len(service.get_all_filters())
        db_status = "connected"
    except sqlite3.Error as e:
        logger.warning(f"Database health check failed: {e}")
        db_status = f"error: {str(e)[:50]}"

    return HealthResponse(
        status="healthy" if db_status == "connected" else "degraded",
        version=__version__,
        database=db_status,
        registered_filters=registered,
    )


@router.get("/health/ready")
async def readiness_check(
    service: FilterService = Depends(get_filter_service),
) -> dict[str, str]:
    """
    Kubernetes-style readiness probe.

    Returns 200 if the service is ready to accept traffic.
    """
    try:
        service.get_all_filters()
        return {"status": "ready"}
    except sqlite3.Error as e:
        raise HTTPException(status_code=503, detail=f"Not ready: {e}")


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Kubernetes-style liveness probe."""
    return {"status": "alive"}
