"""
Health check endpoints.

Provides basic and detailed health check functionality.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db_session
from api.schemas.common import (
    ComponentHealth,
    DetailedHealthCheckResponse,
    HealthCheckResponse,
    HealthStatus,
)
from core.config import Settings, get_settings
from services.image_storage import ImageStorage

router = APIRouter(prefix="/health", tags=["health"])

# Track application start time for uptime calculation
_start_time = time.time()


@router.get(
    "",
    response_model=HealthCheckResponse,
    summary="Basic health check",
    description="Quick health check endpoint for load balancers and container orchestration.",
)
async def health_check() -> HealthCheckResponse:
    """
    Basic health check.

    Returns a simple healthy status if the API is running.
    """
    return HealthCheckResponse(
        status=HealthStatus.HEALTHY,
        timestamp=datetime.now(timezone.utc),
    )


async def _check_database(session: AsyncSession | None) -> ComponentHealth:
    if session is None:
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            error="Database not initialized",
        )

    start = time.perf_counter()
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        return ComponentHealth(status=HealthStatus.UNHEALTHY, error=str(e))

    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
    )


@router.get(
    "/detailed",
    response_model=DetailedHealthCheckResponse,
    summary="Detailed health check",
    description="Comprehensive health check with status of all components.",
)
async def detailed_health_check(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_db_session),
) -> DetailedHealthCheckResponse:
    """
    Detailed health check with component status.

    Checks the health of:
    - Database connection
    - Upload directory
    - Gemini API (if API key configured)
    """
    components = {}
    overall_status = HealthStatus.HEALTHY

    # Check database
    components["database"] = await _check_database(session)
    if components["database"].status != HealthStatus.HEALTHY:
        overall_status = HealthStatus.UNHEALTHY

    # Check upload directory
    storage = ImageStorage(settings=settings)
    components["storage"] = ComponentHealth(
        status=HealthStatus.HEALTHY,
        details={"path": str(storage.base_path), "files": len(storage.list_files())},
    )

    # Check Gemini API configuration
    if settings.is_gemini_configured:
        components["gemini_api"] = ComponentHealth(
            status=HealthStatus.HEALTHY,
            details={"configured": True},
        )
    else:
        components["gemini_api"] = ComponentHealth(
            status=HealthStatus.DEGRADED,
            error="No default API key configured (clients must send X-API-Key)",
        )
        if overall_status == HealthStatus.HEALTHY:
            overall_status = HealthStatus.DEGRADED

    # Calculate uptime
    uptime_seconds = time.time() - _start_time

    return DetailedHealthCheckResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        environment=settings.environment,
        uptime_seconds=round(uptime_seconds, 2),
        components=components,
    )
