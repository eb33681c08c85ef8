"""Health check endpoints for monitoring application status.
"""
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import status

from app.core.config import get_settings
from app.core.database import check_db_health
from app.core.deps import get_industry_mapper
from app.services.industry_mapper import IndustryMapper

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _reference_data_check(mapper: IndustryMapper) -> dict[str, Any]:
    stats = mapper.stats()
    if not mapper.ready:
        check_status, message = "unhealthy", "Reference data not loaded"
    elif mapper.degraded:
        check_status, message = "degraded", "Serving placeholder index after failed load"
    else:
        check_status, message = "healthy", "Reference data loaded"

    return {
        "status": check_status,
        "message": message,
        "source": mapper.data_source.source_name,
        "total_symbols": stats.total_symbols,
        "mapped_industries": stats.mapped_industries,
        "load_error": mapper.load_error,
    }


@router.get(
    "/health",
    response_model=dict[str, Any],
    summary="Comprehensive Health Check",
    description="Returns detailed health status including database connectivity "
    "and whether the industry index is loaded, degraded or missing.",
    operation_id="get_health_status",
    responses={
        200: {"description": "Service is healthy or degraded"},
        503: {
            "description": "Service is unhealthy",
            "content": {
                "application/json": {
                    "example": {
                        "status": "unhealthy",
                        "timestamp": "2025-10-02T10:00:00+00:00",
                        "version": "1.0.0",
                        "environment": "development",
                        "checks": {
                            "reference_data": {
                                "status": "unhealthy",
                                "message": "Reference data not loaded",
                            }
                        },
                    }
                }
            },
        },
    },
)
async def health_check(mapper: IndustryMapper = Depends(get_industry_mapper)) -> dict[str, Any]:
    """Comprehensive health check endpoint.

    A degraded index still reports 200 with ``status="degraded"``; a missing
    index or an unreachable database reports 503.

    Raises:
        HTTPException: If any health check fails (status 503)
    """
    settings = get_settings()
    checks = {
        "application": {"status": "healthy", "message": "Application ready"},
        "database": await check_db_health(),
        "reference_data": _reference_data_check(mapper),
    }

    statuses = {check["status"] for check in checks.values()}
    if "unhealthy" in statuses:
        overall = "unhealthy"
    elif "degraded" in statuses:
        overall = "degraded"
    else:
        overall = "healthy"

    health_data = {
        "status": overall,
        "timestamp": _now(),
        "version": "1.0.0",
        "environment": settings.environment,
        "checks": checks,
    }

    if overall == "unhealthy":
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=health_data)

    return health_data


@router.get(
    "/health/ready",
    response_model=dict[str, str],
    summary="Readiness Probe",
    description="Returns 200 once the industry index is loaded (possibly degraded), "
    "503 before that.",
    operation_id="get_readiness",
    responses={
        503: {"description": "Industry index not loaded"},
    },
)
async def readiness_check(mapper: IndustryMapper = Depends(get_industry_mapper)) -> dict[str, str]:
    """Readiness check for load balancers and orchestrators."""
    if not mapper.ready:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "not_ready", "timestamp": _now()},
        )
    return {"status": "degraded" if mapper.degraded else "ready", "timestamp": _now()}


@router.get(
    "/health/live",
    response_model=dict[str, str],
    summary="Liveness Probe",
    description="Simple liveness check for container orchestration. "
    "Returns 200 OK when the application process is alive.",
    operation_id="get_liveness",
    responses={
        500: {"description": "Internal Server Error"},
    }
)
async def liveness_check() -> dict[str, str]:
    """Simple liveness check for container orchestration.

    Returns:
        Dict[str, str]: Live status
    """
    return {"status": "alive", "timestamp": _now()}
