"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.config import settings
from app.core.redis_client import check_redis_connection
from app.database import check_database_connection

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str


class DetailedHealthResponse(HealthResponse):
    """Health check including backing services."""

    database: str
    cache: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
)
async def detailed_health_check() -> DetailedHealthResponse:
    """
    Readiness probe with database and cache status.

    The cache is optional: a disabled or unreachable Redis marks the service
    degraded only when caching is enabled.
    """
    db_healthy = await check_database_connection()

    if settings.cache_enabled:
        cache_state = "healthy" if await check_redis_connection() else "unhealthy"
    else:
        cache_state = "disabled"

    healthy = db_healthy and cache_state != "unhealthy"
    return DetailedHealthResponse(
        status="healthy" if healthy else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database="healthy" if db_healthy else "unhealthy",
        cache=cache_state,
    )


@router.get(
    "/ping",
    status_code=status.HTTP_200_OK,
    summary="Simple ping",
)
async def ping() -> dict[str, str]:
    return {"message": "pong"}
