"""Health check endpoints."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.dependencies import get_local_store
from core.config import settings
from infrastructure.database.session import get_async_session
from infrastructure.local.local_store import LocalStore

logger = structlog.get_logger()

router = APIRouter(tags=["health"])

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    local_store: str | None = None


def _response(status: str, **checks: str) -> HealthResponse:
    return HealthResponse(
        status=status,
        version="1.0.0",
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        **checks,
    )


async def _check_database(db: AsyncSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("health_database_unreachable", error=str(e))
        return f"{UNHEALTHY}: {e}"
    return HEALTHY


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Liveness probe for load balancers; checks no dependencies."""
    return _response(HEALTHY)


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
    local_store: LocalStore = Depends(get_local_store),
) -> HealthResponse:
    """
    Check the remote database and the local store.

    Pages stay resolvable while either store works, so one failing store is
    reported as "degraded" and only both failing as "unhealthy".
    """
    database = await _check_database(db)
    local = HEALTHY if local_store.ping() else UNHEALTHY

    healthy = [database, local].count(HEALTHY)
    status = {2: HEALTHY, 1: "degraded"}.get(healthy, UNHEALTHY)

    return _response(status, database=database, local_store=local)
