"""Health check endpoints for monitoring service status."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from noise import __version__
from noise.database.core import DatabaseService
from noise.web.core.container import Container
from noise.web.models.health import HealthCheckResponse, ReadinessProbeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health")


def _now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@router.get("", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Check basic health status of the service.

    Returns:
        Health status with timestamp and version.
    """
    return HealthCheckResponse(status="ok", timestamp=_now_iso(), version=__version__)


@router.get("/ready", response_model=ReadinessProbeResponse)
@inject
async def readiness_probe(
    db_service: Annotated[DatabaseService, Depends(Provide[Container.database_service])],
    response: Response,
) -> ReadinessProbeResponse:
    """Readiness probe: the service is ready once the database answers."""
    checks: dict[str, str] = {}
    try:
        async with db_service.get_async_db() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError as e:
        logger.warning("Readiness check failed: %s", e)
        checks["database"] = "unavailable"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    ready = all(value == "ok" for value in checks.values())
    return ReadinessProbeResponse(
        status="ready" if ready else "not_ready", checks=checks, timestamp=_now_iso()
    )
