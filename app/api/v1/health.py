"""Health check endpoint with database and cache connectivity."""

import time
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.deps import get_app_settings, get_cache, get_database
from app.core.cache import Cache, cache_status
from app.core.config import Settings
from app.core.database import Database
from app.schemas.health import CacheHealth, DatabaseHealth, HealthResponse

router = APIRouter()

SERVICE_NAME = "orcamentos-online-api"


@router.get("", response_model=HealthResponse)
def get_health(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    database: Annotated[Database, Depends(get_database)],
    cache: Annotated[Cache | None, Depends(get_cache)],
) -> HealthResponse:
    """
    Return service health status and store/cache connectivity.
    Used by load balancers and monitoring.
    """
    db_connected = database.check_connected()
    return HealthResponse(
        status="healthy" if db_connected else "degraded",
        timestamp=datetime.now(UTC).isoformat(),
        service=SERVICE_NAME,
        version=request.app.version,
        environment=settings.APP_ENV,
        database=DatabaseHealth(status="connected" if db_connected else "disconnected"),
        redis=CacheHealth(status=cache_status(cache)),
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
    )
