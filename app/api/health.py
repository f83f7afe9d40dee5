"""Health check endpoint with database connectivity check."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Request

from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(request: Request) -> HealthResponse:
    """
    Return service status, uptime and database connectivity.
    Used by load balancers and monitoring.
    """
    state = request.app.state
    db_status = "connected" if state.database.check_connected() else "disconnected"

    return HealthResponse(
        timestamp=datetime.now(UTC).isoformat(),
        uptime=round(time.monotonic() - state.started_at, 3),
        environment=state.settings.APP_ENV,
        database=db_status,
    )
