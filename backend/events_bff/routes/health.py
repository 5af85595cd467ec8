"""
Events BFF — Health Check Route
================================

What:  Liveness endpoint for Docker health checks and load balancers.
Why:   Deliberately does not call the events API: an upstream outage should
       surface as 502s on real traffic, not take every BFF instance out of rotation.
"""

import time

from fastapi import APIRouter

from events_bff import __version__
from events_bff.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
