"""
Events BFF — Events Route Handlers
===================================

What:  GET /all-events returns the session's event snapshot to the browser.
How:   Delegates to events_service; errors propagate to the global handlers.
Who:   Called by the frontend home page after login.

Caching:
    Responses are per-user and must never be reused, so `must_revalidate`
    sets no-cache headers on every success response.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from events_bff.context import RequestContext
from events_bff.routes.dependencies import get_request_context, get_session, must_revalidate
from events_bff.schemas.common import ErrorResponse
from events_bff.services import events_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Events"])


@router.get(
    "/all-events",
    dependencies=[Depends(must_revalidate)],
    responses={
        401: {"description": "Session has no customer or loan", "model": ErrorResponse},
        502: {"description": "Events API failed", "model": ErrorResponse},
        504: {"description": "Events API timed out", "model": ErrorResponse},
    },
    summary="Event snapshot for the logged-in customer's current loan",
)
async def all_events(
    session: Dict[str, Any] = Depends(get_session),
    context: RequestContext = Depends(get_request_context),
) -> Any:
    return await events_service.get_home_snapshot(session, context)
