"""
Events BFF — Route Dependencies
================================

FastAPI dependencies shared by the browser-facing routes:

    get_session          → the signed-cookie session as a plain dict
    get_request_context  → RequestContext for outgoing-call logs
    must_revalidate      → no-cache headers for per-user data
"""

from typing import Any, Dict

from fastapi import Depends, Request, Response

from events_bff.context import RequestContext
from events_bff.middleware.request_id import request_id_var


def get_session(request: Request) -> Dict[str, Any]:
    """Session populated by SessionMiddleware; login lives in another service."""
    return dict(request.session)


def get_request_context(
    request: Request,
    session: Dict[str, Any] = Depends(get_session),
) -> RequestContext:
    customer_id = session.get("customer_id") or session.get("customerId")
    return RequestContext(
        request_id=getattr(request.state, "request_id", None) or request_id_var.get(""),
        method=request.method,
        path=request.url.path,
        client_ip=request.client.host if request.client else None,
        customer_id=str(customer_id) if customer_id is not None else None,
    )


def must_revalidate(response: Response) -> None:
    # Event data is per-user and changes often; never serve it from a cache
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
