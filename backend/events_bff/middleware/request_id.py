"""
Events BFF — Request ID Middleware
===================================

What:  Assigns a correlation ID to each incoming request and echoes it in the response.
Why:   Lets one browser request be traced through the access log, the outgoing
       API call log, and the upstream service (the ID is forwarded upstream).
How:   Reads X-Request-ID or generates one, stores it in a ContextVar and
       request.state, and sets it on the response.
When:  Outermost custom middleware (runs before logging).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests in one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header when present
        2. Otherwise generate a short UUID (8 chars)
        3. Store in ContextVar (loggers, HTTP client) and request.state (handlers)
        4. Add to response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
