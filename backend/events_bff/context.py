"""
Per-request logging context.

A RequestContext travels from the route handler down to the HTTP client so
that every outgoing-call log entry can be tied back to the inbound request.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from events_bff.middleware.request_id import request_id_var


class RequestContext(BaseModel):
    request_id: str = ""
    method: Optional[str] = None
    path: Optional[str] = None
    client_ip: Optional[str] = None
    customer_id: Optional[str] = None

    model_config = {"frozen": True}

    def as_log_extra(self) -> Dict[str, Any]:
        """Non-empty fields only."""
        return {k: v for k, v in self.model_dump().items() if v not in (None, "")}


ContextLike = Union[RequestContext, Dict[str, Any], None]


def context_for_log(context: ContextLike) -> Dict[str, Any]:
    """
    Normalizes whatever context a caller passed into a plain dict.

    Callers outside a request (scripts, tests) may pass None or a dict;
    the request id ContextVar still fills in correlation when it is set.
    """
    if context is None:
        data: Dict[str, Any] = {}
    elif isinstance(context, RequestContext):
        data = context.as_log_extra()
    else:
        data = dict(context)
    rid = request_id_var.get("")
    if rid:
        data.setdefault("request_id", rid)
    return data
