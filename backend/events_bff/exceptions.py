"""
Events BFF — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the failure modes of a forwarding service.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes, without leaking upstream internals to the browser.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by the HTTP client and services; caught by global handlers.

Exception Hierarchy:
    BffError (base)
    ├── InvalidRequestOptionsError  → 500 Internal Server Error (caller bug)
    ├── SessionRequiredError        → 401 Unauthorized
    └── UpstreamServiceError        → 502 Bad Gateway / 504 Gateway Timeout

Failure policy:
    Errors are logged with context once, then re-raised. There is no retry,
    no recovery and no partial-failure handling anywhere in the call path.
"""

from typing import Any, Dict, Optional


class BffError(Exception):
    """
    Base exception for all Events BFF application errors.

    Attributes:
        message:          User-facing error description (safe to return in API response)
        context:          Additional debug info (logged but NOT returned to client)
        has_been_logged:  True once the raising layer already logged the failure
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
        has_been_logged: bool = False,
    ):
        self.message = message
        self.context = context or {}
        self.has_been_logged = has_been_logged
        super().__init__(self.message)


class InvalidRequestOptionsError(BffError):
    """
    Raised when outgoing request options fail validation.

    When:    An integration passes options without a usable `url`.
    HTTP:    500 Internal Server Error (the browser did nothing wrong)
    """

    def __init__(
        self,
        message: str = "Invalid outgoing request options",
        errors: Optional[list] = None,
        has_been_logged: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if errors:
            ctx["errors"] = errors
        super().__init__(message=message, context=ctx, has_been_logged=has_been_logged)
        self.errors = errors or []


class SessionRequiredError(BffError):
    """
    Raised when the session lacks the identifiers an upstream call needs.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "An authenticated session is required",
        missing: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if missing:
            ctx["missing"] = missing
        super().__init__(message=message, context=ctx)
        self.missing = missing or []


class UpstreamServiceError(BffError):
    """
    Raised when an outgoing API call fails.

    What:    Either the upstream answered with a non-2xx status, or the call
             never produced a usable response (connect error, timeout, oversize body).
    HTTP:    502 Bad Gateway, or 504 Gateway Timeout when `timed_out` is set

    Attributes:
        status_code:  Upstream HTTP status, None when no response was received
        method/url:   The outgoing call that failed
        timed_out:    True when the httpx timeout fired
    """

    def __init__(
        self,
        message: str = "Upstream service call failed",
        status_code: Optional[int] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
        timed_out: bool = False,
        has_been_logged: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["upstream_status"] = status_code
        super().__init__(message=message, context=ctx, has_been_logged=has_been_logged)
        self.status_code = status_code
        self.method = method
        self.url = url
        self.timed_out = timed_out


class ResponseTooLargeError(Exception):
    """Upstream body exceeded `max_content_length`. Wrapped into UpstreamServiceError."""

    def __init__(self, limit: int, size: int):
        self.limit = limit
        self.size = size
        super().__init__(f"maxContentLength size of {limit} exceeded ({size} bytes)")
