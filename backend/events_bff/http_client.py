"""
Events BFF — Outgoing HTTP Client
==================================

What:  Generic wrapper around a shared httpx.AsyncClient used by every upstream integration.
Why:   Keeps validation, header defaults, key casing and call logging in one place,
       so integrations only describe *where* to call.
How:   `do_http_request()` validates options, decamelizes the request body,
       sends the request, logs the outcome and camelizes the JSON response.
Who:   Called by modules under `events_bff.integrations`.

Casing contract:
    Browser side (our routes)  →  camelCase keys
    Upstream side (APIs)       →  snake_case keys

    Request bodies are decamelized on the way out; JSON responses are
    camelized on the way back. `response_type="stream"` and `"text"` skip
    the translation and return the body untouched.

    Keys that are all upper case ("ID") or start with an underscore ("_id")
    are left as they are by pyhumps, in both directions.

Failure policy:
    Every failure is logged once here ("API ERROR: ...") and re-raised as
    UpstreamServiceError with `has_been_logged=True`. No retries.
"""

import logging
import traceback
from collections.abc import Mapping
from typing import Any, Dict, Literal, Optional, Union

import httpx
import humps
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from events_bff.config import settings
from events_bff.context import ContextLike, context_for_log
from events_bff.exceptions import (
    InvalidRequestOptionsError,
    ResponseTooLargeError,
    UpstreamServiceError,
)
from events_bff.middleware.request_id import REQUEST_ID_HEADER, request_id_var

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"content-type": "application/json"}

ResponseType = Literal["json", "text", "stream"]


class RequestOptions(BaseModel):
    """
    Options accepted by `do_http_request`.

    Unknown keys are allowed so integrations can pass through extra hints
    without the validator getting in the way. `response_type` is also
    accepted under its camelCase name, `responseType`.
    """

    url: str = Field(min_length=1)
    headers: Optional[Dict[str, str]] = None
    params: Optional[Dict[str, Any]] = None
    response_type: Optional[ResponseType] = Field(default=None, alias="responseType")

    model_config = {"extra": "allow", "populate_by_name": True}

    @field_validator("headers", mode="before")
    @classmethod
    def stringify_scalar_headers(cls, v: Any) -> Any:
        """Numbers become strings; containers and None values stay invalid."""
        if isinstance(v, Mapping):
            return {
                key: str(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else value
                for key, value in v.items()
            }
        return v


# ══════════════════════════════════════════════════════════════════════════
# Shared Client
# ══════════════════════════════════════════════════════════════════════════

_client: Optional[httpx.AsyncClient] = None


async def _forward_request_id(request: httpx.Request) -> None:
    """Request hook: propagate the inbound correlation ID to the upstream."""
    rid = request_id_var.get("")
    if rid and REQUEST_ID_HEADER not in request.headers:
        request.headers[REQUEST_ID_HEADER] = rid


def build_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    Creates the httpx client with the configured timeout and TLS policy.

    `transport` is only passed by tests (httpx.MockTransport).
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.service_timeout),
        verify=settings.upstream_verify_tls,
        transport=transport,
        event_hooks={"request": [_forward_request_id]},
    )


def get_client() -> httpx.AsyncClient:
    global _client
    if _client is None or _client.is_closed:
        _client = build_client()
    return _client


async def close_client() -> None:
    """Closes pooled connections. Called from the app lifespan on shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


# ══════════════════════════════════════════════════════════════════════════
# Public Verbs
# ══════════════════════════════════════════════════════════════════════════

async def get(options: Union[Mapping, RequestOptions], context: ContextLike = None) -> Any:
    return await do_http_request("get", options, None, context)


async def post(options: Union[Mapping, RequestOptions], body: Any, context: ContextLike = None) -> Any:
    return await do_http_request("post", options, body, context)


async def patch(options: Union[Mapping, RequestOptions], body: Any, context: ContextLike = None) -> Any:
    return await do_http_request("patch", options, body, context)


async def put(options: Union[Mapping, RequestOptions], body: Any, context: ContextLike = None) -> Any:
    return await do_http_request("put", options, body, context)


# ══════════════════════════════════════════════════════════════════════════
# Core Request Flow
# ══════════════════════════════════════════════════════════════════════════

async def do_http_request(
    method: str,
    options: Union[Mapping, RequestOptions, None],
    body: Any = None,
    context: ContextLike = None,
) -> Any:
    """
    Sends one upstream request and returns its reshaped body.

    Flow:
        1. Validate options (url required, non-empty)
        2. Build request details with defaulted headers
        3. Decamelize the body unless it is None, False or ""
        4. Send; non-2xx counts as failure
        5. Log "API RESPONSE" / "API ERROR" with call metadata and context
        6. Return camelized JSON, or raw text/bytes for text/stream

    Raises:
        InvalidRequestOptionsError: options failed validation (no call made)
        UpstreamServiceError: the call failed for any reason
    """
    log_context = context_for_log(context)

    try:
        if isinstance(options, RequestOptions):
            opts = options
        else:
            opts = RequestOptions.model_validate(options)
    except PydanticValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or 'options'}: {err['msg']}"
            for err in exc.errors()
        ]
        logger.warning(
            "Rejected %s request options: %s",
            method.upper(),
            "; ".join(errors),
            extra={"context": log_context},
        )
        raise InvalidRequestOptionsError(errors=errors, has_been_logged=True) from exc

    request_details: Dict[str, Any] = {
        "method": method,
        "url": opts.url,
        "params": opts.params,
        "headers": get_headers(opts.headers),
    }
    if opts.response_type:
        request_details["response_type"] = opts.response_type
    if _has_body(body):
        request_details["data"] = _decamelize_keys(body)

    log_message = create_api_log_message(request_details)

    try:
        response = await get_client().request(
            method.upper(),
            request_details["url"],
            params=request_details["params"],
            headers=request_details["headers"],
            json=request_details.get("data"),
        )
        response.raise_for_status()
        _check_content_length(response)
    except httpx.HTTPStatusError as exc:
        metadata = create_api_log_metadata(request_details, exc.response)
        metadata["stack_trace"] = traceback.format_exc()
        logger.error(
            "API ERROR: %s",
            log_message,
            extra={"api_call": metadata, "context": log_context},
        )
        raise _upstream_error(exc, request_details, status_code=exc.response.status_code) from exc
    except Exception as exc:
        # Transport errors, oversize bodies, unserializable payloads
        metadata = create_api_log_metadata(request_details, None)
        metadata["error"] = repr(exc)
        logger.error(
            "API ERROR: %s",
            log_message,
            extra={"api_call": metadata, "context": log_context},
        )
        raise _upstream_error(
            exc, request_details, timed_out=isinstance(exc, httpx.TimeoutException)
        ) from exc

    logger.info(
        "API RESPONSE: %s",
        log_message,
        extra={
            "api_call": create_api_log_metadata(request_details, response),
            "context": log_context,
        },
    )

    return _decode_response(response, opts.response_type)


def get_headers(headers: Optional[Mapping] = None) -> Dict[str, Any]:
    """
    Returns caller headers with defaults filled in.

    Caller values always win; the content-type check ignores case.
    The caller's mapping is never mutated.
    """
    merged = dict(headers or {})
    present = {key.lower() for key in merged}
    for key, value in DEFAULT_HEADERS.items():
        if key not in present:
            merged[key] = value
    return merged


# ══════════════════════════════════════════════════════════════════════════
# Logging Helpers
# ══════════════════════════════════════════════════════════════════════════

def create_api_log_message(request_details: Mapping) -> str:
    method = request_details.get("method")
    return f"{method.upper() if method else ''} {request_details.get('url')}"


def create_api_log_metadata(
    request_details: Mapping,
    response: Optional[httpx.Response] = None,
) -> Dict[str, Any]:
    """
    Builds the structured payload attached to every outgoing-call log entry.

    Container values are rendered with repr() so log sinks never have to
    serialize arbitrary upstream payloads. Missing parts are None.
    """
    headers = request_details.get("headers")
    params = request_details.get("params")

    if response is not None:
        status_code = response.status_code
        response_time = _response_time_ms(response)
        response_headers = repr(dict(response.headers))
        response_body = repr(_body_for_log(response, request_details.get("response_type")))
    else:
        status_code = response_time = response_headers = None
        response_body = repr(None)

    return {
        "subject": "outgoing api call",
        "status_code": status_code,
        "method": request_details.get("method"),
        "url": request_details.get("url"),
        "response_time": response_time,
        "request_headers": repr(headers) if headers else None,
        "response_headers": response_headers,
        "params": repr(params) if params else None,
        "response_body": response_body,
        "request_body": repr(request_details.get("data")),
    }


def _response_time_ms(response: httpx.Response) -> Optional[float]:
    # `elapsed` only exists once the body has been read and closed
    try:
        return round(response.elapsed.total_seconds() * 1000, 2)
    except RuntimeError:
        return None


def _body_for_log(response: httpx.Response, response_type: Optional[str]) -> Any:
    if response_type == "stream":
        return f"<{len(response.content)} bytes>"
    if response_type == "text":
        return response.text
    return _parse_json(response)


# ══════════════════════════════════════════════════════════════════════════
# Payload Helpers
# ══════════════════════════════════════════════════════════════════════════

def _has_body(body: Any) -> bool:
    # Empty containers are real JSON bodies ({} and [] are sent)
    return body is not None and body is not False and body != ""


def _decamelize_keys(body: Any) -> Any:
    # humps converts bare strings too; only containers have keys to translate
    if isinstance(body, (Mapping, list)):
        return humps.decamelize(body)
    return body


def _camelize_keys(data: Any) -> Any:
    if isinstance(data, (Mapping, list)):
        return humps.camelize(data)
    return data


def _parse_json(response: httpx.Response) -> Any:
    """Decoded JSON; falls back to the raw text when the body is not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _decode_response(response: httpx.Response, response_type: Optional[str]) -> Any:
    if response_type == "stream":
        return response.content
    if response_type == "text":
        return response.text
    return _camelize_keys(_parse_json(response))


def _check_content_length(response: httpx.Response) -> None:
    size = len(response.content)
    if size > settings.max_content_length:
        raise ResponseTooLargeError(limit=settings.max_content_length, size=size)


def _upstream_error(
    exc: Exception,
    request_details: Mapping,
    status_code: Optional[int] = None,
    timed_out: bool = False,
) -> UpstreamServiceError:
    reason = str(exc) or type(exc).__name__
    return UpstreamServiceError(
        message=f"{reason}; happened for {create_api_log_message(request_details)}",
        status_code=status_code,
        method=request_details.get("method"),
        url=request_details.get("url"),
        timed_out=timed_out,
        has_been_logged=True,
    )
