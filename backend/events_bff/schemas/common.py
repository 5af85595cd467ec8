"""
Events BFF — Shared Response Schemas
=====================================

What:  Pydantic models for the responses this service itself produces.
Why:   The event snapshot is an upstream payload passed through untouched, so
       only errors and health have a contract owned by the BFF.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "upstream_error",
            "message": "The events service returned an error.",
            "details": {"upstream_status": 503},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")
