"""
Events BFF — Application Configuration
=======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before app starts.
"""

import logging
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_SESSION_SECRET = "change-me"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development.
    Production deployments MUST override SESSION_SECRET and EVENTS_API_BASE_URL.
    """

    # ── Upstream Events API ───────────────────────────────────────────────
    # What: Base URL of the events API; customer and loan segments are appended
    events_api_base_url: str = Field(
        default="http://localhost:8080/events-api",
        description="Base URL of the upstream events API",
    )

    # ── Outgoing HTTP Client ──────────────────────────────────────────────
    # What: httpx timeout (connect, read, write, pool) in seconds
    # Only timeout applied to upstream calls; there are no retries
    service_timeout: float = Field(default=30.0, gt=0, le=300)

    # What: Largest upstream response body accepted, in bytes (40 MiB)
    max_content_length: int = Field(default=40 * 1024 * 1024, ge=1024)

    # What: Whether upstream TLS certificates are verified
    # Set to False only for internal hosts with self-signed certificates
    upstream_verify_tls: bool = Field(default=True)

    # ── Session ───────────────────────────────────────────────────────────
    # What: Secret used to sign the session cookie (itsdangerous via Starlette)
    session_secret: str = Field(default=DEFAULT_SESSION_SECRET)
    session_cookie: str = Field(default="bff_session")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=9898, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("events_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Upstream paths are joined with a leading slash."""
        return v.rstrip("/")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that security-sensitive settings are configured.
        When:  Called during app startup (lifespan).
        How:   Raises ValueError listing every misconfigured value.
        """
        errors = []
        if self.session_secret == DEFAULT_SESSION_SECRET:
            errors.append("SESSION_SECRET is still the development default.")
        if not self.upstream_verify_tls:
            logger.warning("Upstream TLS verification is disabled (UPSTREAM_VERIFY_TLS=false)")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance — imported throughout the application
settings = Settings()
