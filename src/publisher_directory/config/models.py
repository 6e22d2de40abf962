"""Pydantic configuration models for the publisher directory client."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

PUBLISHER_LIST_REFRESH_INTERVAL = "publisher_list_refresh_interval"


class Environment(StrEnum):
    """Publisher server deployments."""

    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"


_SERVER_URLS: dict[Environment, str] = {
    Environment.PRODUCTION: "https://pcdn.brave.com/publishers",
    Environment.STAGING: "https://pcdn.bravesoftware.com/publishers",
    Environment.DEVELOPMENT: "https://pcdn.brave.software/publishers",
}


class RetryConfig(BaseModel):
    """Retry / backoff configuration."""

    max_attempts: int = Field(default=3, ge=1)
    initial_wait_seconds: float = Field(default=0.5, gt=0)
    max_wait_seconds: float = Field(default=10.0, gt=0)
    multiplier: float = Field(default=2.0, ge=1.0)
    jitter: bool = True


class TransportConfig(BaseModel):
    """HTTP transport settings."""

    timeout_seconds: float = Field(default=30.0, gt=0)
    retry: RetryConfig = Field(default_factory=RetryConfig)


class DirectoryConfig(BaseModel):
    """Settings for resolving publishers against the publisher server.

    ``options`` holds the integer options served through the option store
    collaborator.  The cache lifetime of fetched publisher records is the
    ``publisher_list_refresh_interval`` option, shared with the prefix
    list refresh schedule.
    """

    environment: Environment = Environment.PRODUCTION
    # Overrides the environment's server when set.
    publisher_server_url: str | None = None
    query_prefix_bytes: int = Field(default=2, ge=1, le=32)
    image_url_prefix: str = "chrome://rewards-image/"
    decompress_buffer_size: int = Field(default=32 * 1024, gt=0)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    options: dict[str, int] = Field(
        default_factory=lambda: {PUBLISHER_LIST_REFRESH_INTERVAL: 3 * 60 * 60}
    )

    @field_validator("publisher_server_url")
    @classmethod
    def normalize_server_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            msg = f"publisher_server_url must be an http(s) URL, got '{v}'"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: dict[str, int]) -> dict[str, int]:
        for key, value in v.items():
            if value < 0:
                msg = f"Option '{key}' must be non-negative, got {value}"
                raise ValueError(msg)
        return v

    @property
    def server_url(self) -> str:
        """Base URL of the publisher server."""
        return self.publisher_server_url or _SERVER_URLS[self.environment]
