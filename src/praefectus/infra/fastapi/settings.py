"""Application settings for the praefectus FastAPI app factory."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CORSSettings(BaseSettings):
    """CORS policy configuration.

    Environment variables use the ``CORS_`` prefix (e.g., ``CORS_ALLOW_ORIGINS``).
    Comma-separated strings are parsed into lists.
    """

    model_config = SettingsConfigDict(env_prefix="CORS_", extra="ignore")

    allow_origins: list[str] = Field(default=["http://localhost:5173"])
    allow_methods: list[str] = Field(default=["GET", "POST", "PUT", "PATCH", "DELETE"])
    allow_headers: list[str] = Field(default=["*"])
    allow_credentials: bool = Field(default=False)
    expose_headers: list[str] = Field(default=["X-Request-ID"])

    @field_validator(
        "allow_origins",
        "allow_methods",
        "allow_headers",
        "expose_headers",
        mode="before",
    )
    @classmethod
    def _parse_comma_separated(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @model_validator(mode="after")
    def _validate_credentials_with_wildcard(self) -> CORSSettings:
        if self.allow_credentials and "*" in self.allow_origins:
            msg = "CORS allow_credentials=True cannot be combined with a '*' origin"
            raise ValueError(msg)
        return self


class AppSettings(BaseSettings):
    """Application factory settings.

    Environment variables use the ``APP_`` prefix (e.g., ``APP_TITLE``).
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        extra="ignore",
    )

    title: str = Field(default="Praefectus Admin Console")
    version: str = Field(default="0.1.0")
    description: str = Field(default="Tenant and administrator lifecycle management")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default=None)
    openapi_url: str | None = Field(default="/openapi.json")
    debug: bool = Field(
        default=False,
        description="Include exception type and message in 500 responses",
    )
    drain_timeout: float = Field(
        default=10.0,
        ge=0,
        description="Seconds to wait for background tasks on shutdown",
    )
    cors: CORSSettings = Field(default_factory=CORSSettings)
