"""Notification gateway configuration via Pydantic settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NotificationSettings(BaseSettings):
    """HTTP notification service configuration.

    Environment variables use the ``NOTIFY_`` prefix, e.g.
    ``NOTIFY_BASE_URL``, ``NOTIFY_API_KEY``, ``NOTIFY_TIMEOUT``.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:54321/functions/v1",
        description="Base URL of the notification service",
    )
    invitation_path: str = Field(
        default="/send-admin-invitation",
        description="Path of the invitation endpoint",
    )
    api_key: str = Field(default="", repr=False, description="Bearer token for the service")
    timeout: float = Field(default=10.0, gt=0, le=120, description="Request timeout in seconds")


@lru_cache(maxsize=1)
def get_notification_settings() -> NotificationSettings:
    """Get cached notification settings instance."""
    return NotificationSettings()
