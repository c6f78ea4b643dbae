"""Lifecycle configuration via Pydantic settings.

Declared defaults applied when a tenant or administrator is created.
All values can be overridden through ``PRAEFECTUS_*`` environment variables.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from praefectus.foundation.domain.config_defaults import DEFAULT_MODULE_KEYS
from praefectus.foundation.domain.tenant_value_objects import (
    BillingCycle,
    SubscriptionStatus,
)


class LifecycleSettings(BaseSettings):
    """Defaults and limits for tenant and administrator lifecycles.

    Attributes:
        default_subscription_status: Tier for new tenants.
        default_currency: ISO 4217 currency for new tenants.
        default_billing_cycle: Billing interval for new tenants.
        default_country: ISO country code for new tenants.
        default_timezone: IANA time zone for new tenants.
        default_modules: Feature modules enabled during initialization.
        admin_min_password_length: Minimum password length for direct provisioning.
        activation_base_url: Base URL of the activation page linked in invitations.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRAEFECTUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_subscription_status: SubscriptionStatus = Field(
        default=SubscriptionStatus.TRIAL,
        description="Subscription tier for new tenants",
    )
    default_currency: str = Field(
        default="EUR",
        pattern=r"^[A-Z]{3}$",
        description="ISO 4217 currency for new tenants",
    )
    default_billing_cycle: BillingCycle = Field(
        default=BillingCycle.MONTHLY,
        description="Billing interval for new tenants",
    )
    default_country: str = Field(default="DE", description="Country code for new tenants")
    default_timezone: str = Field(
        default="Europe/Berlin",
        description="IANA time zone for new tenants",
    )
    default_modules: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MODULE_KEYS),
        description="Feature modules enabled for every new tenant",
    )
    admin_min_password_length: int = Field(
        default=6,
        ge=6,
        le=128,
        description="Minimum password length for directly provisioned administrators",
    )
    activation_base_url: str = Field(
        default="http://localhost:5173",
        description="Base URL of the console activation page",
    )

    @field_validator("activation_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache(maxsize=1)
def get_lifecycle_settings() -> LifecycleSettings:
    """Get cached lifecycle settings instance."""
    return LifecycleSettings()
