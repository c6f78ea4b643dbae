"""Plain structured records exchanged between the managers and the ports.

Input models (``*Profile``, ``*Update``) are deliberately loose: they carry
raw strings so the managers can turn every malformed field into a domain
``ValidationError`` with the offending field name. Read models (``Tenant``,
``Administrator``, ...) are what the stores return and are frozen.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from praefectus.foundation.domain.admin_value_objects import (
    AdminRole,
    AdminStatus,
    Salutation,
)
from praefectus.foundation.domain.tenant_value_objects import (
    BillingCycle,
    SubscriptionStatus,
)

# ---------------------------------------------------------------------------
# Tenants
# ---------------------------------------------------------------------------


class TenantProfile(BaseModel):
    """Caller-supplied data for a new tenant. Only ``name`` is required."""

    name: str | None = None
    contact_email: str | None = None
    billing_email: str | None = None
    primary_contact_email: str | None = None
    primary_contact_name: str | None = None
    phone: str | None = None
    website: str | None = None
    industry: str | None = None
    description: str | None = None
    address: str | None = None
    postal_code: str | None = None
    city: str | None = None
    country: str | None = None
    timezone: str | None = None
    subscription_status: str | None = None
    currency: str | None = None
    billing_cycle: str | None = None


class NewTenant(BaseModel):
    """Validated, defaulted tenant record handed to ``TenantStorePort.create_tenant``."""

    model_config = ConfigDict(frozen=True)

    name: str
    slug: str
    contact_email: str | None = None
    billing_email: str | None = None
    primary_contact_email: str | None = None
    primary_contact_name: str | None = None
    phone: str | None = None
    website: str | None = None
    industry: str | None = None
    description: str | None = None
    address: str | None = None
    postal_code: str | None = None
    city: str | None = None
    country: str
    timezone: str
    subscription_status: SubscriptionStatus
    currency: str
    billing_cycle: BillingCycle
    is_active: bool = True
    subscription_started_at: datetime | None = None


class Tenant(NewTenant):
    """Tenant as read back from the store.

    ``admin_count`` and ``employee_count`` are derived by the store and are
    not authoritative.
    """

    id: str
    created_at: datetime
    updated_at: datetime
    admin_count: int = 0
    employee_count: int = 0


class TenantUpdate(BaseModel):
    """Settings and billing edits. Unset fields are left untouched."""

    name: str | None = None
    contact_email: str | None = None
    billing_email: str | None = None
    primary_contact_email: str | None = None
    primary_contact_name: str | None = None
    phone: str | None = None
    website: str | None = None
    industry: str | None = None
    description: str | None = None
    address: str | None = None
    postal_code: str | None = None
    city: str | None = None
    country: str | None = None
    timezone: str | None = None
    subscription_status: str | None = None
    currency: str | None = None
    billing_cycle: str | None = None


# ---------------------------------------------------------------------------
# Administrators
# ---------------------------------------------------------------------------


class AdminProfile(BaseModel):
    """Caller-supplied data for a new administrator."""

    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    salutation: str | None = None
    phone: str | None = None
    position: str | None = None
    role: str = AdminRole.ADMIN.value


class NewAdministrator(BaseModel):
    """Validated administrator record handed to ``AdminStorePort.create_admin``."""

    model_config = ConfigDict(frozen=True)

    email: str
    first_name: str
    last_name: str
    salutation: Salutation
    display_name: str
    phone: str | None = None
    position: str | None = None
    role: AdminRole = AdminRole.ADMIN


class Administrator(BaseModel):
    """Administrator as read back from the store."""

    model_config = ConfigDict(frozen=True)

    id: str
    tenant_id: str
    email: str
    first_name: str
    last_name: str
    salutation: Salutation
    display_name: str
    phone: str | None = None
    position: str | None = None
    role: AdminRole = AdminRole.ADMIN
    status: AdminStatus
    last_invited_at: datetime | None = None
    invitation_count: int = 0
    created_at: datetime
    updated_at: datetime


class AdminUpdate(BaseModel):
    """Edit request for an administrator.

    ``email`` and ``tenant_id`` may be echoed back unchanged by clients that
    submit the whole form; any different value is rejected.
    """

    first_name: str | None = None
    last_name: str | None = None
    salutation: str | None = None
    phone: str | None = None
    position: str | None = None
    email: str | None = None
    tenant_id: str | None = None


# ---------------------------------------------------------------------------
# Modules & licensing
# ---------------------------------------------------------------------------


class ModuleAssignment(BaseModel):
    """Whether a feature module is enabled for a tenant."""

    model_config = ConfigDict(frozen=True)

    tenant_id: str
    module_key: str
    is_enabled: bool
    enabled_by: str | None = None
    updated_at: datetime | None = None


class LicenseHistoryEntry(BaseModel):
    """Append-only record of a module being switched on or off."""

    model_config = ConfigDict(frozen=True)

    tenant_id: str
    action_type: str
    module_key: str
    old_value: dict[str, bool] = Field(default_factory=dict)
    new_value: dict[str, bool] = Field(default_factory=dict)
    performed_by: str | None = None
    notes: str | None = None
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class DeliveryReceipt(BaseModel):
    """Answer of the notification gateway for one invitation."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None
    message_id: str | None = None
