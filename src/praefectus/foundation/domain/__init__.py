"""Praefectus Foundation Domain -- pure Python domain primitives.

Identifiers, exceptions, value objects, records, result types and port
interfaces shared by the tenancy and identity lifecycle managers.
"""

from praefectus.foundation.domain.admin_value_objects import (
    AdminRole,
    AdminStatus,
    Email,
    Password,
    PersonName,
    Salutation,
    compose_display_name,
)
from praefectus.foundation.domain.config_defaults import (
    BASELINE_TENANT_SETTINGS,
    DEFAULT_MODULE_KEYS,
)
from praefectus.foundation.domain.exceptions import (
    ConflictError,
    DomainError,
    FatalInconsistencyError,
    InvalidStateTransitionError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from praefectus.foundation.domain.identifiers import AdminId, TenantId
from praefectus.foundation.domain.models import (
    Administrator,
    AdminProfile,
    AdminUpdate,
    DeliveryReceipt,
    LicenseHistoryEntry,
    ModuleAssignment,
    NewAdministrator,
    NewTenant,
    Tenant,
    TenantProfile,
    TenantUpdate,
)
from praefectus.foundation.domain.outcomes import (
    CascadeDeletionResult,
    DeletionOutcome,
    InitializationReport,
    InvitationResult,
    StepOutcome,
    StepStatus,
)
from praefectus.foundation.domain.ports import (
    AdminStorePort,
    ModuleStorePort,
    NotificationGatewayPort,
    TenantSetupPort,
    TenantStorePort,
)
from praefectus.foundation.domain.tenant_value_objects import (
    BillingCycle,
    CurrencyCode,
    SubscriptionStatus,
    TenantName,
    TenantSlug,
)

__all__ = [
    "BASELINE_TENANT_SETTINGS",
    "DEFAULT_MODULE_KEYS",
    "AdminId",
    "AdminProfile",
    "AdminRole",
    "AdminStatus",
    "AdminStorePort",
    "AdminUpdate",
    "Administrator",
    "BillingCycle",
    "CascadeDeletionResult",
    "ConflictError",
    "CurrencyCode",
    "DeletionOutcome",
    "DeliveryReceipt",
    "DomainError",
    "Email",
    "FatalInconsistencyError",
    "InitializationReport",
    "InvalidStateTransitionError",
    "InvitationResult",
    "LicenseHistoryEntry",
    "ModuleAssignment",
    "ModuleStorePort",
    "NewAdministrator",
    "NewTenant",
    "NotFoundError",
    "NotificationGatewayPort",
    "Password",
    "PersonName",
    "Salutation",
    "StepOutcome",
    "StepStatus",
    "SubscriptionStatus",
    "Tenant",
    "TenantId",
    "TenantName",
    "TenantProfile",
    "TenantSetupPort",
    "TenantSlug",
    "TenantStorePort",
    "TenantUpdate",
    "TransportError",
    "ValidationError",
    "compose_display_name",
]
