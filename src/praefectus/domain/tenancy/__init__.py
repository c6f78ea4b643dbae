"""Praefectus Domain Tenancy -- tenant lifecycle, initialization and module licensing."""

from praefectus.domain.tenancy.deletion_guard import DeletionGuard, DeletionState
from praefectus.domain.tenancy.module_licensing import ModuleLicensingService
from praefectus.domain.tenancy.tenant_initializer import (
    INITIALIZATION_STEPS,
    TenantInitializer,
)
from praefectus.domain.tenancy.tenant_lifecycle import TenantLifecycleManager

__all__ = [
    "INITIALIZATION_STEPS",
    "DeletionGuard",
    "DeletionState",
    "ModuleLicensingService",
    "TenantInitializer",
    "TenantLifecycleManager",
]
