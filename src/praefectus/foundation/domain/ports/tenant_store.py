"""Port interfaces for tenant persistence and tenant setup.

``TenantStorePort`` is the source of truth for tenant records.
``TenantSetupPort`` groups the store-side operations the initializer uses
to give a new tenant its technical defaults.

Example:
    >>> from praefectus.foundation.domain.ports import TenantStorePort
    >>> async def tenant_exists(store: TenantStorePort, tenant_id: str) -> bool:
    ...     return await store.get_tenant(tenant_id) is not None
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from praefectus.foundation.domain.models import NewTenant, Tenant
    from praefectus.foundation.domain.outcomes import CascadeDeletionResult


@runtime_checkable
class TenantStorePort(Protocol):
    """Port for reading and writing tenant records.

    Implementations must mint ids themselves and never hand out an id that
    was used before, including ids of deleted tenants.

    Attributes:
        atomic_cascade: True when ``delete_tenant_cascade`` either removes
            everything or nothing. Callers treat failed cascades against
            non-atomic stores as a possible partial delete.
    """

    atomic_cascade: bool

    async def create_tenant(self, record: NewTenant) -> str:
        """Persist a new tenant and return its freshly minted id.

        Raises:
            ConflictError: If the tenant slug is already taken.
        """
        ...

    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        """Return the tenant, or None if it does not exist."""
        ...

    async def update_tenant(self, tenant_id: str, patch: Mapping[str, Any]) -> None:
        """Apply a partial update to a tenant record.

        A rename carries the re-derived ``slug`` alongside ``name``.

        Raises:
            NotFoundError: If the tenant does not exist.
            ConflictError: If the new slug is taken by another tenant.
        """
        ...

    async def delete_tenant_cascade(self, tenant_id: str) -> CascadeDeletionResult | None:
        """Delete a tenant and every record it owns.

        Raises:
            NotFoundError: If the tenant does not exist.
        """
        ...

    async def list_active_tenants(self) -> Sequence[Tenant]:
        """Return all tenants whose active flag is set."""
        ...

    async def list_tenants(self) -> Sequence[Tenant]:
        """Return all tenants, active or not."""
        ...


@runtime_checkable
class TenantSetupPort(Protocol):
    """Port for the store-side steps of tenant initialization.

    Every operation must be safe to re-run for the same tenant.
    """

    async def activate_modules(self, tenant_id: str, module_keys: Sequence[str]) -> None:
        """Enable the given feature modules for the tenant."""
        ...

    async def write_settings(
        self, tenant_id: str, settings: Mapping[str, Mapping[str, Any]]
    ) -> None:
        """Write technical settings, keyed by settings category."""
        ...

    async def bootstrap_settings(self, tenant_id: str) -> None:
        """Run the store's idempotent settings bootstrap for the tenant."""
        ...

    async def link_administrator(self, tenant_id: str, email: str) -> None:
        """Make sure ``email`` is an administrator of the tenant.

        A new record starts active. An existing record keeps its status.
        Must not assign any department or team.
        """
        ...
