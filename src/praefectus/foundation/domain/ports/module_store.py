"""Port interface for per-tenant module assignments and license history."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from praefectus.foundation.domain.models import LicenseHistoryEntry, ModuleAssignment


@runtime_checkable
class ModuleStorePort(Protocol):
    """Port for module licensing data."""

    async def list_assignments(self, tenant_id: str) -> Sequence[ModuleAssignment]:
        """Return all module assignments of a tenant."""
        ...

    async def set_assignment(
        self,
        tenant_id: str,
        module_key: str,
        enabled: bool,
        history: LicenseHistoryEntry,
    ) -> ModuleAssignment:
        """Upsert one assignment and append its history entry atomically."""
        ...

    async def list_license_history(self, tenant_id: str) -> Sequence[LicenseHistoryEntry]:
        """Return license history entries, newest first."""
        ...
