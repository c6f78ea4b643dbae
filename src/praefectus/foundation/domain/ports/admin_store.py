"""Port interface for administrator persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from praefectus.foundation.domain.admin_value_objects import AdminStatus
    from praefectus.foundation.domain.models import Administrator, NewAdministrator


@runtime_checkable
class AdminStorePort(Protocol):
    """Port for reading and writing administrator records.

    The store enforces uniqueness of ``(tenant_id, email)``.
    """

    async def create_admin(
        self,
        tenant_id: str,
        profile: NewAdministrator,
        status: AdminStatus,
        password: str | None = None,
    ) -> str:
        """Persist a new administrator and return its id.

        Args:
            tenant_id: Owning tenant. Fixed for the administrator's lifetime.
            profile: Validated administrator data.
            status: Initial lifecycle status.
            password: Plaintext password for direct provisioning. The store
                is responsible for hashing it.

        Raises:
            ConflictError: If the email is already used within the tenant.
        """
        ...

    async def get_admin(self, admin_id: str) -> Administrator | None:
        """Return the administrator, or None if it does not exist."""
        ...

    async def update_admin(self, admin_id: str, patch: Mapping[str, Any]) -> None:
        """Apply a partial update to an administrator record."""
        ...

    async def delete_admin(self, admin_id: str) -> None:
        """Delete a single administrator."""
        ...

    async def list_admins(self, tenant_id: str) -> Sequence[Administrator]:
        """Return the administrators of one tenant."""
        ...

    async def mark_invited(self, tenant_id: str, email: str, invited_at: datetime) -> None:
        """Record that an invitation was (re)issued to ``email``."""
        ...
