"""Per-tenant feature module licensing.

Switching a module on or off upserts the tenant's module assignment and
appends a license history entry in the same store transaction.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from praefectus.foundation.application.port_calls import call_port
from praefectus.foundation.domain import validation
from praefectus.foundation.domain.exceptions import NotFoundError, ValidationError
from praefectus.foundation.domain.models import LicenseHistoryEntry, ModuleAssignment

if TYPE_CHECKING:
    from collections.abc import Callable

    from praefectus.foundation.domain.ports import ModuleStorePort, TenantStorePort

logger = logging.getLogger(__name__)

_MODULE_KEY_PATTERN = re.compile(r"^[a-z][a-z0-9_]{0,63}$")

ACTION_MODULE_ENABLED = "module_enabled"
ACTION_MODULE_DISABLED = "module_disabled"


class ModuleLicensingService:
    """Enables and disables feature modules for a tenant."""

    def __init__(
        self,
        tenants: TenantStorePort,
        modules: ModuleStorePort,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._tenants = tenants
        self._modules = modules
        self._clock = clock or (lambda: datetime.now(UTC))

    async def list_modules(self, tenant_id: str) -> list[ModuleAssignment]:
        tid = validation.tenant_id(tenant_id)
        await self._require_tenant(tid)
        assignments = await call_port(
            "list_assignments", self._modules.list_assignments(tid), tenant_id=tid
        )
        return sorted(assignments, key=lambda a: a.module_key)

    async def license_history(self, tenant_id: str) -> list[LicenseHistoryEntry]:
        tid = validation.tenant_id(tenant_id)
        await self._require_tenant(tid)
        history = await call_port(
            "list_license_history", self._modules.list_license_history(tid), tenant_id=tid
        )
        return list(history)

    async def set_module_enabled(
        self,
        tenant_id: str,
        module_key: str,
        enabled: bool,
        *,
        performed_by: str | None = None,
        notes: str | None = None,
    ) -> ModuleAssignment:
        """Switch one module on or off.

        A request matching the current assignment is a no-op and writes no
        history entry.

        Raises:
            ValidationError: On a malformed tenant id or module key.
            NotFoundError: If the tenant does not exist.
        """
        tid = validation.tenant_id(tenant_id)
        key = module_key.strip() if isinstance(module_key, str) else ""
        if not _MODULE_KEY_PATTERN.match(key):
            raise ValidationError(
                "module_key", "Must be lowercase letters, digits and underscores", value=module_key
            )
        await self._require_tenant(tid)

        current = {
            a.module_key: a
            for a in await call_port(
                "list_assignments", self._modules.list_assignments(tid), tenant_id=tid
            )
        }.get(key)
        was_enabled = current.is_enabled if current is not None else False
        if current is not None and was_enabled == enabled:
            return current

        entry = LicenseHistoryEntry(
            tenant_id=tid,
            action_type=ACTION_MODULE_ENABLED if enabled else ACTION_MODULE_DISABLED,
            module_key=key,
            old_value={"is_enabled": was_enabled},
            new_value={"is_enabled": enabled},
            performed_by=performed_by,
            notes=validation.optional_text(notes),
            created_at=self._clock(),
        )
        assignment = await call_port(
            "set_assignment",
            self._modules.set_assignment(tid, key, enabled, entry),
            tenant_id=tid,
            module_key=key,
        )
        logger.info(
            "tenant_module_toggled",
            extra={"tenant_id": tid, "module_key": key, "is_enabled": enabled},
        )
        return assignment

    async def _require_tenant(self, tenant_id: str) -> None:
        tenant = await call_port(
            "get_tenant", self._tenants.get_tenant(tenant_id), tenant_id=tenant_id
        )
        if tenant is None:
            raise NotFoundError("Tenant", tenant_id)
