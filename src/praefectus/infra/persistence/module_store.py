"""SQL implementation of ``ModuleStorePort``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from praefectus.foundation.domain.models import LicenseHistoryEntry, ModuleAssignment
from praefectus.infra.persistence._sql import row_to_dict, translate_errors, utcnow
from praefectus.infra.persistence.tables import license_history, module_assignments

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class SqlModuleStore:
    """Module assignments and their license history."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    async def list_assignments(self, tenant_id: str) -> Sequence[ModuleAssignment]:
        async with translate_errors("list_assignments", tenant_id=tenant_id):
            async with self._session_factory() as session:
                rows = (
                    await session.execute(
                        select(module_assignments)
                        .where(module_assignments.c.tenant_id == tenant_id)
                        .order_by(module_assignments.c.module_key)
                    )
                ).all()
        return [ModuleAssignment.model_validate(row_to_dict(row)) for row in rows]

    async def set_assignment(
        self,
        tenant_id: str,
        module_key: str,
        enabled: bool,
        history: LicenseHistoryEntry,
    ) -> ModuleAssignment:
        now = self._clock()
        values = {"is_enabled": enabled, "enabled_by": history.performed_by, "updated_at": now}
        async with translate_errors("set_assignment", tenant_id=tenant_id, module_key=module_key):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    update(module_assignments)
                    .where(
                        module_assignments.c.tenant_id == tenant_id,
                        module_assignments.c.module_key == module_key,
                    )
                    .values(**values)
                )
                if result.rowcount == 0:
                    await session.execute(
                        insert(module_assignments).values(
                            tenant_id=tenant_id, module_key=module_key, **values
                        )
                    )
                await session.execute(
                    insert(license_history).values(
                        **history.model_dump(exclude={"created_at"}),
                        created_at=history.created_at or now,
                    )
                )
        return ModuleAssignment(tenant_id=tenant_id, module_key=module_key, **values)

    async def list_license_history(self, tenant_id: str) -> Sequence[LicenseHistoryEntry]:
        async with translate_errors("list_license_history", tenant_id=tenant_id):
            async with self._session_factory() as session:
                rows = (
                    await session.execute(
                        select(license_history)
                        .where(license_history.c.tenant_id == tenant_id)
                        .order_by(license_history.c.created_at.desc(), license_history.c.id.desc())
                    )
                ).all()
        return [LicenseHistoryEntry.model_validate(row_to_dict(row)) for row in rows]
