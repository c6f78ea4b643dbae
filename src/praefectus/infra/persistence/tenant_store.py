"""SQL implementations of ``TenantStorePort`` and ``TenantSetupPort``.

Control-plane repositories: no row-level tenant filtering, the console
sees every tenant.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update

from praefectus.foundation.domain.admin_value_objects import (
    AdminRole,
    AdminStatus,
    Salutation,
    compose_display_name,
)
from praefectus.foundation.domain.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from praefectus.foundation.domain.models import Tenant
from praefectus.foundation.domain.outcomes import CascadeDeletionResult
from praefectus.infra.persistence._sql import plain, row_to_dict, translate_errors, utcnow
from praefectus.infra.persistence.tables import (
    administrators,
    license_history,
    module_assignments,
    retired_tenant_ids,
    tenant_settings,
    tenants,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from praefectus.foundation.domain.models import NewTenant

logger = logging.getLogger(__name__)

_MAX_ID_ATTEMPTS = 5
_UPDATABLE_COLUMNS = frozenset(tenants.c.keys()) - {"id", "created_at", "updated_at"}

# Children removed before the tenant row, in order.
_CASCADE = (
    ("administrators", administrators, "administrators_deleted"),
    ("module_assignments", module_assignments, "module_assignments_deleted"),
    ("license_history", license_history, "license_history_deleted"),
    ("tenant_settings", tenant_settings, "settings_deleted"),
)


def _tenant_query() -> Any:
    admin_count = (
        select(func.count())
        .select_from(administrators)
        .where(administrators.c.tenant_id == tenants.c.id)
        .scalar_subquery()
        .label("admin_count")
    )
    return select(tenants, admin_count)


class SqlTenantStore:
    """Tenant records in a relational database.

    Deletion runs in a single transaction together with retiring the id,
    so ``atomic_cascade`` is True.

    Args:
        session_factory: Async session factory.
        clock: Source of timestamps.
        id_factory: Produces candidate ids; defaults to ``uuid.uuid4``.
    """

    atomic_cascade = True

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock
        self._id_factory = id_factory

    async def create_tenant(self, record: NewTenant) -> str:
        async with translate_errors(
            "create_tenant", "Tenant name is already in use", slug=record.slug
        ):
            async with self._session_factory() as session, session.begin():
                tenant_id = await self._mint_id(session)
                now = self._clock()
                await session.execute(
                    insert(tenants).values(
                        id=tenant_id,
                        created_at=now,
                        updated_at=now,
                        employee_count=0,
                        **plain(record.model_dump()),
                    )
                )
        logger.debug("tenant_row_inserted", extra={"tenant_id": tenant_id, "slug": record.slug})
        return tenant_id

    async def _mint_id(self, session: AsyncSession) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = str(self._id_factory())
            taken = await session.scalar(
                select(func.count()).select_from(tenants).where(tenants.c.id == candidate)
            )
            retired = await session.scalar(
                select(func.count())
                .select_from(retired_tenant_ids)
                .where(retired_tenant_ids.c.id == candidate)
            )
            if not taken and not retired:
                return candidate
            logger.warning("tenant_id_collision", extra={"candidate": candidate})
        raise ConflictError("Could not mint an unused tenant id")

    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        async with translate_errors("get_tenant", tenant_id=tenant_id):
            async with self._session_factory() as session:
                row = (
                    await session.execute(_tenant_query().where(tenants.c.id == tenant_id))
                ).first()
        if row is None:
            return None
        return Tenant.model_validate(row_to_dict(row))

    async def update_tenant(self, tenant_id: str, patch: Mapping[str, Any]) -> None:
        unknown = set(patch) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValidationError(sorted(unknown)[0], "Field cannot be updated")
        # The slug only moves together with the name it is derived from.
        if "slug" in patch and "name" not in patch:
            raise ValidationError("slug", "Slug cannot be updated without the name")
        async with translate_errors(
            "update_tenant", "Tenant name is already in use", tenant_id=tenant_id
        ):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    update(tenants)
                    .where(tenants.c.id == tenant_id)
                    .values(updated_at=self._clock(), **plain(patch))
                )
        if result.rowcount == 0:
            raise NotFoundError("Tenant", tenant_id)

    async def delete_tenant_cascade(self, tenant_id: str) -> CascadeDeletionResult:
        result = CascadeDeletionResult()
        logger.info("cascade_deletion_started", extra={"tenant_id": tenant_id})
        async with translate_errors("delete_tenant_cascade", tenant_id=tenant_id):
            async with self._session_factory() as session, session.begin():
                exists = await session.scalar(select(tenants.c.id).where(tenants.c.id == tenant_id))
                if exists is None:
                    raise NotFoundError("Tenant", tenant_id)
                for category, table, counter in _CASCADE:
                    deleted = await session.execute(
                        delete(table).where(table.c.tenant_id == tenant_id)
                    )
                    setattr(result, counter, deleted.rowcount)
                    result.categories_processed.append(category)
                await session.execute(delete(tenants).where(tenants.c.id == tenant_id))
                await session.execute(
                    insert(retired_tenant_ids).values(id=tenant_id, retired_at=self._clock())
                )
                result.categories_processed.append("tenant")
        logger.info(
            "cascade_deletion_completed",
            extra={
                "tenant_id": tenant_id,
                "administrators_deleted": result.administrators_deleted,
                "categories_processed": result.categories_processed,
            },
        )
        return result

    async def list_active_tenants(self) -> Sequence[Tenant]:
        return await self._list(active_only=True)

    async def list_tenants(self) -> Sequence[Tenant]:
        return await self._list(active_only=False)

    async def _list(self, *, active_only: bool) -> list[Tenant]:
        query = _tenant_query()
        if active_only:
            query = query.where(tenants.c.is_active.is_(True))
        query = query.order_by(tenants.c.created_at.desc(), tenants.c.name)
        async with translate_errors("list_tenants"):
            async with self._session_factory() as session:
                rows = (await session.execute(query)).all()
        return [Tenant.model_validate(row_to_dict(row)) for row in rows]


class SqlTenantSetup:
    """Store-side tenant initialization steps.

    Every method can be re-run for the same tenant without duplicating rows.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock
        self._id_factory = id_factory

    async def activate_modules(self, tenant_id: str, module_keys: Sequence[str]) -> None:
        async with translate_errors("activate_modules", tenant_id=tenant_id):
            async with self._session_factory() as session, session.begin():
                existing = set(
                    await session.scalars(
                        select(module_assignments.c.module_key).where(
                            module_assignments.c.tenant_id == tenant_id
                        )
                    )
                )
                now = self._clock()
                for key in module_keys:
                    if key in existing:
                        continue
                    await session.execute(
                        insert(module_assignments).values(
                            tenant_id=tenant_id,
                            module_key=key,
                            is_enabled=True,
                            enabled_by="system",
                            updated_at=now,
                        )
                    )
                    await session.execute(
                        insert(license_history).values(
                            tenant_id=tenant_id,
                            action_type="module_enabled",
                            module_key=key,
                            old_value={"is_enabled": False},
                            new_value={"is_enabled": True},
                            performed_by="system",
                            notes="Default module activation",
                            created_at=now,
                        )
                    )

    async def write_settings(
        self, tenant_id: str, settings: Mapping[str, Mapping[str, Any]]
    ) -> None:
        async with translate_errors("write_settings", tenant_id=tenant_id):
            async with self._session_factory() as session, session.begin():
                for category, values in settings.items():
                    await self._upsert_settings(session, tenant_id, category, dict(values))

    async def bootstrap_settings(self, tenant_id: str) -> None:
        """Create the ``general`` settings category from the tenant's own record.

        Leaves an existing ``general`` category untouched.
        """
        async with translate_errors("bootstrap_settings", tenant_id=tenant_id):
            async with self._session_factory() as session, session.begin():
                tenant = (
                    await session.execute(
                        select(tenants.c.timezone, tenants.c.currency, tenants.c.country).where(
                            tenants.c.id == tenant_id
                        )
                    )
                ).first()
                if tenant is None:
                    raise NotFoundError("Tenant", tenant_id)
                present = await session.scalar(
                    select(func.count())
                    .select_from(tenant_settings)
                    .where(
                        tenant_settings.c.tenant_id == tenant_id,
                        tenant_settings.c.category == "general",
                    )
                )
                if present:
                    return
                await session.execute(
                    insert(tenant_settings).values(
                        tenant_id=tenant_id,
                        category="general",
                        values={
                            "timezone": tenant.timezone,
                            "currency": tenant.currency,
                            "country": tenant.country,
                            "locale": "de-DE",
                            "date_format": "DD.MM.YYYY",
                        },
                        updated_at=self._clock(),
                    )
                )

    async def link_administrator(self, tenant_id: str, email: str) -> None:
        """Make sure ``email`` is an administrator of the tenant.

        A missing record is created active, with names derived from the
        address and no department or team. An existing record is left as
        it is: its status only moves through ``advance_status``.
        """
        normalized = email.strip().lower()
        async with translate_errors("link_administrator", tenant_id=tenant_id):
            async with self._session_factory() as session, session.begin():
                now = self._clock()
                existing = await session.scalar(
                    select(administrators.c.id).where(
                        administrators.c.tenant_id == tenant_id,
                        administrators.c.email == normalized,
                    )
                )
                if existing is not None:
                    logger.info(
                        "creator_already_administrator",
                        extra={"tenant_id": tenant_id, "admin_id": existing},
                    )
                    return
                first_name, last_name = _names_from_email(normalized)
                await session.execute(
                    insert(administrators).values(
                        id=str(self._id_factory()),
                        tenant_id=tenant_id,
                        email=normalized,
                        first_name=first_name,
                        last_name=last_name,
                        salutation=Salutation.DIVERS.value,
                        display_name=compose_display_name(Salutation.DIVERS, first_name, last_name),
                        role=AdminRole.ADMIN.value,
                        status=AdminStatus.ACTIVE.value,
                        invitation_count=0,
                        created_at=now,
                        updated_at=now,
                    )
                )

    async def _upsert_settings(
        self, session: AsyncSession, tenant_id: str, category: str, values: dict[str, Any]
    ) -> None:
        now = self._clock()
        result = await session.execute(
            update(tenant_settings)
            .where(
                tenant_settings.c.tenant_id == tenant_id,
                tenant_settings.c.category == category,
            )
            .values(values=values, updated_at=now)
        )
        if result.rowcount == 0:
            await session.execute(
                insert(tenant_settings).values(
                    tenant_id=tenant_id, category=category, values=values, updated_at=now
                )
            )

    async def read_settings(self, tenant_id: str) -> dict[str, dict[str, Any]]:
        """Return all settings categories of a tenant."""
        async with translate_errors("read_settings", tenant_id=tenant_id):
            async with self._session_factory() as session:
                rows = (
                    await session.execute(
                        select(tenant_settings.c.category, tenant_settings.c["values"]).where(
                            tenant_settings.c.tenant_id == tenant_id
                        )
                    )
                ).all()
        return {row[0]: dict(row[1]) for row in rows}


def _names_from_email(email: str) -> tuple[str, str]:
    """``max.mustermann@acme.de`` -> ``("Max", "Mustermann")``; falls back to "Nutzer"."""
    local = email.split("@", 1)[0]
    parts = [p for p in local.replace("_", ".").replace("-", ".").split(".") if p]
    first = parts[0].capitalize() if parts else "Nutzer"
    last = " ".join(p.capitalize() for p in parts[1:]) or "Nutzer"
    return first, last
