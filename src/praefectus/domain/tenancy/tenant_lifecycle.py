"""Tenant lifecycle orchestration: create, edit, activate, deactivate, delete.

``TenantLifecycleManager`` validates input locally, applies the configured
defaults, delegates persistence to a ``TenantStorePort`` and owns the
single-flight guard around deletion. It never caches tenant state: every
operation re-reads what it needs from the store.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, NoReturn

from praefectus.domain.tenancy.deletion_guard import DeletionGuard, DeletionState
from praefectus.foundation.application.background import BackgroundTaskRunner
from praefectus.foundation.application.port_calls import call_port
from praefectus.foundation.application.settings import get_lifecycle_settings
from praefectus.foundation.domain import validation
from praefectus.foundation.domain.exceptions import (
    DomainError,
    FatalInconsistencyError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from praefectus.foundation.domain.models import NewTenant, Tenant, TenantProfile, TenantUpdate
from praefectus.foundation.domain.outcomes import DeletionOutcome
from praefectus.foundation.domain.tenant_value_objects import (
    BillingCycle,
    CurrencyCode,
    SubscriptionStatus,
    TenantName,
    TenantSlug,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from praefectus.domain.tenancy.tenant_initializer import TenantInitializer
    from praefectus.foundation.application.settings import LifecycleSettings
    from praefectus.foundation.domain.ports import TenantStorePort

logger = logging.getLogger(__name__)

_EMAIL_FIELDS = ("contact_email", "billing_email", "primary_contact_email")
_TEXT_FIELDS = (
    "primary_contact_name",
    "phone",
    "website",
    "industry",
    "description",
    "address",
    "postal_code",
    "city",
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TenantLifecycleManager:
    """Creates, edits, (de)activates and deletes tenants.

    Args:
        store: Tenant persistence port.
        initializer: Zero-data initializer scheduled after each successful
            creation. ``None`` disables initialization.
        background: Runner that owns the fire-and-forget initializer tasks.
        settings: Declared defaults. Loaded from the environment if omitted.
        clock: Source of "now" for subscription timestamps.
    """

    def __init__(
        self,
        store: TenantStorePort,
        initializer: TenantInitializer | None = None,
        *,
        background: BackgroundTaskRunner | None = None,
        settings: LifecycleSettings | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._initializer = initializer
        self._background = background or BackgroundTaskRunner()
        self._settings = settings or get_lifecycle_settings()
        self._clock = clock
        self._guard = DeletionGuard()

    @property
    def background(self) -> BackgroundTaskRunner:
        return self._background

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_tenant(
        self,
        profile: TenantProfile,
        *,
        creator_email: str | None = None,
    ) -> str:
        """Create a tenant and schedule its initialization.

        The initializer runs in the background; its outcome never affects
        the tenant's existence or the value returned here.

        Args:
            profile: Tenant data. Only ``name`` is required.
            creator_email: Operator to link as the first administrator.

        Returns:
            The store-minted tenant id.

        Raises:
            ValidationError: On malformed input. No store call is made.
            ConflictError: If the derived slug is already taken.
            TransportError: If the store is unreachable.
        """
        record = self._build_new_tenant(profile)
        creator = validation.optional_email(creator_email, "creator_email")

        tenant_id = await call_port(
            "create_tenant", self._store.create_tenant(record), slug=record.slug
        )
        logger.info(
            "tenant_created",
            extra={
                "tenant_id": tenant_id,
                "slug": record.slug,
                "subscription_status": record.subscription_status.value,
            },
        )

        if self._initializer is not None:
            self._background.spawn(
                self._initializer.initialize(tenant_id, creator),
                name=f"initialize-tenant:{tenant_id}",
            )
        return tenant_id

    def _build_new_tenant(self, profile: TenantProfile) -> NewTenant:
        name = validation.validated("name", TenantName, profile.name)

        fields: dict[str, Any] = {
            field: validation.optional_email(getattr(profile, field), field)
            for field in _EMAIL_FIELDS
        }
        fields.update(
            {field: validation.optional_text(getattr(profile, field)) for field in _TEXT_FIELDS}
        )

        subscription_status = (
            validation.choice(SubscriptionStatus, profile.subscription_status, "subscription_status")
            if validation.optional_text(profile.subscription_status)
            else self._settings.default_subscription_status
        )
        billing_cycle = (
            validation.choice(BillingCycle, profile.billing_cycle, "billing_cycle")
            if validation.optional_text(profile.billing_cycle)
            else self._settings.default_billing_cycle
        )
        currency = (
            validation.validated("currency", CurrencyCode, profile.currency).value
            if validation.optional_text(profile.currency)
            else self._settings.default_currency
        )

        return NewTenant(
            name=name.value,
            slug=self._derive_slug(name),
            country=validation.optional_text(profile.country) or self._settings.default_country,
            timezone=validation.optional_text(profile.timezone) or self._settings.default_timezone,
            subscription_status=subscription_status,
            currency=currency,
            billing_cycle=billing_cycle,
            is_active=True,
            subscription_started_at=self._clock(),
            **fields,
        )

    @staticmethod
    def _derive_slug(name: TenantName) -> str:
        try:
            return TenantSlug.from_name(name).value
        except ValueError as exc:
            raise ValidationError("name", str(exc)) from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_tenant(self, tenant_id: str) -> Tenant:
        """Return the tenant.

        Raises:
            ValidationError: If ``tenant_id`` is malformed.
            NotFoundError: If the tenant does not exist.
        """
        tid = validation.tenant_id(tenant_id)
        return await self._require_tenant(tid)

    async def list_tenants(self, *, active_only: bool = False) -> list[Tenant]:
        if active_only:
            tenants = await call_port("list_active_tenants", self._store.list_active_tenants())
        else:
            tenants = await call_port("list_tenants", self._store.list_tenants())
        return list(tenants)

    async def _require_tenant(self, tenant_id: str) -> Tenant:
        tenant = await call_port(
            "get_tenant", self._store.get_tenant(tenant_id), tenant_id=tenant_id
        )
        if tenant is None:
            raise NotFoundError("Tenant", tenant_id)
        return tenant

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def update_tenant(self, tenant_id: str, update: TenantUpdate) -> Tenant:
        """Apply settings and billing edits.

        Only fields explicitly set on ``update`` are written. A rename also
        writes the slug derived from the new name. The active flag and the
        subscription start are not editable here.

        Raises:
            ValidationError: On malformed input. No store call is made.
            NotFoundError: If the tenant does not exist.
            ConflictError: If another tenant already holds the new slug.
        """
        tid = validation.tenant_id(tenant_id)
        patch = self._build_patch(update)
        current = await self._require_tenant(tid)
        if not patch:
            return current

        await call_port("update_tenant", self._store.update_tenant(tid, patch), tenant_id=tid)
        logger.info("tenant_updated", extra={"tenant_id": tid, "fields": sorted(patch)})
        return await self._require_tenant(tid)

    def _build_patch(self, update: TenantUpdate) -> dict[str, Any]:
        raw = update.model_dump(exclude_unset=True)
        patch: dict[str, Any] = {}
        for field, value in raw.items():
            if field == "name":
                name = validation.validated("name", TenantName, value)
                patch["name"] = name.value
                patch["slug"] = self._derive_slug(name)
            elif field in _EMAIL_FIELDS:
                patch[field] = validation.optional_email(value, field)
            elif field == "subscription_status":
                patch[field] = validation.choice(SubscriptionStatus, value, field)
            elif field == "billing_cycle":
                patch[field] = validation.choice(BillingCycle, value, field)
            elif field == "currency":
                patch[field] = validation.validated(field, CurrencyCode, value).value
            elif field in ("country", "timezone"):
                text = validation.optional_text(value)
                if text is None:
                    raise ValidationError(field, "Field cannot be blank")
                patch[field] = text
            else:
                patch[field] = validation.optional_text(value)
        return patch

    async def set_active(self, tenant_id: str, active: bool) -> Tenant:
        """Activate or deactivate a tenant.

        Activating stamps the subscription start with the current time,
        deactivating clears it. Requesting the current state is a no-op.
        Concurrent flips are not serialized; the last writer wins.

        Raises:
            ValidationError: If ``tenant_id`` is malformed.
            NotFoundError: If the tenant does not exist.
        """
        tid = validation.tenant_id(tenant_id)
        current = await self._require_tenant(tid)
        if current.is_active == active:
            logger.debug("tenant_active_unchanged", extra={"tenant_id": tid, "is_active": active})
            return current

        patch: dict[str, Any] = {
            "is_active": active,
            "subscription_started_at": self._clock() if active else None,
        }
        await call_port("update_tenant", self._store.update_tenant(tid, patch), tenant_id=tid)
        logger.info(
            "tenant_activated" if active else "tenant_deactivated",
            extra={"tenant_id": tid},
        )
        return await self._require_tenant(tid)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def deletion_state(self, tenant_id: str) -> DeletionState:
        return self._guard.state(validation.tenant_id(tenant_id))

    async def delete_tenant(self, tenant_id: str) -> DeletionOutcome:
        """Delete a tenant and everything it owns.

        A second call for the same tenant while one is in flight returns
        ``ALREADY_IN_PROGRESS`` immediately without contacting the store.
        If the caller is cancelled while the cascade is running, the tenant
        stays marked as deleting in this process, since the store may still
        apply the cascade.

        Returns:
            ``DELETED`` once the tenant no longer resolves.

        Raises:
            ValidationError: If ``tenant_id`` is malformed.
            NotFoundError: If the tenant does not exist.
            ConflictError: If an atomic store refused the cascade.
            TransportError: If an atomic store was unreachable.
            FatalInconsistencyError: If the cascade may have been applied
                partially, or the tenant still resolves afterwards.
        """
        tid = validation.tenant_id(tenant_id)
        with self._guard.claim(tid) as claim:
            if claim is None:
                return DeletionOutcome.ALREADY_IN_PROGRESS

            tenant = await self._require_tenant(tid)
            logger.info("tenant_deletion_started", extra={"tenant_id": tid, "slug": tenant.slug})

            try:
                result = await self._store.delete_tenant_cascade(tid)
            except asyncio.CancelledError:
                claim.hold()
                logger.error(
                    "tenant_deletion_cancelled",
                    extra={"tenant_id": tid, "error": "cascade outcome unknown"},
                )
                raise
            except Exception as exc:
                self._raise_cascade_failure(tid, exc)

            await self._verify_deleted(tid)
            claim.complete()

        logger.info(
            "tenant_deleted",
            extra={
                "tenant_id": tid,
                "categories_processed": result.categories_processed if result else [],
            },
        )
        return DeletionOutcome.DELETED

    def _raise_cascade_failure(self, tenant_id: str, exc: Exception) -> NoReturn:
        reason = str(exc) or type(exc).__name__
        if getattr(self._store, "atomic_cascade", False):
            logger.warning(
                "tenant_deletion_failed",
                extra={"tenant_id": tenant_id, "error": reason},
            )
            if isinstance(exc, DomainError):
                raise exc
            raise TransportError("delete_tenant_cascade", reason, tenant_id=tenant_id) from exc

        logger.error(
            "tenant_deletion_inconsistent",
            extra={"tenant_id": tenant_id, "error": reason},
        )
        raise FatalInconsistencyError(
            "Cascade delete failed and may have been applied partially",
            tenant_id=tenant_id,
            cause=reason,
        ) from exc

    async def _verify_deleted(self, tenant_id: str) -> None:
        try:
            remaining = await self._store.get_tenant(tenant_id)
        except Exception as exc:
            raise FatalInconsistencyError(
                "Cascade delete reported success but could not be verified",
                tenant_id=tenant_id,
                cause=str(exc) or type(exc).__name__,
            ) from exc
        if remaining is not None:
            logger.error("tenant_deletion_unverified", extra={"tenant_id": tenant_id})
            raise FatalInconsistencyError(
                "Tenant still resolves after cascade delete",
                tenant_id=tenant_id,
            )
