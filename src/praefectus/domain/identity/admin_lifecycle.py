"""Administrator lifecycle: create, edit, advance status, delete.

Administrators are bound to exactly one tenant for their whole lifetime,
and their email never changes after creation. Two creation modes exist:

* ``invite``: the record starts in ``created``. No e-mail is sent here;
  ``InvitationDispatcher`` issues it as a separate step.
* ``direct``: a password is required and the record starts ``active``,
  able to sign in immediately. Meant for controlled or test provisioning.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from praefectus.foundation.application.port_calls import call_port
from praefectus.foundation.application.settings import get_lifecycle_settings
from praefectus.foundation.domain import validation
from praefectus.foundation.domain.admin_value_objects import (
    AdminRole,
    AdminStatus,
    Password,
    Salutation,
    compose_display_name,
)
from praefectus.foundation.domain.exceptions import (
    InvalidStateTransitionError,
    NotFoundError,
    ValidationError,
)
from praefectus.foundation.domain.models import NewAdministrator

if TYPE_CHECKING:
    from praefectus.foundation.application.settings import LifecycleSettings
    from praefectus.foundation.domain.models import AdminProfile, Administrator, AdminUpdate
    from praefectus.foundation.domain.ports import AdminStorePort, TenantStorePort

logger = logging.getLogger(__name__)


class CreationMode(StrEnum):
    """How a new administrator is provisioned."""

    INVITE = "invite"
    DIRECT = "direct"


_NAME_FIELDS = ("first_name", "last_name", "salutation")


class AdminLifecycleManager:
    """Creates, edits, advances and deletes administrators of a tenant.

    Args:
        admins: Administrator persistence port.
        tenants: Tenant persistence port, used to check tenant existence.
        settings: Supplies the minimum password length.
    """

    def __init__(
        self,
        admins: AdminStorePort,
        tenants: TenantStorePort,
        *,
        settings: LifecycleSettings | None = None,
    ) -> None:
        self._admins = admins
        self._tenants = tenants
        self._settings = settings or get_lifecycle_settings()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create(
        self,
        tenant_id: str,
        profile: AdminProfile,
        mode: CreationMode | str,
        password: str | None = None,
    ) -> str:
        """Create an administrator for a tenant.

        All input is validated before any store call. In ``invite`` mode a
        supplied password is ignored.

        Returns:
            The new administrator's id.

        Raises:
            ValidationError: On malformed email, missing name or salutation,
                unknown role, or (direct mode) a missing or short password.
            NotFoundError: If the tenant does not exist.
            ConflictError: If the email is already used within the tenant.
        """
        creation_mode = validation.choice(CreationMode, mode, "mode")
        tid = validation.tenant_id(tenant_id)
        record = self._build_new_admin(profile)

        if creation_mode is CreationMode.DIRECT:
            status = AdminStatus.ACTIVE
            secret: str | None = self._require_password(password)
        else:
            status = AdminStatus.CREATED
            secret = None
            if password is not None:
                logger.debug("admin_invite_password_ignored", extra={"tenant_id": tid})

        await self._require_tenant(tid)
        admin_id = await call_port(
            "create_admin",
            self._admins.create_admin(tid, record, status, password=secret),
            tenant_id=tid,
        )
        logger.info(
            "admin_created",
            extra={
                "tenant_id": tid,
                "admin_id": admin_id,
                "mode": creation_mode.value,
                "status": status.value,
                "role": record.role.value,
            },
        )
        return admin_id

    def _build_new_admin(self, profile: AdminProfile) -> NewAdministrator:
        email = validation.email(profile.email)
        first_name = validation.person_name(profile.first_name, "first_name")
        last_name = validation.person_name(profile.last_name, "last_name")
        salutation = validation.choice(Salutation, profile.salutation, "salutation")
        role = validation.choice(AdminRole, profile.role, "role")
        return NewAdministrator(
            email=email,
            first_name=first_name,
            last_name=last_name,
            salutation=salutation,
            display_name=compose_display_name(salutation, first_name, last_name),
            phone=validation.optional_text(profile.phone),
            position=validation.optional_text(profile.position),
            role=role,
        )

    def _require_password(self, password: str | None) -> str:
        if not password:
            raise ValidationError("password", "Password is required for direct creation")
        checked = validation.validated(
            "password",
            lambda v: Password(v, min_length=self._settings.admin_min_password_length),
            password,
        )
        return checked.value

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_admin(self, admin_id: str, tenant_id: str) -> Administrator:
        """Return an administrator of the given tenant.

        Raises:
            NotFoundError: If the tenant or administrator does not exist.
            ValidationError: If the administrator belongs to another tenant.
        """
        aid = validation.admin_id(admin_id)
        tid = validation.tenant_id(tenant_id)
        return await self._owned_admin(aid, tid)

    async def list_admins(self, tenant_id: str) -> list[Administrator]:
        tid = validation.tenant_id(tenant_id)
        await self._require_tenant(tid)
        admins = await call_port("list_admins", self._admins.list_admins(tid), tenant_id=tid)
        return sorted(admins, key=lambda a: a.created_at)

    async def _require_tenant(self, tenant_id: str) -> None:
        tenant = await call_port(
            "get_tenant", self._tenants.get_tenant(tenant_id), tenant_id=tenant_id
        )
        if tenant is None:
            raise NotFoundError("Tenant", tenant_id)

    async def _owned_admin(self, admin_id: str, tenant_id: str) -> Administrator:
        await self._require_tenant(tenant_id)
        admin = await call_port(
            "get_admin", self._admins.get_admin(admin_id), admin_id=admin_id
        )
        if admin is None:
            raise NotFoundError("Administrator", admin_id, tenant_id=tenant_id)
        if admin.tenant_id != tenant_id:
            logger.warning(
                "admin_cross_tenant_access_rejected",
                extra={"admin_id": admin_id, "tenant_id": tenant_id},
            )
            raise ValidationError(
                "tenant_id",
                "Administrator does not belong to this tenant",
                admin_id=admin_id,
            )
        return admin

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def update(self, admin_id: str, tenant_id: str, update: AdminUpdate) -> Administrator:
        """Edit name, salutation, phone and position.

        ``email`` and ``tenant_id`` may be present only with their current
        values. The display name is recomputed when a name part changes.

        Raises:
            ValidationError: On malformed input or an attempt to change the
                email or tenant binding. The stored record is left untouched.
            NotFoundError: If the tenant or administrator does not exist.
        """
        aid = validation.admin_id(admin_id)
        tid = validation.tenant_id(tenant_id)
        raw = update.model_dump(exclude_unset=True)
        patch = self._build_patch(raw)

        current = await self._owned_admin(aid, tid)
        self._reject_immutable_changes(current, raw)

        if any(field in patch for field in _NAME_FIELDS):
            salutation = patch.get("salutation", current.salutation)
            patch["display_name"] = compose_display_name(
                salutation,
                patch.get("first_name", current.first_name),
                patch.get("last_name", current.last_name),
            )
        if not patch:
            return current

        await call_port("update_admin", self._admins.update_admin(aid, patch), admin_id=aid)
        logger.info(
            "admin_updated",
            extra={"tenant_id": tid, "admin_id": aid, "fields": sorted(patch)},
        )
        return await self._owned_admin(aid, tid)

    @staticmethod
    def _build_patch(raw: dict[str, Any]) -> dict[str, Any]:
        patch: dict[str, Any] = {}
        if "first_name" in raw:
            patch["first_name"] = validation.person_name(raw["first_name"], "first_name")
        if "last_name" in raw:
            patch["last_name"] = validation.person_name(raw["last_name"], "last_name")
        if "salutation" in raw:
            patch["salutation"] = validation.choice(Salutation, raw["salutation"], "salutation")
        for field in ("phone", "position"):
            if field in raw:
                patch[field] = validation.optional_text(raw[field])
        return patch

    @staticmethod
    def _reject_immutable_changes(current: Administrator, raw: dict[str, Any]) -> None:
        requested_email = raw.get("email")
        if requested_email is not None and requested_email.strip().lower() != current.email:
            raise ValidationError(
                "email", "Email cannot be changed after creation", admin_id=current.id
            )
        requested_tenant = raw.get("tenant_id")
        if requested_tenant is not None and requested_tenant.strip().lower() != current.tenant_id:
            raise ValidationError(
                "tenant_id", "Tenant binding cannot be changed", admin_id=current.id
            )

    async def advance_status(
        self, admin_id: str, tenant_id: str, target: AdminStatus | str
    ) -> Administrator:
        """Move an administrator along ``created -> pending_invitation -> active``.

        Re-applying the current status is a no-op.

        Raises:
            InvalidStateTransitionError: For any other transition.
        """
        aid = validation.admin_id(admin_id)
        tid = validation.tenant_id(tenant_id)
        target_status = validation.choice(AdminStatus, target, "status")

        current = await self._owned_admin(aid, tid)
        if current.status is target_status:
            return current
        if not current.status.can_transition_to(target_status):
            raise InvalidStateTransitionError(
                f"Cannot move administrator from {current.status.value} "
                f"to {target_status.value}",
                admin_id=aid,
                current_status=current.status.value,
                target_status=target_status.value,
            )

        await call_port(
            "update_admin",
            self._admins.update_admin(aid, {"status": target_status}),
            admin_id=aid,
        )
        logger.info(
            "admin_status_changed",
            extra={
                "tenant_id": tid,
                "admin_id": aid,
                "from_status": current.status.value,
                "to_status": target_status.value,
            },
        )
        return await self._owned_admin(aid, tid)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def delete(
        self, admin_id: str, tenant_id: str, *, actor_admin_id: str | None = None
    ) -> None:
        """Delete one administrator, independent of tenant deletion.

        Args:
            admin_id: Administrator to remove.
            tenant_id: Tenant the caller believes owns the administrator.
            actor_admin_id: Administrator performing the deletion, if the
                caller is one. Administrators cannot remove themselves.

        Raises:
            ValidationError: On a cross-tenant attempt or self-removal.
            NotFoundError: If the tenant or administrator does not exist.
        """
        aid = validation.admin_id(admin_id)
        tid = validation.tenant_id(tenant_id)
        # Operators outside the tenant carry non-admin ids; only an exact match counts.
        actor = actor_admin_id.strip().lower() if actor_admin_id else None
        if actor == aid:
            raise ValidationError("admin_id", "Administrators cannot remove themselves")

        await self._owned_admin(aid, tid)
        await call_port("delete_admin", self._admins.delete_admin(aid), admin_id=aid)
        logger.info("admin_deleted", extra={"tenant_id": tid, "admin_id": aid})
