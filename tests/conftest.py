"""Shared fixtures: in-memory port fakes, managers wired over them, SQLite stores."""

from __future__ import annotations

import asyncio
import uuid
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import pytest
import pytest_asyncio

from praefectus.domain.identity import AdminLifecycleManager, InvitationDispatcher
from praefectus.domain.tenancy import (
    ModuleLicensingService,
    TenantInitializer,
    TenantLifecycleManager,
)
from praefectus.foundation.application import BackgroundTaskRunner, LifecycleSettings
from praefectus.foundation.domain.exceptions import ConflictError, NotFoundError
from praefectus.foundation.domain.models import (
    Administrator,
    DeliveryReceipt,
    LicenseHistoryEntry,
    ModuleAssignment,
    NewAdministrator,
    NewTenant,
    Tenant,
)
from praefectus.foundation.domain.outcomes import CascadeDeletionResult
from praefectus.infra.persistence import (
    DatabaseManager,
    DatabaseSettings,
    SqlAdminStore,
    SqlModuleStore,
    SqlTenantSetup,
    SqlTenantStore,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping, Sequence

    from praefectus.foundation.domain.admin_value_objects import AdminStatus

FIXED_NOW = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)


class Clock:
    """Deterministic clock; every call advances by one second."""

    def __init__(self, start: datetime = FIXED_NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


class _Recorder:
    """Call log, failure injection and blocking gates shared by the fakes.

    ``failures[op]`` is raised when ``op`` is called; ``gates[op]`` makes
    ``op`` wait until the event is set.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, BaseException] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.entered: dict[str, asyncio.Event] = {}

    async def _enter(self, op: str, *args: Any) -> None:
        self.calls.append((op, args))
        await asyncio.sleep(0)
        self.entered.setdefault(op, asyncio.Event()).set()
        gate = self.gates.get(op)
        if gate is not None:
            await gate.wait()
        failure = self.failures.get(op)
        if failure is not None:
            raise failure

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    @property
    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeTenantStore(_Recorder):
    def __init__(self, clock: Clock, *, atomic_cascade: bool = True) -> None:
        super().__init__()
        self.atomic_cascade = atomic_cascade
        self.tenants: dict[str, Tenant] = {}
        self.retired: set[str] = set()
        self.survives_delete = False
        self._clock = clock

    def seed(self, name: str = "Acme GmbH", **overrides: Any) -> Tenant:
        slug = overrides.pop("slug", name.lower().replace(" ", "-"))
        now = self._clock()
        tenant = Tenant(
            id=str(uuid.uuid4()),
            name=name,
            slug=slug,
            country="DE",
            timezone="Europe/Berlin",
            subscription_status="trial",
            currency="EUR",
            billing_cycle="monthly",
            created_at=now,
            updated_at=now,
            **overrides,
        )
        self.tenants[tenant.id] = tenant
        return tenant

    async def create_tenant(self, record: NewTenant) -> str:
        await self._enter("create_tenant", record)
        if any(t.slug == record.slug for t in self.tenants.values()):
            raise ConflictError("Tenant name is already in use", slug=record.slug)
        tenant_id = str(uuid.uuid4())
        now = self._clock()
        self.tenants[tenant_id] = Tenant(
            id=tenant_id, created_at=now, updated_at=now, **record.model_dump()
        )
        return tenant_id

    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        await self._enter("get_tenant", tenant_id)
        return self.tenants.get(tenant_id)

    async def update_tenant(self, tenant_id: str, patch: Mapping[str, Any]) -> None:
        await self._enter("update_tenant", tenant_id, dict(patch))
        current = self.tenants.get(tenant_id)
        if current is None:
            raise NotFoundError("Tenant", tenant_id)
        slug = patch.get("slug")
        if slug is not None and any(
            t.slug == slug and t.id != tenant_id for t in self.tenants.values()
        ):
            raise ConflictError("Tenant name is already in use", slug=slug)
        self.tenants[tenant_id] = current.model_copy(
            update={**patch, "updated_at": self._clock()}
        )

    async def delete_tenant_cascade(self, tenant_id: str) -> CascadeDeletionResult | None:
        await self._enter("delete_tenant_cascade", tenant_id)
        if not self.survives_delete:
            self.tenants.pop(tenant_id, None)
            self.retired.add(tenant_id)
        return CascadeDeletionResult(categories_processed=["administrators", "tenant"])

    async def list_active_tenants(self) -> Sequence[Tenant]:
        await self._enter("list_active_tenants")
        return [t for t in self.tenants.values() if t.is_active]

    async def list_tenants(self) -> Sequence[Tenant]:
        await self._enter("list_tenants")
        return list(self.tenants.values())


class FakeTenantSetup(_Recorder):
    def __init__(self) -> None:
        super().__init__()
        self.settings: dict[str, dict[str, Any]] = {}

    async def activate_modules(self, tenant_id: str, module_keys: Sequence[str]) -> None:
        await self._enter("activate_modules", tenant_id, tuple(module_keys))

    async def write_settings(
        self, tenant_id: str, settings: Mapping[str, Mapping[str, Any]]
    ) -> None:
        await self._enter("write_settings", tenant_id, settings)
        self.settings.update({k: dict(v) for k, v in settings.items()})

    async def bootstrap_settings(self, tenant_id: str) -> None:
        await self._enter("bootstrap_settings", tenant_id)

    async def link_administrator(self, tenant_id: str, email: str) -> None:
        await self._enter("link_administrator", tenant_id, email)


class FakeAdminStore(_Recorder):
    def __init__(self, clock: Clock) -> None:
        super().__init__()
        self.admins: dict[str, Administrator] = {}
        self.passwords: dict[str, str | None] = {}
        self._clock = clock

    async def create_admin(
        self,
        tenant_id: str,
        profile: NewAdministrator,
        status: AdminStatus,
        password: str | None = None,
    ) -> str:
        await self._enter("create_admin", tenant_id, profile, status)
        if any(a.tenant_id == tenant_id and a.email == profile.email for a in self.admins.values()):
            raise ConflictError(
                "An administrator with this email already exists in the tenant",
                tenant_id=tenant_id,
            )
        admin_id = str(uuid.uuid4())
        now = self._clock()
        self.admins[admin_id] = Administrator(
            id=admin_id,
            tenant_id=tenant_id,
            status=status,
            created_at=now,
            updated_at=now,
            **profile.model_dump(),
        )
        self.passwords[admin_id] = password
        return admin_id

    async def get_admin(self, admin_id: str) -> Administrator | None:
        await self._enter("get_admin", admin_id)
        return self.admins.get(admin_id)

    async def update_admin(self, admin_id: str, patch: Mapping[str, Any]) -> None:
        await self._enter("update_admin", admin_id, dict(patch))
        current = self.admins.get(admin_id)
        if current is None:
            raise NotFoundError("Administrator", admin_id)
        self.admins[admin_id] = current.model_copy(update={**patch, "updated_at": self._clock()})

    async def delete_admin(self, admin_id: str) -> None:
        await self._enter("delete_admin", admin_id)
        if self.admins.pop(admin_id, None) is None:
            raise NotFoundError("Administrator", admin_id)

    async def list_admins(self, tenant_id: str) -> Sequence[Administrator]:
        await self._enter("list_admins", tenant_id)
        return [a for a in self.admins.values() if a.tenant_id == tenant_id]

    async def mark_invited(self, tenant_id: str, email: str, invited_at: datetime) -> None:
        await self._enter("mark_invited", tenant_id, email, invited_at)
        for admin_id, admin in self.admins.items():
            if admin.tenant_id == tenant_id and admin.email == email:
                self.admins[admin_id] = admin.model_copy(
                    update={
                        "last_invited_at": invited_at,
                        "invitation_count": admin.invitation_count + 1,
                    }
                )
                return
        raise NotFoundError("Administrator", email, tenant_id=tenant_id)


class FakeModuleStore(_Recorder):
    def __init__(self) -> None:
        super().__init__()
        self.assignments: dict[tuple[str, str], ModuleAssignment] = {}
        self.history: list[LicenseHistoryEntry] = []

    async def list_assignments(self, tenant_id: str) -> Sequence[ModuleAssignment]:
        await self._enter("list_assignments", tenant_id)
        return [a for (tid, _), a in self.assignments.items() if tid == tenant_id]

    async def set_assignment(
        self, tenant_id: str, module_key: str, enabled: bool, history: LicenseHistoryEntry
    ) -> ModuleAssignment:
        await self._enter("set_assignment", tenant_id, module_key, enabled)
        assignment = ModuleAssignment(
            tenant_id=tenant_id,
            module_key=module_key,
            is_enabled=enabled,
            enabled_by=history.performed_by,
            updated_at=history.created_at,
        )
        self.assignments[(tenant_id, module_key)] = assignment
        self.history.append(history)
        return assignment

    async def list_license_history(self, tenant_id: str) -> Sequence[LicenseHistoryEntry]:
        await self._enter("list_license_history", tenant_id)
        return [h for h in reversed(self.history) if h.tenant_id == tenant_id]


class FakeGateway(_Recorder):
    def __init__(self) -> None:
        super().__init__()
        self.receipt = DeliveryReceipt(success=True, message_id="msg-1")

    async def send_invitation(
        self,
        email: str,
        tenant_id: str,
        tenant_name: str,
        activation_link: str,
        recipient_name: str | None = None,
    ) -> DeliveryReceipt:
        await self._enter(
            "send_invitation", email, tenant_id, tenant_name, activation_link, recipient_name
        )
        return self.receipt


# ---------------------------------------------------------------------------
# Fixtures: fakes and managers
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> Clock:
    return Clock()


@pytest.fixture()
def lifecycle_settings() -> LifecycleSettings:
    return LifecycleSettings(activation_base_url="https://console.example.com/")


@pytest.fixture()
def tenant_store(clock: Clock) -> FakeTenantStore:
    return FakeTenantStore(clock)


@pytest.fixture()
def tenant_setup() -> FakeTenantSetup:
    return FakeTenantSetup()


@pytest.fixture()
def admin_store(clock: Clock) -> FakeAdminStore:
    return FakeAdminStore(clock)


@pytest.fixture()
def module_store() -> FakeModuleStore:
    return FakeModuleStore()


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def background() -> BackgroundTaskRunner:
    return BackgroundTaskRunner()


@pytest.fixture()
def initializer(
    tenant_setup: FakeTenantSetup, lifecycle_settings: LifecycleSettings
) -> TenantInitializer:
    return TenantInitializer(tenant_setup, settings=lifecycle_settings)


@pytest.fixture()
def tenant_manager(
    tenant_store: FakeTenantStore,
    initializer: TenantInitializer,
    background: BackgroundTaskRunner,
    lifecycle_settings: LifecycleSettings,
    clock: Clock,
) -> TenantLifecycleManager:
    return TenantLifecycleManager(
        tenant_store,
        initializer,
        background=background,
        settings=lifecycle_settings,
        clock=clock,
    )


@pytest.fixture()
def admin_manager(
    admin_store: FakeAdminStore,
    tenant_store: FakeTenantStore,
    lifecycle_settings: LifecycleSettings,
) -> AdminLifecycleManager:
    return AdminLifecycleManager(admin_store, tenant_store, settings=lifecycle_settings)


@pytest.fixture()
def licensing(
    tenant_store: FakeTenantStore, module_store: FakeModuleStore, clock: Clock
) -> ModuleLicensingService:
    return ModuleLicensingService(tenant_store, module_store, clock=clock)


@pytest.fixture()
def dispatcher(
    gateway: FakeGateway,
    admin_store: FakeAdminStore,
    lifecycle_settings: LifecycleSettings,
    clock: Clock,
) -> InvitationDispatcher:
    return InvitationDispatcher(gateway, admin_store, settings=lifecycle_settings, clock=clock)


@pytest.fixture()
def tenant(tenant_store: FakeTenantStore) -> Tenant:
    """A tenant already present in the fake store."""
    return tenant_store.seed()


# ---------------------------------------------------------------------------
# Fixtures: SQLite-backed stores
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture()
async def database() -> AsyncIterator[DatabaseManager]:
    """Fresh in-memory SQLite database with the schema created."""
    manager = DatabaseManager(DatabaseSettings(url="sqlite+aiosqlite:///:memory:"))
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture()
def sql_tenant_store(database: DatabaseManager) -> SqlTenantStore:
    return SqlTenantStore(database.get_session_factory())


@pytest.fixture()
def sql_tenant_setup(database: DatabaseManager) -> SqlTenantSetup:
    return SqlTenantSetup(database.get_session_factory())


@pytest.fixture()
def sql_admin_store(database: DatabaseManager) -> SqlAdminStore:
    return SqlAdminStore(database.get_session_factory(), bcrypt_rounds=4)


@pytest.fixture()
def sql_module_store(database: DatabaseManager) -> SqlModuleStore:
    return SqlModuleStore(database.get_session_factory())
