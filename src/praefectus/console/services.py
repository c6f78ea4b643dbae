"""The set of application services one console process works with."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from praefectus.domain.identity import AdminLifecycleManager, InvitationDispatcher
from praefectus.domain.tenancy import (
    ModuleLicensingService,
    TenantInitializer,
    TenantLifecycleManager,
)
from praefectus.foundation.application import BackgroundTaskRunner
from praefectus.infra.persistence import (
    SqlAdminStore,
    SqlModuleStore,
    SqlTenantSetup,
    SqlTenantStore,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from praefectus.foundation.application import LifecycleSettings
    from praefectus.foundation.domain.ports import (
        AdminStorePort,
        ModuleStorePort,
        NotificationGatewayPort,
        TenantSetupPort,
        TenantStorePort,
    )
    from praefectus.infra.persistence import DatabaseManager


@dataclass
class ConsoleServices:
    """Managers shared by all console requests.

    Attributes:
        tenants: Tenant lifecycle, including the deletion guard.
        admins: Administrator lifecycle.
        modules: Module licensing.
        invitations: Invitation delivery.
        background: Runner owning the tenant initializer tasks.
        closers: Coroutine factories awaited on shutdown.
    """

    tenants: TenantLifecycleManager
    admins: AdminLifecycleManager
    modules: ModuleLicensingService
    invitations: InvitationDispatcher
    background: BackgroundTaskRunner
    closers: list[Callable[[], Awaitable[Any]]] = field(default_factory=list)

    async def aclose(self, drain_timeout: float | None = None) -> None:
        await self.background.drain(drain_timeout)
        for close in self.closers:
            await close()


def build_services(
    *,
    tenant_store: TenantStorePort,
    tenant_setup: TenantSetupPort,
    admin_store: AdminStorePort,
    module_store: ModuleStorePort,
    gateway: NotificationGatewayPort,
    settings: LifecycleSettings | None = None,
) -> ConsoleServices:
    """Wire the managers over the given ports."""
    background = BackgroundTaskRunner()
    initializer = TenantInitializer(tenant_setup, settings=settings)
    closers: list[Callable[[], Awaitable[Any]]] = []
    aclose = getattr(gateway, "aclose", None)
    if aclose is not None:
        closers.append(aclose)
    return ConsoleServices(
        tenants=TenantLifecycleManager(
            tenant_store, initializer, background=background, settings=settings
        ),
        admins=AdminLifecycleManager(admin_store, tenant_store, settings=settings),
        modules=ModuleLicensingService(tenant_store, module_store),
        invitations=InvitationDispatcher(gateway, admin_store, settings=settings),
        background=background,
        closers=closers,
    )


def build_sql_services(
    manager: DatabaseManager,
    gateway: NotificationGatewayPort,
    *,
    settings: LifecycleSettings | None = None,
    bcrypt_rounds: int = 12,
) -> ConsoleServices:
    """Wire the managers over the SQL stores of ``manager``."""
    session_factory = manager.get_session_factory()
    return build_services(
        tenant_store=SqlTenantStore(session_factory),
        tenant_setup=SqlTenantSetup(session_factory),
        admin_store=SqlAdminStore(session_factory, bcrypt_rounds=bcrypt_rounds),
        module_store=SqlModuleStore(session_factory),
        gateway=gateway,
        settings=settings,
    )
