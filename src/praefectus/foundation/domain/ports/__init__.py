"""Domain port interfaces for hexagonal architecture.

Ports define the interfaces the lifecycle managers use to reach the data
store and the notification gateway. Implementations (adapters) live in
``praefectus.infra``.
"""

from praefectus.foundation.domain.ports.admin_store import AdminStorePort
from praefectus.foundation.domain.ports.module_store import ModuleStorePort
from praefectus.foundation.domain.ports.notification_gateway import NotificationGatewayPort
from praefectus.foundation.domain.ports.tenant_store import TenantSetupPort, TenantStorePort

__all__ = [
    "AdminStorePort",
    "ModuleStorePort",
    "NotificationGatewayPort",
    "TenantSetupPort",
    "TenantStorePort",
]
