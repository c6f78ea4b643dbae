"""Praefectus Infra Persistence -- engine management and SQL store adapters."""

from praefectus.infra.persistence.admin_store import SqlAdminStore
from praefectus.infra.persistence.database import (
    DatabaseManager,
    DatabaseSettings,
    get_database_manager,
)
from praefectus.infra.persistence.lifespan import lifespan_contribution, persistence_lifespan
from praefectus.infra.persistence.module_store import SqlModuleStore
from praefectus.infra.persistence.tables import metadata
from praefectus.infra.persistence.tenant_store import SqlTenantSetup, SqlTenantStore

__all__ = [
    "DatabaseManager",
    "DatabaseSettings",
    "SqlAdminStore",
    "SqlModuleStore",
    "SqlTenantSetup",
    "SqlTenantStore",
    "get_database_manager",
    "lifespan_contribution",
    "metadata",
    "persistence_lifespan",
]
