"""SQLAlchemy Core table definitions for the reference stores.

Every tenant-owned table references ``tenants.id`` with ``ON DELETE
CASCADE``; the stores still delete children explicitly so the cascade does
not depend on the database enforcing foreign keys (SQLite does not by
default).
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

tenants = Table(
    "tenants",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("slug", String(63), nullable=False, unique=True),
    Column("contact_email", String(254)),
    Column("billing_email", String(254)),
    Column("primary_contact_email", String(254)),
    Column("primary_contact_name", String(255)),
    Column("phone", String(64)),
    Column("website", String(255)),
    Column("industry", String(255)),
    Column("description", Text),
    Column("address", String(255)),
    Column("postal_code", String(32)),
    Column("city", String(255)),
    Column("country", String(64), nullable=False),
    Column("timezone", String(64), nullable=False),
    Column("subscription_status", String(32), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("billing_cycle", String(16), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("subscription_started_at", DateTime(timezone=True)),
    Column("employee_count", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

# Ids of deleted tenants. New ids are checked against this table so an id is
# never handed out twice.
retired_tenant_ids = Table(
    "retired_tenant_ids",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("retired_at", DateTime(timezone=True), nullable=False),
)

administrators = Table(
    "administrators",
    metadata,
    Column("id", String(36), primary_key=True),
    Column(
        "tenant_id",
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("email", String(254), nullable=False),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("salutation", String(16), nullable=False),
    Column("display_name", String(255), nullable=False),
    Column("phone", String(64)),
    Column("position", String(255)),
    Column("role", String(32), nullable=False),
    Column("status", String(32), nullable=False),
    Column("password_hash", String(60)),
    Column("last_invited_at", DateTime(timezone=True)),
    Column("invitation_count", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("tenant_id", "email", name="uq_administrators_tenant_email"),
)

module_assignments = Table(
    "module_assignments",
    metadata,
    Column(
        "tenant_id",
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("module_key", String(64), nullable=False),
    Column("is_enabled", Boolean, nullable=False),
    Column("enabled_by", String(255)),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    PrimaryKeyConstraint("tenant_id", "module_key"),
)

license_history = Table(
    "license_history",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "tenant_id",
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("action_type", String(32), nullable=False),
    Column("module_key", String(64), nullable=False),
    Column("old_value", JSON, nullable=False),
    Column("new_value", JSON, nullable=False),
    Column("performed_by", String(255)),
    Column("notes", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

tenant_settings = Table(
    "tenant_settings",
    metadata,
    Column(
        "tenant_id",
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("category", String(64), nullable=False),
    Column("values", JSON, nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    PrimaryKeyConstraint("tenant_id", "category"),
)
