"""SQL implementation of ``AdminStorePort``.

Passwords supplied for direct provisioning are stored as bcrypt hashes only.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

import bcrypt
from sqlalchemy import delete, insert, select, update

from praefectus.foundation.domain.exceptions import NotFoundError, ValidationError
from praefectus.foundation.domain.models import Administrator
from praefectus.infra.persistence._sql import plain, row_to_dict, translate_errors, utcnow
from praefectus.infra.persistence.tables import administrators

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from praefectus.foundation.domain.admin_value_objects import AdminStatus
    from praefectus.foundation.domain.models import NewAdministrator

logger = logging.getLogger(__name__)

_BCRYPT_ROUNDS = 12
_UPDATABLE_COLUMNS = frozenset(
    {"first_name", "last_name", "salutation", "display_name", "phone", "position", "role", "status"}
)
_READ_COLUMNS = [c for c in administrators.c if c.key != "password_hash"]


class SqlAdminStore:
    """Administrator records in a relational database.

    Args:
        session_factory: Async session factory.
        clock: Source of timestamps.
        id_factory: Produces administrator ids; defaults to ``uuid.uuid4``.
        bcrypt_rounds: Work factor for password hashes.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
        bcrypt_rounds: int = _BCRYPT_ROUNDS,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock
        self._id_factory = id_factory
        self._bcrypt_rounds = bcrypt_rounds

    def _hash_password(self, password: str) -> str:
        return bcrypt.hashpw(
            password.encode("utf-8"),
            bcrypt.gensalt(rounds=self._bcrypt_rounds),
        ).decode("utf-8")

    async def create_admin(
        self,
        tenant_id: str,
        profile: NewAdministrator,
        status: AdminStatus,
        password: str | None = None,
    ) -> str:
        admin_id = str(self._id_factory())
        now = self._clock()
        password_hash = self._hash_password(password) if password else None
        async with translate_errors(
            "create_admin",
            "An administrator with this email already exists in the tenant",
            tenant_id=tenant_id,
            email=profile.email,
        ):
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    insert(administrators).values(
                        id=admin_id,
                        tenant_id=tenant_id,
                        status=status.value,
                        password_hash=password_hash,
                        invitation_count=0,
                        created_at=now,
                        updated_at=now,
                        **plain(profile.model_dump()),
                    )
                )
        return admin_id

    async def get_admin(self, admin_id: str) -> Administrator | None:
        async with translate_errors("get_admin", admin_id=admin_id):
            async with self._session_factory() as session:
                row = (
                    await session.execute(
                        select(*_READ_COLUMNS).where(administrators.c.id == admin_id)
                    )
                ).first()
        return Administrator.model_validate(row_to_dict(row)) if row is not None else None

    async def update_admin(self, admin_id: str, patch: Mapping[str, Any]) -> None:
        unknown = set(patch) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValidationError(sorted(unknown)[0], "Field cannot be updated")
        async with translate_errors("update_admin", admin_id=admin_id):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    update(administrators)
                    .where(administrators.c.id == admin_id)
                    .values(updated_at=self._clock(), **plain(patch))
                )
        if result.rowcount == 0:
            raise NotFoundError("Administrator", admin_id)

    async def delete_admin(self, admin_id: str) -> None:
        async with translate_errors("delete_admin", admin_id=admin_id):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    delete(administrators).where(administrators.c.id == admin_id)
                )
        if result.rowcount == 0:
            raise NotFoundError("Administrator", admin_id)

    async def list_admins(self, tenant_id: str) -> Sequence[Administrator]:
        async with translate_errors("list_admins", tenant_id=tenant_id):
            async with self._session_factory() as session:
                rows = (
                    await session.execute(
                        select(*_READ_COLUMNS)
                        .where(administrators.c.tenant_id == tenant_id)
                        .order_by(administrators.c.created_at)
                    )
                ).all()
        return [Administrator.model_validate(row_to_dict(row)) for row in rows]

    async def mark_invited(self, tenant_id: str, email: str, invited_at: datetime) -> None:
        async with translate_errors("mark_invited", tenant_id=tenant_id):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    update(administrators)
                    .where(
                        administrators.c.tenant_id == tenant_id,
                        administrators.c.email == email,
                    )
                    .values(
                        last_invited_at=invited_at,
                        invitation_count=administrators.c.invitation_count + 1,
                        updated_at=self._clock(),
                    )
                )
        if result.rowcount == 0:
            raise NotFoundError("Administrator", email, tenant_id=tenant_id)

    async def verify_password(self, admin_id: str, password: str) -> bool:
        """Check a password against the stored hash. False when none is stored."""
        async with translate_errors("verify_password", admin_id=admin_id):
            async with self._session_factory() as session:
                stored = await session.scalar(
                    select(administrators.c.password_hash).where(administrators.c.id == admin_id)
                )
        if not stored:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
