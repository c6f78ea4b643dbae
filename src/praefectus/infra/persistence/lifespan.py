"""Persistence lifespan hook for startup/shutdown resource management.

Handles:
- Optional schema creation (``DATABASE_CREATE_SCHEMA``)
- Database health check on startup (SELECT 1)
- Engine disposal on shutdown

Priority 75 starts persistence after observability (50).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import text

from praefectus.foundation.application import LIFESPAN_PRIORITY_PERSISTENCE, LifespanContribution
from praefectus.infra.persistence.database import get_database_manager

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable
    from contextlib import AbstractAsyncContextManager

    from praefectus.infra.persistence.database import DatabaseManager

logger = logging.getLogger(__name__)


def _persistence_lifespan(
    manager: DatabaseManager | None = None,
) -> Callable[[Any], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def lifespan(app: Any) -> AsyncIterator[None]:
        db = manager or get_database_manager()

        if db.settings.create_schema:
            await db.create_schema()
            logger.info("persistence_schema_ensured")

        async with db.get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("persistence_health_check_passed")

        try:
            yield
        finally:
            await db.dispose()
            logger.info("persistence_engine_disposed")

    return lifespan


def persistence_lifespan(manager: DatabaseManager | None = None) -> LifespanContribution:
    """Lifespan contribution bound to ``manager`` (the global one if omitted)."""
    return LifespanContribution(
        hook=_persistence_lifespan(manager),
        priority=LIFESPAN_PRIORITY_PERSISTENCE,
    )


lifespan_contribution = persistence_lifespan()
