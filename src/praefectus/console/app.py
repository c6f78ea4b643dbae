"""Admin console application factory.

Usage::

    from praefectus.console import create_console_app

    app = create_console_app()

By default the console talks to the database configured through
``DATABASE_*`` and to the notification service configured through
``NOTIFY_*``. Tests pass ready-made ``ConsoleServices`` instead.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from praefectus.console.routers import ROUTERS
from praefectus.console.services import build_sql_services
from praefectus.foundation.application import (
    LIFESPAN_PRIORITY_BACKGROUND,
    LifespanContribution,
)
from praefectus.infra.fastapi import AppSettings, create_app
from praefectus.infra.notifications import HttpNotificationGateway
from praefectus.infra.observability import lifespan_contribution as observability_lifespan
from praefectus.infra.persistence import get_database_manager, persistence_lifespan

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

    from praefectus.console.services import ConsoleServices
    from praefectus.infra.persistence import DatabaseManager


def _services_lifespan(services: ConsoleServices, drain_timeout: float) -> LifespanContribution:
    @asynccontextmanager
    async def lifespan(app: Any) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await services.aclose(drain_timeout)

    return LifespanContribution(hook=lifespan, priority=LIFESPAN_PRIORITY_BACKGROUND)


def create_console_app(
    settings: AppSettings | None = None,
    *,
    services: ConsoleServices | None = None,
    database: DatabaseManager | None = None,
) -> FastAPI:
    """Create the console API.

    Args:
        settings: Application settings. If ``None``, loaded from environment.
        services: Pre-wired managers. When given, no database or
            notification service is set up.
        database: Database to use instead of the global one.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or AppSettings()
    hooks = [observability_lifespan]
    if services is None:
        database = database or get_database_manager()
        services = build_sql_services(database, HttpNotificationGateway())
        hooks.append(persistence_lifespan(database))
    hooks.append(_services_lifespan(services, settings.drain_timeout))

    app = create_app(settings, routers=ROUTERS, lifespan_hooks=hooks)
    app.state.services = services
    return app
