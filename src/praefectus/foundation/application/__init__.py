"""Praefectus Foundation Application -- settings, scheduling and contribution types."""

from praefectus.foundation.application.background import BackgroundTaskRunner
from praefectus.foundation.application.contributions import (
    LIFESPAN_PRIORITY_BACKGROUND,
    LIFESPAN_PRIORITY_OBSERVABILITY,
    LIFESPAN_PRIORITY_PERSISTENCE,
    LifespanContribution,
    MiddlewareContribution,
)
from praefectus.foundation.application.settings import (
    LifecycleSettings,
    get_lifecycle_settings,
)

__all__ = [
    "LIFESPAN_PRIORITY_BACKGROUND",
    "LIFESPAN_PRIORITY_OBSERVABILITY",
    "LIFESPAN_PRIORITY_PERSISTENCE",
    "BackgroundTaskRunner",
    "LifecycleSettings",
    "LifespanContribution",
    "MiddlewareContribution",
    "get_lifecycle_settings",
]
