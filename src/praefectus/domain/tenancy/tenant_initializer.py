"""Zero-data initialization of a freshly created tenant.

A new tenant receives technical and configuration defaults only:

1. ``activate_modules``: enable the default feature modules.
2. ``write_baseline_settings``: accessibility defaults, integrations disabled.
3. ``bootstrap_settings``: the store's idempotent settings bootstrap.
4. ``link_creator``: link the creating operator as an administrator, without
   any department or team.

No business or master data (absence types, departments, teams, sites) is
ever created here. The steps are independent and run concurrently; a
failing step is logged and reported but never stops the others, and never
affects the tenant itself.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from praefectus.foundation.application.settings import get_lifecycle_settings
from praefectus.foundation.domain.config_defaults import BASELINE_TENANT_SETTINGS
from praefectus.foundation.domain.outcomes import InitializationReport, StepOutcome, StepStatus

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping, Sequence
    from typing import Any

    from praefectus.foundation.application.settings import LifecycleSettings
    from praefectus.foundation.domain.ports import TenantSetupPort

logger = logging.getLogger(__name__)

STEP_ACTIVATE_MODULES = "activate_modules"
STEP_WRITE_BASELINE_SETTINGS = "write_baseline_settings"
STEP_BOOTSTRAP_SETTINGS = "bootstrap_settings"
STEP_LINK_CREATOR = "link_creator"

INITIALIZATION_STEPS: tuple[str, ...] = (
    STEP_ACTIVATE_MODULES,
    STEP_WRITE_BASELINE_SETTINGS,
    STEP_BOOTSTRAP_SETTINGS,
    STEP_LINK_CREATOR,
)


class TenantInitializer:
    """Best-effort composite of the four zero-data setup steps.

    Args:
        setup: Store-side setup operations.
        settings: Supplies the default module set.
        baseline_settings: Settings written in step 2. Defaults to
            ``BASELINE_TENANT_SETTINGS``.
    """

    def __init__(
        self,
        setup: TenantSetupPort,
        *,
        settings: LifecycleSettings | None = None,
        baseline_settings: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> None:
        self._setup = setup
        self._settings = settings or get_lifecycle_settings()
        self._baseline = (
            baseline_settings if baseline_settings is not None else BASELINE_TENANT_SETTINGS
        )

    @property
    def module_keys(self) -> Sequence[str]:
        return tuple(self._settings.default_modules)

    async def initialize(
        self, tenant_id: str, creator_email: str | None = None
    ) -> InitializationReport:
        """Run every step and report their outcomes. Never raises.

        Args:
            tenant_id: The tenant just created.
            creator_email: Operator to link as administrator; the link step
                is reported as skipped when absent.
        """
        logger.info("tenant_initialization_started", extra={"tenant_id": tenant_id})

        steps: dict[str, Callable[[], Awaitable[None]]] = {
            STEP_ACTIVATE_MODULES: lambda: self._setup.activate_modules(
                tenant_id, self.module_keys
            ),
            STEP_WRITE_BASELINE_SETTINGS: lambda: self._setup.write_settings(
                tenant_id, self._baseline
            ),
            STEP_BOOTSTRAP_SETTINGS: lambda: self._setup.bootstrap_settings(tenant_id),
        }
        if creator_email:
            steps[STEP_LINK_CREATOR] = lambda: self._setup.link_administrator(
                tenant_id, creator_email
            )

        results = await asyncio.gather(
            *(self._run_step(tenant_id, name, step) for name, step in steps.items()),
            return_exceptions=True,
        )

        outcomes: list[StepOutcome] = []
        for name, result in zip(steps, results, strict=True):
            if isinstance(result, BaseException):
                outcomes.append(self._failed(tenant_id, name, result))
            else:
                outcomes.append(StepOutcome(step=name, status=StepStatus.SUCCEEDED))
        if STEP_LINK_CREATOR not in steps:
            outcomes.append(StepOutcome(step=STEP_LINK_CREATOR, status=StepStatus.SKIPPED))

        report = InitializationReport(tenant_id=tenant_id, steps=tuple(outcomes))
        if report.succeeded:
            logger.info("tenant_initialization_completed", extra={"tenant_id": tenant_id})
        else:
            logger.warning(
                "tenant_initialization_incomplete",
                extra={"tenant_id": tenant_id, "failed_steps": report.failed_steps},
            )
        return report

    async def _run_step(
        self, tenant_id: str, name: str, step: Callable[[], Awaitable[None]]
    ) -> None:
        # Synchronous raises from step() land in this coroutine's result.
        await step()
        logger.debug(
            "tenant_initialization_step_succeeded",
            extra={"tenant_id": tenant_id, "step": name},
        )

    @staticmethod
    def _failed(tenant_id: str, name: str, exc: BaseException) -> StepOutcome:
        reason = str(exc) or type(exc).__name__
        logger.warning(
            "tenant_initialization_step_failed",
            extra={"tenant_id": tenant_id, "step": name, "error": reason},
            exc_info=exc,
        )
        return StepOutcome(step=name, status=StepStatus.FAILED, error=reason)
