"""Result types returned by the lifecycle operations.

Operations report their follow-up information through these values
instead of invoking callbacks; callers decide what to do next.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


class DeletionOutcome(StrEnum):
    """What a ``delete_tenant`` call did."""

    DELETED = "deleted"
    ALREADY_IN_PROGRESS = "already_in_progress"


class StepStatus(StrEnum):
    """Outcome of one tenant initialization step."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class StepOutcome:
    """Outcome of a single initialization step.

    Attributes:
        step: Step name (e.g. ``"activate_modules"``).
        status: Whether the step ran, failed or was skipped.
        error: Failure description when ``status`` is FAILED.
    """

    step: str
    status: StepStatus
    error: str | None = None


@dataclass(frozen=True, slots=True)
class InitializationReport:
    """Per-step outcomes of a tenant initialization run."""

    tenant_id: str
    steps: tuple[StepOutcome, ...]

    @property
    def succeeded(self) -> bool:
        """True when no step failed. Skipped steps do not count as failures."""
        return all(s.status is not StepStatus.FAILED for s in self.steps)

    @property
    def failed_steps(self) -> list[str]:
        return [s.step for s in self.steps if s.status is StepStatus.FAILED]

    def outcome_of(self, step: str) -> StepOutcome:
        for outcome in self.steps:
            if outcome.step == step:
                return outcome
        raise KeyError(step)


@dataclass(frozen=True, slots=True)
class InvitationResult:
    """Result of a delivered invitation. Failed delivery raises instead.

    Attributes:
        email: Normalized recipient address.
        tenant_id: Tenant the invitation belongs to.
        invited_at: Timestamp recorded as "last invited at".
        bookkeeping_recorded: False when the "last invited at" update failed.
        warning: Description of the bookkeeping failure, if any.
        message_id: Gateway message id, when the gateway returns one.
    """

    email: str
    tenant_id: str
    invited_at: datetime
    bookkeeping_recorded: bool = True
    warning: str | None = None
    message_id: str | None = None


@dataclass
class CascadeDeletionResult:
    """Counts reported by a store after a cascading tenant delete.

    Attributes:
        administrators_deleted: Administrator rows removed.
        module_assignments_deleted: Module assignment rows removed.
        license_history_deleted: License history rows removed.
        settings_deleted: Settings rows removed.
        categories_processed: Data categories the cascade touched, in order.
    """

    administrators_deleted: int = 0
    module_assignments_deleted: int = 0
    license_history_deleted: int = 0
    settings_deleted: int = 0
    categories_processed: list[str] = field(default_factory=list)
