"""Single-flight guard for tenant deletion.

At most one deletion per tenant id may be in flight. The guard is a keyed
state map owned by one ``TenantLifecycleManager``; it is not persisted and
does not coordinate across processes.

State machine per tenant id::

    IDLE -> DELETING -> DONE
    IDLE -> DELETING -> IDLE       (failed; retry allowed)
    DONE -> DELETING -> DONE       (repeat request for a deleted tenant)
    IDLE -> DELETING               (held; outcome unknown)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class DeletionState(StrEnum):
    """Deletion progress for one tenant id."""

    IDLE = "idle"
    DELETING = "deleting"
    DONE = "done"


class DeletionClaim:
    """Handle for an acquired guard slot.

    The holder calls ``complete()`` once the deletion is verified, or
    ``hold()`` when the store call was issued but its outcome is unknown.
    A claim that leaves its scope with neither goes back to the state it
    started from.
    """

    __slots__ = ("_completed", "_held", "tenant_id")

    def __init__(self, tenant_id: str) -> None:
        self.tenant_id = tenant_id
        self._completed = False
        self._held = False

    def complete(self) -> None:
        self._completed = True

    def hold(self) -> None:
        self._held = True

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def held(self) -> bool:
        return self._held


class DeletionGuard:
    """Keyed in-flight map for tenant deletions."""

    def __init__(self) -> None:
        self._states: dict[str, DeletionState] = {}

    def state(self, tenant_id: str) -> DeletionState:
        return self._states.get(tenant_id, DeletionState.IDLE)

    def is_deleting(self, tenant_id: str) -> bool:
        return self.state(tenant_id) is DeletionState.DELETING

    @contextmanager
    def claim(self, tenant_id: str) -> Iterator[DeletionClaim | None]:
        """Acquire the slot for ``tenant_id``.

        Yields None when another deletion of the same tenant is in flight;
        the caller must then back off without touching the store. The state
        switches to DELETING synchronously, before the caller's first await.

        On exit a completed claim ends in DONE and a held claim stays in
        DELETING. Any other claim restores the previous state, so a failed
        attempt leaves IDLE behind and a repeat request for an already
        deleted tenant leaves DONE untouched.
        """
        previous = self.state(tenant_id)
        if previous is DeletionState.DELETING:
            logger.info("tenant_deletion_already_in_progress", extra={"tenant_id": tenant_id})
            yield None
            return

        self._states[tenant_id] = DeletionState.DELETING
        claim = DeletionClaim(tenant_id)
        try:
            yield claim
        finally:
            if claim.completed:
                self._states[tenant_id] = DeletionState.DONE
            elif claim.held:
                logger.warning("tenant_deletion_guard_held", extra={"tenant_id": tenant_id})
            elif previous is DeletionState.DONE:
                self._states[tenant_id] = DeletionState.DONE
            else:
                self._states.pop(tenant_id, None)
