"""Compose ``LifespanContribution`` hooks into one FastAPI lifespan."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable
    from contextlib import AbstractAsyncContextManager

    from fastapi import FastAPI

    from praefectus.foundation.application import LifespanContribution

logger = logging.getLogger(__name__)


def compose_lifespan(
    hooks: list[LifespanContribution],
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Build a lifespan that enters hooks by ascending priority.

    Lower priorities start first and shut down last.
    """
    sorted_hooks = sorted(hooks, key=lambda h: h.priority)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for contribution in sorted_hooks:
                logger.debug(
                    "lifespan_hook_entering",
                    extra={"priority": contribution.priority, "hook": repr(contribution.hook)},
                )
                await stack.enter_async_context(contribution.hook(app))
            yield

    return lifespan
