"""Plain descriptions of middleware and lifespan hooks for the console app.

The console wires its pieces explicitly: each infrastructure package exposes
a ``MiddlewareContribution`` or ``LifespanContribution`` and ``create_app``
orders them by priority. Nothing here imports FastAPI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractAsyncContextManager

MIDDLEWARE_PRIORITY_RANGE = range(0, 500)

# Startup order; shutdown runs the other way round.
LIFESPAN_PRIORITY_OBSERVABILITY = 50
LIFESPAN_PRIORITY_PERSISTENCE = 75
LIFESPAN_PRIORITY_BACKGROUND = 150


@dataclass(frozen=True, slots=True)
class MiddlewareContribution:
    """An ASGI middleware and where it sits in the stack.

    Attributes:
        middleware_class: ASGI middleware class.
        priority: 0-499. The lowest priority wraps outermost.
        kwargs: Passed on to ``add_middleware()``.
    """

    middleware_class: type[Any]
    priority: int = 400
    kwargs: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.priority not in MIDDLEWARE_PRIORITY_RANGE:
            msg = (
                f"Middleware priority must be between {MIDDLEWARE_PRIORITY_RANGE.start} "
                f"and {MIDDLEWARE_PRIORITY_RANGE.stop - 1}, got {self.priority}"
            )
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class LifespanContribution:
    """A startup/shutdown hook.

    Attributes:
        hook: ``(app) -> async context manager``; entered on startup and
            exited on shutdown.
        priority: Lower starts earlier and stops later.
    """

    hook: Callable[[Any], AbstractAsyncContextManager[None]]
    priority: int = 500
