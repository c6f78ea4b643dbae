"""Uniform error translation for calls through domain ports.

Domain errors raised by an adapter (``ConflictError``, ``NotFoundError``, ...)
pass through unchanged. Anything else is an opaque backend or network
failure and surfaces as ``TransportError``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from praefectus.foundation.domain.exceptions import DomainError, TransportError

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def call_port(operation: str, call: Awaitable[T], **context: Any) -> T:
    """Await ``call`` and translate non-domain failures.

    Args:
        operation: Port operation name, used in the error and the log.
        call: The pending port call.
        **context: Debugging context attached to a resulting ``TransportError``.

    Raises:
        DomainError: Re-raised unchanged.
        TransportError: For every other exception.
    """
    try:
        return await call
    except DomainError:
        raise
    except Exception as exc:
        reason = str(exc) or type(exc).__name__
        logger.warning(
            "port_call_failed",
            extra={"operation": operation, "error": reason, **context},
        )
        raise TransportError(operation, reason, **context) from exc
