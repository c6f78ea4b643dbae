"""Helpers shared by the SQL store adapters."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from praefectus.foundation.domain.exceptions import ConflictError, TransportError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


def aware(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops the offset)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert a result row to a dict with timezone-aware datetimes."""
    return {
        key: aware(value) if isinstance(value, datetime) else value
        for key, value in row._mapping.items()
    }


def plain(values: Mapping[str, Any]) -> dict[str, Any]:
    """Replace enum members by their values for storage."""
    return {k: v.value if isinstance(v, Enum) else v for k, v in values.items()}


@asynccontextmanager
async def translate_errors(
    operation: str, conflict_reason: str | None = None, **context: Any
) -> AsyncIterator[None]:
    """Map driver exceptions onto the domain error taxonomy.

    ``IntegrityError`` becomes ``ConflictError`` (using ``conflict_reason``
    when given), any other ``SQLAlchemyError`` becomes ``TransportError``.
    """
    try:
        yield
    except IntegrityError as exc:
        logger.info("store_integrity_violation", extra={"operation": operation, **context})
        raise ConflictError(conflict_reason or f"{operation} violates a constraint", **context) from exc
    except SQLAlchemyError as exc:
        logger.warning(
            "store_operation_failed",
            extra={"operation": operation, "error": str(exc), **context},
        )
        raise TransportError(operation, type(exc).__name__, **context) from exc
