"""RFC 7807 Problem Details exception handlers for FastAPI.

Translates the domain exception taxonomy into ``application/problem+json``
responses:

    ValidationError               -> 422
    NotFoundError                 -> 404
    InvalidStateTransitionError   -> 409
    ConflictError                 -> 409
    FatalInconsistencyError       -> 500 (distinct problem type, always logged)
    TransportError                -> 503
    DomainError                   -> 400 (fallback)

Usage:
    from praefectus.infra.fastapi.error_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from praefectus.foundation.domain.exceptions import (
    ConflictError,
    DomainError,
    FatalInconsistencyError,
    InvalidStateTransitionError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from praefectus.infra.fastapi.middleware.request_id import get_request_id

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response model.

    ``error_code``, ``context`` and ``correlation_id`` are extension members.
    """

    type: str = Field(..., examples=["/errors/not-found"])
    title: str = Field(..., examples=["Resource Not Found"])
    status: int = Field(..., ge=400, le=599)
    detail: str
    instance: str | None = None
    error_code: str | None = Field(default=None, examples=["RESOURCE_NOT_FOUND"])
    context: dict[str, Any] | None = None
    correlation_id: str | None = None


@dataclass(frozen=True, slots=True)
class _ProblemType:
    uri: str
    title: str
    status: int


_DOMAIN_PROBLEMS: dict[type[DomainError], _ProblemType] = {
    ValidationError: _ProblemType("/errors/validation-error", "Validation Error", 422),
    NotFoundError: _ProblemType("/errors/not-found", "Resource Not Found", 404),
    InvalidStateTransitionError: _ProblemType(
        "/errors/invalid-state-transition", "Invalid State Transition", 409
    ),
    ConflictError: _ProblemType("/errors/conflict", "Conflict", 409),
    FatalInconsistencyError: _ProblemType(
        "/errors/fatal-inconsistency", "Fatal Inconsistency", 500
    ),
    TransportError: _ProblemType("/errors/service-unavailable", "Service Unavailable", 503),
    DomainError: _ProblemType("/errors/domain-error", "Bad Request", 400),
}

_SENSITIVE_KEYS = frozenset({"password", "secret", "token", "api_key", "apikey", "credential"})

_SENSITIVE_PATTERNS = [
    (re.compile(r"postgresql(\+\w+)?://[^@\s]*@[^/\s]*"), "postgresql://[REDACTED]@[REDACTED]"),
    (
        re.compile(r"password\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "password=[REDACTED]",
    ),
    (
        re.compile(r"api[_-]?key\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "api_key=[REDACTED]",
    ),
]


def _create_problem_response(problem: ProblemDetail) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _correlation_id() -> str:
    return get_request_id() or "unknown"


def _sanitize_context(context: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop secret keys and coerce values to JSON-safe types."""
    if not context:
        return None
    sanitized = {
        key: _sanitize_value(value)
        for key, value in context.items()
        if key.lower() not in _SENSITIVE_KEYS
    }
    return sanitized or None


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        for pattern, replacement in _SENSITIVE_PATTERNS:
            value = pattern.sub(replacement, value)
        return value
    if isinstance(value, dict):
        return _sanitize_context(value)
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(v) for v in value]
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def _problem_type_for(exc: DomainError) -> _ProblemType:
    for cls in type(exc).__mro__:
        if cls in _DOMAIN_PROBLEMS:
            return _DOMAIN_PROBLEMS[cls]
    return _DOMAIN_PROBLEMS[DomainError]


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Translate any ``DomainError`` subclass into its problem response.

    Server-side failures (5xx) are logged with the correlation id, which is
    also returned to the client for support requests.
    """
    problem_type = _problem_type_for(exc)
    correlation_id: str | None = None
    if problem_type.status >= 500:
        correlation_id = _correlation_id()
        log = logger.critical if isinstance(exc, FatalInconsistencyError) else logger.error
        log(
            "domain_error_response",
            extra={
                "error_code": exc.error_code,
                "status": problem_type.status,
                "path": str(request.url.path),
                "method": request.method,
                "correlation_id": correlation_id,
            },
        )

    problem = ProblemDetail(
        type=problem_type.uri,
        title=problem_type.title,
        status=problem_type.status,
        detail=_sanitize_value(str(exc)),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
        correlation_id=correlation_id,
    )
    response = _create_problem_response(problem)
    if problem_type.status == 503:
        response.headers["Retry-After"] = "30"
    return response


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Translate FastAPI's body, query and path validation failures to 422."""
    errors = [
        {
            "loc": list(error.get("loc", [])),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    problem = ProblemDetail(
        type="/errors/request-validation-error",
        title="Request Validation Error",
        status=422,
        detail="Request validation failed",
        instance=str(request.url.path),
        error_code="REQUEST_VALIDATION_ERROR",
        context={"errors": errors},
    )
    return _create_problem_response(problem)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log the full exception, return a sanitized 500."""
    correlation_id = _correlation_id()
    logger.exception(
        "unhandled_exception",
        extra={
            "correlation_id": correlation_id,
            "path": str(request.url.path),
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )

    if getattr(request.app.state, "expose_error_details", False):
        detail = f"{type(exc).__name__}: {exc}"
        context: dict[str, Any] | None = {"exception_type": type(exc).__name__}
    else:
        detail = "An internal error occurred. Please contact support with the correlation ID."
        context = None

    problem = ProblemDetail(
        type="/errors/internal-error",
        title="Internal Server Error",
        status=500,
        detail=detail,
        instance=str(request.url.path),
        error_code="INTERNAL_ERROR",
        context=context,
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the domain, request-validation and catch-all handlers on ``app``."""
    handler: Callable[[Request, Any], Awaitable[JSONResponse]] = domain_error_handler
    for exception_class in _DOMAIN_PROBLEMS:
        app.add_exception_handler(exception_class, handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
