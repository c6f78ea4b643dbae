"""Domain exception hierarchy for type-safe error handling.

Every failure the lifecycle managers surface is one of these types. Each
exception carries a machine-readable ``error_code`` and structured
``context`` so the console API and the logs can report it consistently.

Example:
    >>> from praefectus.foundation.domain.exceptions import NotFoundError
    >>> raise NotFoundError("Tenant", "550e8400-e29b-41d4-a716-446655440000")
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ConflictError",
    "DomainError",
    "FatalInconsistencyError",
    "InvalidStateTransitionError",
    "NotFoundError",
    "TransportError",
    "ValidationError",
]


class DomainError(Exception):
    """Base class for all domain errors.

    Attributes:
        error_code: Machine-readable error code for client handling.
        message: Human-readable error description.
        context: Structured debugging information (tenant ids, field names).

    Example:
        >>> raise DomainError("Operation failed", context={"tenant_id": "123"})
        DomainError: Operation failed (tenant_id=123)
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize domain error with message and optional context.

        Args:
            message: Human-readable error description.
            context: Structured debugging information. Keys should be snake_case.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class NotFoundError(DomainError):
    """Raised when a referenced tenant or administrator does not exist.

    Maps to HTTP 404 Not Found. Recoverable only by resynchronizing the
    caller's view of the data.

    Attributes:
        error_code: "RESOURCE_NOT_FOUND" (class constant).
        resource_type: Type of missing resource.
        resource_id: Identifier of missing resource.

    Example:
        >>> raise NotFoundError("Administrator", "0b8e...")
        NotFoundError: Administrator not found: 0b8e...
    """

    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str, **extra_context: Any) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} not found: {resource_id}"
        context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            **extra_context,
        }
        super().__init__(message, context)


class ValidationError(DomainError):
    """Raised when input is malformed or a required field is missing.

    Maps to HTTP 422 Unprocessable Entity. Always raised before any store
    or gateway call is made, so the caller can correct and resubmit.

    Attributes:
        error_code: "VALIDATION_ERROR" (class constant).
        field: Field path that failed validation.
        reason: Human-readable validation failure reason.

    Example:
        >>> raise ValidationError("email", "Invalid email format")
        ValidationError: Validation failed for 'email': Invalid email format
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        **extra_context: Any,
    ) -> None:
        """Initialize validation error.

        Args:
            field: Field path that failed validation (e.g., "profile.email").
            reason: Human-readable validation failure reason.
            **extra_context: Additional debugging context.
        """
        self.field = field
        self.reason = reason
        message = f"Validation failed for '{field}': {reason}"
        context = {
            "field": field,
            "reason": reason,
            **extra_context,
        }
        super().__init__(message, context)


class ConflictError(DomainError):
    """Raised when the store rejects an operation for a business-rule reason.

    Maps to HTTP 409 Conflict. Typical causes are a duplicate tenant slug or
    a duplicate administrator email within a tenant. The caller must refresh
    its state before retrying.

    Attributes:
        error_code: "CONFLICT" (class constant).
        reason: Description of the conflict.

    Example:
        >>> raise ConflictError("Administrator already exists", email="a@acme.de")
        ConflictError: Conflict: Administrator already exists (email=a@acme.de)
    """

    error_code: str = "CONFLICT"

    def __init__(
        self,
        reason: str,
        **context: Any,
    ) -> None:
        """Initialize conflict error.

        Args:
            reason: Description of conflict (e.g., "Tenant slug already taken").
            **context: Additional debugging context.
        """
        self.reason = reason
        message = f"Conflict: {reason}"
        super().__init__(message, context)


class InvalidStateTransitionError(ConflictError):
    """Raised when an administrator status transition is not allowed.

    Maps to HTTP 409 Conflict. Inherits from ConflictError for
    consistent error handling at the API layer.

    Attributes:
        error_code: "INVALID_STATE_TRANSITION" (class constant).

    Example:
        >>> raise InvalidStateTransitionError(
        ...     "Cannot move administrator from created to active"
        ... )
    """

    error_code: str = "INVALID_STATE_TRANSITION"

    def __init__(self, message: str, **context: Any) -> None:
        # Passed through unprefixed: the message already names both states.
        DomainError.__init__(self, message, context)
        self.reason = message


class FatalInconsistencyError(DomainError):
    """Raised when a deletion may have left partial state behind.

    Maps to HTTP 500 with a dedicated problem type. Must never be retried
    blindly: a second cascade against half-deleted data risks double side
    effects.

    Attributes:
        error_code: "FATAL_INCONSISTENCY" (class constant).
        reason: Description of what could not be verified.

    Example:
        >>> raise FatalInconsistencyError(
        ...     "Tenant still resolves after cascade delete", tenant_id="..."
        ... )
    """

    error_code: str = "FATAL_INCONSISTENCY"

    def __init__(self, reason: str, **context: Any) -> None:
        self.reason = reason
        message = f"Fatal inconsistency: {reason}"
        super().__init__(message, context)


class TransportError(DomainError):
    """Raised when the store or gateway is unreachable or failed opaquely.

    Maps to HTTP 503 Service Unavailable. Recoverable by retrying the same
    input, not by changing it.

    Attributes:
        error_code: "TRANSPORT_ERROR" (class constant).
        operation: Name of the remote operation that failed.
        reason: Description of the failure.

    Example:
        >>> raise TransportError("send_invitation", "connection refused")
        TransportError: send_invitation failed: connection refused
    """

    error_code: str = "TRANSPORT_ERROR"

    def __init__(self, operation: str, reason: str, **extra_context: Any) -> None:
        """Initialize transport error.

        Args:
            operation: Remote operation name (e.g., "create_tenant").
            reason: Human-readable failure description.
            **extra_context: Additional debugging context.
        """
        self.operation = operation
        self.reason = reason
        message = f"{operation} failed: {reason}"
        context = {
            "operation": operation,
            "reason": reason,
            **extra_context,
        }
        super().__init__(message, context)
