"""Identifier value objects for type-safe identifier handling.

Tenant and administrator identifiers are opaque, store-minted strings in
UUID form. Anything that does not look like one is rejected locally,
before a remote call is attempted.

Example:
    >>> from praefectus.foundation.domain import TenantId
    >>> TenantId("550e8400-e29b-41d4-a716-446655440000")
    TenantId(value='550e8400-e29b-41d4-a716-446655440000')
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class TenantId:
    """Tenant identifier with format validation.

    Attributes:
        value: UUID-shaped identifier string, normalized to lowercase.

    Raises:
        ValueError: If value doesn't match the UUID format.

    Example:
        >>> TenantId("not-a-uuid")
        Traceback (most recent call last):
        ...
        ValueError: Invalid tenant ID format: 'not-a-uuid'. Must be a UUID.
    """

    value: str

    _PATTERN: ClassVar[re.Pattern[str]] = _UUID_PATTERN

    def __post_init__(self) -> None:
        """Validate tenant ID format on construction."""
        if not isinstance(self.value, str) or not self._PATTERN.match(self.value):
            msg = f"Invalid tenant ID format: {self.value!r}. Must be a UUID."
            raise ValueError(msg)
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        """Return tenant ID string for serialization."""
        return self.value


@dataclass(frozen=True)
class AdminId:
    """Administrator identifier with format validation.

    Attributes:
        value: UUID-shaped identifier string, normalized to lowercase.

    Raises:
        ValueError: If value doesn't match the UUID format.
    """

    value: str

    _PATTERN: ClassVar[re.Pattern[str]] = _UUID_PATTERN

    def __post_init__(self) -> None:
        """Validate administrator ID format on construction."""
        if not isinstance(self.value, str) or not self._PATTERN.match(self.value):
            msg = f"Invalid administrator ID format: {self.value!r}. Must be a UUID."
            raise ValueError(msg)
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        """Return administrator ID string for serialization."""
        return self.value
