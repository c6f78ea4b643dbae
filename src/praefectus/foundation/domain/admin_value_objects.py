"""Value objects for administrator records.

Immutable, validated domain primitives. All validation occurs at construction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AdminRole(StrEnum):
    """Role tags an administrator can carry within a tenant."""

    ADMIN = "admin"
    HR_ADMIN = "hr_admin"
    HR_MANAGER = "hr_manager"


class Salutation(StrEnum):
    """Salutations used when composing display names and e-mails."""

    HERR = "Herr"
    FRAU = "Frau"
    DIVERS = "Divers"


class AdminStatus(StrEnum):
    """Administrator lifecycle states.

    Three-state lifecycle:
        CREATED -> PENDING_INVITATION -> ACTIVE

    ``ACTIVE`` is also assigned directly when an administrator is created
    with a password. Completing registration (pending -> active) happens
    outside the console; the console only records that an invitation went out.
    """

    CREATED = "created"
    PENDING_INVITATION = "pending_invitation"
    ACTIVE = "active"

    def can_transition_to(self, target: AdminStatus) -> bool:
        """Return True if moving from this status to ``target`` is allowed.

        Re-applying the current status counts as allowed (a no-op).
        """
        if target is self:
            return True
        return (self, target) in _ALLOWED_TRANSITIONS


_ALLOWED_TRANSITIONS: frozenset[tuple[AdminStatus, AdminStatus]] = frozenset(
    {
        (AdminStatus.CREATED, AdminStatus.PENDING_INVITATION),
        (AdminStatus.PENDING_INVITATION, AdminStatus.ACTIVE),
    }
)


@dataclass(frozen=True, slots=True)
class Email:
    """Validated email address value object.

    Stored lower-cased and stripped; per-tenant uniqueness is decided on
    this normalized form.

    Attributes:
        value: The validated, normalized email string.

    Raises:
        ValueError: If email is empty, malformed, or exceeds 254 chars.
    """

    value: str

    def __post_init__(self) -> None:
        normalized = self.value.strip().lower()
        if not normalized:
            msg = "Email cannot be empty"
            raise ValueError(msg)
        if len(normalized) > 254:
            msg = f"Email too long: {len(normalized)} chars (max 254)"
            raise ValueError(msg)
        if not _EMAIL_PATTERN.match(normalized):
            msg = f"Invalid email format: '{self.value}'"
            raise ValueError(msg)
        object.__setattr__(self, "value", normalized)


@dataclass(frozen=True, slots=True)
class PersonName:
    """Validated first or last name.

    Attributes:
        value: The validated name (whitespace stripped, 1-100 chars).

    Raises:
        ValueError: If the name is empty/whitespace-only or exceeds 100 chars.
    """

    value: str

    def __post_init__(self) -> None:
        stripped = self.value.strip()
        if not stripped:
            msg = "Name cannot be empty"
            raise ValueError(msg)
        if len(stripped) > 100:
            msg = f"Name too long: {len(stripped)} chars (max 100)"
            raise ValueError(msg)
        object.__setattr__(self, "value", stripped)


@dataclass(frozen=True, slots=True)
class Password:
    """Plaintext password supplied for direct provisioning.

    Never logged or persisted as-is; the store hashes it.

    Raises:
        ValueError: If shorter than ``min_length`` or longer than 72 bytes
            (the bcrypt input limit).
    """

    value: str
    min_length: int = 6

    def __post_init__(self) -> None:
        if len(self.value) < self.min_length:
            msg = f"Password must be at least {self.min_length} characters"
            raise ValueError(msg)
        if len(self.value.encode("utf-8")) > 72:
            msg = "Password too long (max 72 bytes)"
            raise ValueError(msg)

    def __repr__(self) -> str:
        return "Password('***')"


def compose_display_name(salutation: Salutation, first_name: str, last_name: str) -> str:
    """Build the display name shown in the console, e.g. ``"Herr Max Mustermann"``."""
    return f"{salutation.value} {first_name.strip()} {last_name.strip()}"
