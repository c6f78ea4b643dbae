"""Translate value-object construction failures into ``ValidationError``.

Value objects raise plain ``ValueError``; callers at the service boundary
need to know which input field was wrong. Every helper here raises
``ValidationError`` carrying the field name and never touches I/O, so
validation always completes before the first store call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from praefectus.foundation.domain.admin_value_objects import Email, PersonName
from praefectus.foundation.domain.exceptions import ValidationError
from praefectus.foundation.domain.identifiers import AdminId, TenantId

if TYPE_CHECKING:
    from collections.abc import Callable
    from enum import StrEnum

T = TypeVar("T")
E = TypeVar("E", bound="StrEnum")


def validated(field: str, factory: Callable[[str], T], value: str | None) -> T:
    """Build ``factory(value)``, reporting failures against ``field``.

    Raises:
        ValidationError: If ``value`` is None or the factory rejects it.
    """
    if value is None:
        raise ValidationError(field, "Field is required")
    try:
        return factory(value)
    except ValueError as exc:
        raise ValidationError(field, str(exc)) from exc


def tenant_id(value: str | None, field: str = "tenant_id") -> str:
    """Return the normalized tenant id or raise ``ValidationError``."""
    return validated(field, TenantId, value).value


def admin_id(value: str | None, field: str = "admin_id") -> str:
    """Return the normalized administrator id or raise ``ValidationError``."""
    return validated(field, AdminId, value).value


def email(value: str | None, field: str = "email") -> str:
    """Return the normalized email or raise ``ValidationError``."""
    return validated(field, Email, value).value


def optional_email(value: str | None, field: str) -> str | None:
    """Like ``email`` but blank values mean "not supplied"."""
    if value is None or not value.strip():
        return None
    return email(value, field)


def person_name(value: str | None, field: str) -> str:
    return validated(field, PersonName, value).value


def choice(enum_cls: type[E], value: str | None, field: str) -> E:
    """Look ``value`` up in ``enum_cls``.

    Raises:
        ValidationError: If missing or not one of the enum's values.
    """
    if value is None or not str(value).strip():
        raise ValidationError(field, "Field is required")
    try:
        return enum_cls(str(value).strip())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(field, f"Must be one of: {allowed}", value=value) from exc


def optional_text(value: str | None) -> str | None:
    """Strip free-text input; blank becomes None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
