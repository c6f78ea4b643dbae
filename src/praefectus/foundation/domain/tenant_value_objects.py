"""Value objects for tenant records.

Immutable, validated domain primitives. All validation occurs at
construction time.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import StrEnum


class SubscriptionStatus(StrEnum):
    """Subscription tiers a tenant can be on.

    New tenants start on ``TRIAL`` unless configured otherwise.
    Uses StrEnum for native JSON serialization.
    """

    TRIAL = "trial"
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class BillingCycle(StrEnum):
    """Billing intervals."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")
_TRANSLITERATIONS = str.maketrans({"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"})


@dataclass(frozen=True, slots=True)
class TenantName:
    """Validated tenant display name.

    Attributes:
        value: The validated name string (1-255 chars, unicode OK).

    Raises:
        ValueError: If name is empty, whitespace-only, or exceeds 255 chars.
    """

    value: str

    def __post_init__(self) -> None:
        stripped = self.value.strip()
        if not stripped:
            msg = "Tenant name cannot be empty"
            raise ValueError(msg)
        if len(stripped) > 255:
            msg = f"Tenant name too long: {len(stripped)} chars (max 255)"
            raise ValueError(msg)
        # Store the stripped value (bypass frozen with object.__setattr__)
        object.__setattr__(self, "value", stripped)


@dataclass(frozen=True, slots=True)
class TenantSlug:
    """Validated tenant slug, derived from the name and never edited directly.

    The slug is the store's uniqueness key for tenants: two tenants whose
    names derive the same slug conflict.

    Format: lowercase alphanumeric groups separated by single hyphens,
    1-63 chars.

    Attributes:
        value: The validated slug string.

    Raises:
        ValueError: If slug does not meet format or length requirements.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            msg = "Tenant slug cannot be empty"
            raise ValueError(msg)
        if len(self.value) > 63:
            msg = f"Tenant slug too long: '{self.value}' (max 63 chars)"
            raise ValueError(msg)
        if not _SLUG_PATTERN.match(self.value):
            msg = (
                f"Invalid tenant slug '{self.value}': must be lowercase "
                "alphanumeric groups separated by single hyphens"
            )
            raise ValueError(msg)

    @classmethod
    def from_name(cls, name: TenantName) -> TenantSlug:
        """Derive a slug from a tenant name.

        German umlauts are transliterated, remaining accents stripped, and
        every run of other characters collapses into one hyphen.

        Example:
            >>> TenantSlug.from_name(TenantName("Müller & Söhne GmbH")).value
            'mueller-soehne-gmbh'

        Raises:
            ValueError: If the name contains no usable characters.
        """
        lowered = name.value.lower().translate(_TRANSLITERATIONS)
        ascii_only = (
            unicodedata.normalize("NFKD", lowered).encode("ascii", "ignore").decode("ascii")
        )
        slug = re.sub(r"[^a-z0-9]+", "-", ascii_only).strip("-")[:63].rstrip("-")
        if not slug:
            msg = f"Tenant name '{name.value}' does not yield a usable slug"
            raise ValueError(msg)
        return cls(slug)


@dataclass(frozen=True, slots=True)
class CurrencyCode:
    """ISO 4217 currency code, normalized to upper case.

    Raises:
        ValueError: If the value is not three ASCII letters.
    """

    value: str

    def __post_init__(self) -> None:
        normalized = self.value.strip().upper()
        if not _CURRENCY_PATTERN.match(normalized):
            msg = f"Invalid currency code: '{self.value}' (expected 3 letters)"
            raise ValueError(msg)
        object.__setattr__(self, "value", normalized)
