"""Technical defaults written into every new tenant.

These are configuration values only. Business or master data (absence
types, departments, teams, sites) is never seeded for a new tenant.
"""

from __future__ import annotations

from typing import Any

DEFAULT_MODULE_KEYS: tuple[str, ...] = (
    "employees",
    "absence",
    "time_tracking",
    "documents",
    "settings",
)
"""Feature modules enabled for a freshly created tenant."""

BASELINE_TENANT_SETTINGS: dict[str, dict[str, Any]] = {
    "accessibility": {
        "high_contrast": False,
        "reduced_motion": False,
        "font_scale": 1.0,
        "screen_reader_hints": True,
    },
    "integrations": {
        "calendar_sync": False,
        "payroll_export": False,
        "sso": False,
        "webhooks": False,
    },
}
"""Baseline technical settings, keyed by settings category.

Accessibility starts at neutral defaults; every integration starts disabled.
"""
