"""
Manara Core Config - Application Settings
===========================================
Tunables come from the MANARA dict of the Django settings module,
never from constants buried in engine logic. Outside a configured
Django process the defaults below apply.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


@dataclass(frozen=True)
class LedgerSettings:
    """
    ASSISTANT_TIMEOUT_SECONDS: upper bound for one assistant call.
    TOP_ENTITIES_LIMIT:        size of the dashboard top-counterparty list.
    CURRENCY:                  display currency code.
    """

    assistant_timeout_seconds: float = 30.0
    top_entities_limit: int = 5
    currency: str = "SAR"

    def __post_init__(self) -> None:
        if self.assistant_timeout_seconds <= 0:
            raise ValueError("ASSISTANT_TIMEOUT_SECONDS must be positive.")
        if not isinstance(self.top_entities_limit, int) or self.top_entities_limit < 1:
            raise ValueError("TOP_ENTITIES_LIMIT must be a positive int.")
        if not self.currency:
            raise ValueError("CURRENCY must be non-empty.")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> LedgerSettings:
        known = {f.name.upper(): f.name for f in fields(cls)}
        unknown = set(values) - set(known)
        if unknown:
            raise ValueError(f"Unknown MANARA settings: {sorted(unknown)}")
        return cls(**{known[key]: value for key, value in values.items()})


def get_ledger_settings(overrides: Optional[Mapping[str, Any]] = None) -> LedgerSettings:
    """Settings from django.conf.settings.MANARA, falling back to defaults."""
    try:
        values = dict(getattr(settings, "MANARA", {}))
    except ImproperlyConfigured:
        values = {}
    if overrides:
        values.update(overrides)
    return LedgerSettings.from_mapping(values)
