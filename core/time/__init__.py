"""
Manara Core Time - Public API
===============================
Explicit clock protocol and ledger date helpers.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    epoch_millis,
    get_default_clock,
    set_default_clock,
)
from core.time.temporal import DateRange, normalize_date

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "epoch_millis",
    "get_default_clock",
    "set_default_clock",
    "DateRange",
    "normalize_date",
]
