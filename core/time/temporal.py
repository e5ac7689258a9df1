"""
Manara Core Time - Ledger Dates
=================================
Ledger dates are ISO calendar strings (YYYY-MM-DD).

Because every stored date is normalized here, plain string
comparison orders them chronologically. Anything that is not a
valid ISO date is refused at record construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[str, date]


def normalize_date(value: DateLike) -> str:
    """
    Return the ISO calendar form of a date-like value.

    Accepts date/datetime objects and ISO strings. A datetime keeps
    only its calendar part.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not value:
        raise ValueError(f"date must be an ISO date string, got {value!r}.")
    try:
        parsed = date.fromisoformat(value[:10])
    except ValueError:
        raise ValueError(f"date '{value}' is not an ISO date (YYYY-MM-DD).") from None
    if len(value) > 10 and value[10] not in ("T", " "):
        raise ValueError(f"date '{value}' is not an ISO date (YYYY-MM-DD).")
    return parsed.isoformat()


# ══════════════════════════════════════════════════════════════
# DATE RANGE - inclusive, each bound optional
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DateRange:
    """
    Inclusive [start, end] window over ledger dates.

    An unset bound imposes no constraint.
    """

    start: Optional[str] = None
    end: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start is not None:
            object.__setattr__(self, "start", normalize_date(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", normalize_date(self.end))

    @classmethod
    def of(cls, start: Optional[DateLike] = None, end: Optional[DateLike] = None) -> "DateRange":
        return cls(start=start or None, end=end or None)

    def contains(self, iso_date: str) -> bool:
        if self.start is not None and iso_date < self.start:
            return False
        if self.end is not None and iso_date > self.end:
            return False
        return True

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None
