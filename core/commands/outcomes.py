"""
Manara Command Layer - Ledger Outcome Contract
================================================
Every ledger mutator returns exactly one LedgerOutcome.

The outcome never signals failure: structural violations raise,
business edge cases are reported as notices.

Rules:
- Outcome is immutable (frozen dataclass)
- notices are ordered as they were raised
- transaction_id is set when the operation appended to the log
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from core.commands.notices import LedgerNotice


@dataclass(frozen=True)
class LedgerOutcome:
    """
    Result of one ledger mutation.

    Fields:
        transaction_id: Id appended to the Transaction Log, if any.
        notices:        Absorbed conditions (skipped refs, clamps, ...).
    """

    transaction_id: Optional[str] = None
    notices: Tuple[LedgerNotice, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "notices", tuple(self.notices))
        for notice in self.notices:
            if not isinstance(notice, LedgerNotice):
                raise ValueError("notices must be LedgerNotice instances.")

    @property
    def is_clean(self) -> bool:
        return not self.notices

    @property
    def has_warnings(self) -> bool:
        return bool(self.notices)

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(notice.code for notice in self.notices)

    def with_notices(self, extra: Iterable[LedgerNotice]) -> LedgerOutcome:
        return LedgerOutcome(
            transaction_id=self.transaction_id,
            notices=self.notices + tuple(extra),
        )

    def to_dict(self) -> dict:
        return {
            "transaction_id": self.transaction_id,
            "notices": [notice.to_dict() for notice in self.notices],
        }
