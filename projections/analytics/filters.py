"""
Manara Projections - Report Filters
=====================================
Date window, branch and free-text search over the log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from core.primitives.ledger import Transaction
from core.time.temporal import DateRange


@dataclass(frozen=True)
class ReportFilters:
    """
    search matches the counterparty name or any item's product name,
    case-insensitively. Empty values impose no constraint.
    """
    date_range: DateRange = field(default_factory=DateRange)
    branch_id: Optional[str] = None
    search: str = ""

    def matches(self, transaction: Transaction) -> bool:
        if not self.date_range.contains(transaction.date):
            return False
        if self.branch_id and transaction.branch_id != self.branch_id:
            return False
        if self.search:
            term = self.search.lower()
            if term in (transaction.entity_name or "").lower():
                return True
            return any(term in item.product_name.lower() for item in transaction.items)
        return True


def filter_transactions(
    transactions: Iterable[Transaction],
    filters: Optional[ReportFilters] = None,
) -> Tuple[Transaction, ...]:
    if filters is None:
        return tuple(transactions)
    return tuple(t for t in transactions if filters.matches(t))
