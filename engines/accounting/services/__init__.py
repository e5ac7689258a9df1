"""
Manara Accounting Engine - Mirroring and Journal Summary
==========================================================
Every AccountingEntry is mirrored into the Transaction Log as an
`accounting` transaction so statements and reports treat it like
any other ledger row.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from core.primitives.ledger import (
    ZERO,
    AccountingEntry,
    Transaction,
    TransactionType,
)


def mirror_accounting_entry(entry: AccountingEntry) -> Transaction:
    """
    Synthetic log transaction for an accounting entry.

    Same id, date and amount as the entry; polarity travels as
    is_revenue, never through the label text.
    """
    return Transaction(
        transaction_id=entry.entry_id,
        date=entry.date,
        transaction_type=TransactionType.ACCOUNTING,
        total_amount=entry.amount,
        entity_id=entry.entity_id,
        entity_name=entry.description,
        safe_id=entry.safe_id,
        branch_id=entry.branch_id,
        is_revenue=entry.is_revenue,
    )


@dataclass(frozen=True)
class JournalSummary:
    total_revenue: Decimal
    total_expense: Decimal
    entry_count: int

    @property
    def net(self) -> Decimal:
        return self.total_revenue - self.total_expense

    def to_dict(self) -> dict:
        return {
            "totalRevenue": str(self.total_revenue),
            "totalExpense": str(self.total_expense),
            "net": str(self.net),
            "entryCount": self.entry_count,
        }


def summarize_journal(entries: Iterable[AccountingEntry]) -> JournalSummary:
    revenue = ZERO
    expense = ZERO
    count = 0
    for entry in entries:
        count += 1
        if entry.is_revenue:
            revenue += entry.amount
        else:
            expense += entry.amount
    return JournalSummary(total_revenue=revenue, total_expense=expense, entry_count=count)
