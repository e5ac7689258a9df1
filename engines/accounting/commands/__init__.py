"""
Manara Accounting Engine - Request Commands
=============================================
Typed revenue/expense vouchers and statement settlements that
convert into AccountingEntry records.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from core.primitives.ledger import AccountingEntry, EntryType, to_amount
from core.time.temporal import normalize_date

SETTLEMENT_CATEGORY = "Account settlement"

VALID_SETTLEMENT_ACCOUNTS = frozenset({"customer", "supplier"})


@dataclass(frozen=True)
class AccountingEntryRequest:
    """Revenue or expense voucher against a safe."""
    entry_type: EntryType
    category: str
    amount: Decimal
    safe_id: str
    date: str
    note: str = ""
    branch_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.entry_type, EntryType):
            object.__setattr__(self, "entry_type", EntryType(self.entry_type))
        if not self.category:
            raise ValueError("category must be non-empty.")
        object.__setattr__(self, "amount", to_amount(self.amount))
        if self.amount <= 0:
            raise ValueError("amount must be positive.")
        if not self.safe_id:
            raise ValueError("safe_id must be non-empty.")
        object.__setattr__(self, "date", normalize_date(self.date))

    def to_entry(self, entry_id: str) -> AccountingEntry:
        return AccountingEntry(
            entry_id=entry_id,
            date=self.date,
            entry_type=self.entry_type,
            category=self.category,
            amount=self.amount,
            safe_id=self.safe_id,
            note=self.note,
            branch_id=self.branch_id,
        )


@dataclass(frozen=True)
class SettlementRequest:
    """
    Payment settling a customer or supplier statement.

    A customer pays in (revenue); the business pays a supplier out
    (expense). The entry is linked to the account so it shows up on
    that account's statement.
    """
    account_type: str
    account_id: str
    amount: Decimal
    safe_id: str
    date: str
    account_name: str = ""
    note: str = ""

    def __post_init__(self):
        if self.account_type not in VALID_SETTLEMENT_ACCOUNTS:
            raise ValueError(
                f"account_type '{self.account_type}' not valid. "
                f"Must be one of: {sorted(VALID_SETTLEMENT_ACCOUNTS)}"
            )
        if not self.account_id:
            raise ValueError("account_id must be non-empty.")
        object.__setattr__(self, "amount", to_amount(self.amount))
        if self.amount <= 0:
            raise ValueError("amount must be positive.")
        if not self.safe_id:
            raise ValueError("safe_id must be non-empty.")
        object.__setattr__(self, "date", normalize_date(self.date))

    @property
    def entry_type(self) -> EntryType:
        if self.account_type == "customer":
            return EntryType.REVENUE
        return EntryType.EXPENSE

    def to_entry(self, entry_id: str) -> AccountingEntry:
        note = self.note
        if not note and self.account_name:
            note = f"{SETTLEMENT_CATEGORY}: {self.account_name}"
        return AccountingEntry(
            entry_id=entry_id,
            date=self.date,
            entry_type=self.entry_type,
            category=SETTLEMENT_CATEGORY,
            amount=self.amount,
            safe_id=self.safe_id,
            note=note,
            entity_id=self.account_id,
            entity_type=self.account_type,
        )
