"""
Manara Projections - Account Statements
=========================================
Running-balance statement of one customer, supplier or safe,
reconstructed from the Transaction Log.

Algorithm:
1. Keep transactions of the account (entity_id for customers and
   suppliers, safe_id for safes) inside the inclusive date window.
2. Stable sort ascending by date; equal dates keep log order.
3. Walk in order: balance += debit - credit.

Sign conventions:
    customer  sale -> debit          accounting -> credit
    supplier  purchase -> credit     accounting -> debit
    safe      sale, revenue entry -> debit
              purchase, salary, expense entry -> credit

A statement is a pure function of (log, filters).
An unknown account yields an empty statement, never an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from core.primitives.ledger import ZERO, Transaction, TransactionType
from core.registry import EntityKind
from core.time.temporal import DateRange

UNKNOWN_ACCOUNT = "Unknown account"
DEBIT_BALANCE = "debit balance"
CREDIT_BALANCE = "credit balance"


class AccountKind(Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    SAFE = "safe"


_REGISTRY_KIND = {
    AccountKind.CUSTOMER: EntityKind.CUSTOMER,
    AccountKind.SUPPLIER: EntityKind.SUPPLIER,
    AccountKind.SAFE: EntityKind.SAFE,
}


@dataclass(frozen=True)
class StatementRow:
    transaction_id: str
    date: str
    transaction_type: TransactionType
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.transaction_id,
            "date": self.date,
            "type": self.transaction_type.value,
            "description": self.description,
            "debit": str(self.debit),
            "credit": str(self.credit),
            "balance": str(self.balance),
        }


@dataclass(frozen=True)
class Statement:
    account_kind: AccountKind
    account_id: str
    account_name: str
    date_range: DateRange
    rows: Tuple[StatementRow, ...]

    @property
    def total_debit(self) -> Decimal:
        return sum((row.debit for row in self.rows), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((row.credit for row in self.rows), ZERO)

    @property
    def net(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def balance_label(self) -> str:
        return DEBIT_BALANCE if self.net >= 0 else CREDIT_BALANCE

    @property
    def closing_balance(self) -> Decimal:
        return self.rows[-1].balance if self.rows else ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accountKind": self.account_kind.value,
            "accountId": self.account_id,
            "accountName": self.account_name,
            "startDate": self.date_range.start,
            "endDate": self.date_range.end,
            "rows": [row.to_dict() for row in self.rows],
            "totalDebit": str(self.total_debit),
            "totalCredit": str(self.total_credit),
            "net": str(self.net),
            "balanceLabel": self.balance_label,
        }


# ══════════════════════════════════════════════════════════════
# SIGN CONVENTIONS
# ══════════════════════════════════════════════════════════════

def entry_sides(transaction: Transaction, account_kind: AccountKind) -> Tuple[Decimal, Decimal]:
    """(debit, credit) of one transaction on an account of the given kind."""
    kind = transaction.transaction_type
    amount = transaction.total_amount

    if account_kind == AccountKind.CUSTOMER:
        if kind == TransactionType.SALE:
            return amount, ZERO
        if kind == TransactionType.ACCOUNTING:
            return ZERO, amount
        return ZERO, ZERO

    if account_kind == AccountKind.SUPPLIER:
        if kind == TransactionType.PURCHASE:
            return ZERO, amount
        if kind == TransactionType.ACCOUNTING:
            return amount, ZERO
        return ZERO, ZERO

    if kind == TransactionType.SALE:
        return amount, ZERO
    if kind in (TransactionType.PURCHASE, TransactionType.SALARY):
        return ZERO, amount
    if kind == TransactionType.ACCOUNTING:
        return (amount, ZERO) if transaction.is_revenue else (ZERO, amount)
    return ZERO, ZERO


def _belongs_to(transaction: Transaction, account_kind: AccountKind, account_id: str) -> bool:
    if account_kind == AccountKind.SAFE:
        return transaction.safe_id == account_id
    return transaction.entity_id == account_id


# ══════════════════════════════════════════════════════════════
# BUILDERS
# ══════════════════════════════════════════════════════════════

def build_statement(
    transactions: Iterable[Transaction],
    account_kind: AccountKind,
    account_id: str,
    date_range: Optional[DateRange] = None,
    account_name: Optional[str] = None,
) -> Statement:
    """
    transactions must be in log (append) order so that equal dates
    keep their recorded order.
    """
    if not isinstance(account_kind, AccountKind):
        account_kind = AccountKind(account_kind)
    window = date_range or DateRange()

    matching = [
        t for t in transactions
        if _belongs_to(t, account_kind, account_id) and window.contains(t.date)
    ]
    matching.sort(key=lambda t: t.date)

    rows = []
    balance = ZERO
    for transaction in matching:
        debit, credit = entry_sides(transaction, account_kind)
        balance += debit - credit
        rows.append(StatementRow(
            transaction_id=transaction.transaction_id,
            date=transaction.date,
            transaction_type=transaction.transaction_type,
            description=transaction.entity_name or "",
            debit=debit,
            credit=credit,
            balance=balance,
        ))

    return Statement(
        account_kind=account_kind,
        account_id=account_id,
        account_name=account_name or UNKNOWN_ACCOUNT,
        date_range=window,
        rows=tuple(rows),
    )


def statement_for(
    store,
    account_kind: AccountKind,
    account_id: str,
    date_range: Optional[DateRange] = None,
) -> Statement:
    """Statement over a LedgerStore, resolving the account's name."""
    if not isinstance(account_kind, AccountKind):
        account_kind = AccountKind(account_kind)
    account = store.get_entity(_REGISTRY_KIND[account_kind], account_id)
    return build_statement(
        store.transactions(),
        account_kind,
        account_id,
        date_range=date_range,
        account_name=account.name if account is not None else None,
    )
