"""
Manara Projections - Transaction Registry
===========================================
Two read views over the log:
    invoice view  - one row per transaction, newest first
    product view  - one row per line item, newest first

A transaction without items (salary, accounting) still appears in
the product view as a single financial-only row.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Tuple

from core.primitives.ledger import Transaction, TransactionType

FINANCIAL_ONLY_LABEL = "Financial operation only"


class RegistryView(Enum):
    INVOICE = "invoice"
    PRODUCT = "product"


@dataclass(frozen=True)
class MovementRow:
    transaction_id: str
    date: str
    transaction_type: TransactionType
    entity_name: Optional[str]
    branch_id: Optional[str]
    safe_id: Optional[str]
    product_id: Optional[str]
    product_name: str
    quantity: int
    unit_price: Optional[Decimal]
    item_total: Decimal

    def matches(self, term: str) -> bool:
        return (
            term in (self.entity_name or "").lower()
            or term in self.transaction_id.lower()
            or term in self.product_name.lower()
        )


def product_movements(transactions: Iterable[Transaction]) -> Tuple[MovementRow, ...]:
    rows = []
    for transaction in transactions:
        common = dict(
            transaction_id=transaction.transaction_id,
            date=transaction.date,
            transaction_type=transaction.transaction_type,
            entity_name=transaction.entity_name,
            branch_id=transaction.branch_id,
            safe_id=transaction.safe_id,
        )
        for item in transaction.items:
            rows.append(MovementRow(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.price,
                item_total=item.line_total,
                **common,
            ))
        if not transaction.items:
            rows.append(MovementRow(
                product_id=None,
                product_name=FINANCIAL_ONLY_LABEL,
                quantity=0,
                unit_price=None,
                item_total=transaction.total_amount,
                **common,
            ))
    return tuple(rows)


def transaction_matches(transaction: Transaction, term: str) -> bool:
    """Case-insensitive match on counterparty, id, or any product name."""
    term = term.lower()
    if term in (transaction.entity_name or "").lower():
        return True
    if term in transaction.transaction_id.lower():
        return True
    return any(term in item.product_name.lower() for item in transaction.items)


def search_transactions(
    transactions: Iterable[Transaction],
    term: str = "",
) -> Tuple[Transaction, ...]:
    if not term:
        return tuple(transactions)
    return tuple(t for t in transactions if transaction_matches(t, term))


def search_movements(rows: Iterable[MovementRow], term: str = "") -> Tuple[MovementRow, ...]:
    if not term:
        return tuple(rows)
    lowered = term.lower()
    return tuple(row for row in rows if row.matches(lowered))


def registry_rows(store, view: RegistryView = RegistryView.INVOICE, search: str = "") -> tuple:
    """Rows of the requested registry view over a LedgerStore."""
    transactions = store.transactions_newest_first()
    if RegistryView(view) == RegistryView.INVOICE:
        return search_transactions(transactions, search)
    return search_movements(product_movements(transactions), search)
