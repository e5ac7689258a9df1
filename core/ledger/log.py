"""
Manara Ledger - Transaction Log
=================================
Append-only ordered record of every monetary and inventory event.
The single source of truth every derived view reads.

Rules:
- Append only; no update, no delete
- Ids are unique
- Append order is preserved (replay order)
- Readers receive tuples, never the internal list
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from core.ledger.errors import DuplicateTransactionError
from core.primitives.ledger import Transaction


class TransactionLog:

    def __init__(self, transactions=()):
        self._entries: List[Transaction] = []
        self._index: Dict[str, Transaction] = {}
        for transaction in transactions:
            self.append(transaction)

    def check_appendable(self, transaction: Transaction) -> None:
        if not isinstance(transaction, Transaction):
            raise TypeError("only Transaction instances can be appended.")
        if transaction.transaction_id in self._index:
            raise DuplicateTransactionError(transaction.transaction_id)

    def append(self, transaction: Transaction) -> None:
        self.check_appendable(transaction)
        self._entries.append(transaction)
        self._index[transaction.transaction_id] = transaction

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return self._index.get(transaction_id)

    def __contains__(self, transaction_id: str) -> bool:
        return transaction_id in self._index

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._entries))

    def in_append_order(self) -> Tuple[Transaction, ...]:
        return tuple(self._entries)

    def newest_first(self) -> Tuple[Transaction, ...]:
        """Invoice view: most recent append first."""
        return tuple(reversed(self._entries))

    def referencing(self, entity_id: str) -> Tuple[Transaction, ...]:
        return tuple(t for t in self._entries if t.references(entity_id))
