"""
Manara Ledger - Public API
============================
Transaction Log = the record.
Stock and cash ledgers = derived state.
Derived state must always be reproducible from the record.

The store is imported from its module to keep the registry and
the engines free of import cycles:
    from core.ledger.store import LedgerStore
"""

from core.ledger.errors import (
    DuplicateEntityError,
    DuplicateTransactionError,
    ImmutableFieldError,
    LedgerError,
    LedgerPersistenceError,
    PermissionDeniedError,
)
from core.ledger.ids import TransactionIdGenerator
from core.ledger.log import TransactionLog

__all__ = [
    "DuplicateEntityError",
    "DuplicateTransactionError",
    "ImmutableFieldError",
    "LedgerError",
    "LedgerPersistenceError",
    "PermissionDeniedError",
    "TransactionIdGenerator",
    "TransactionLog",
]
