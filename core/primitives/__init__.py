"""
Manara Core Primitives - Ledger Building Blocks
=================================================
Frozen records shared by the registry, the engines, the replay
and the read models. They are:

- Pure Python (no Django dependency)
- Immutable (frozen dataclasses)
- Serializable to the persisted camelCase record shape

Primitives:
    ledger      - Transactions, accounting entries, safes, salary payments
    item        - Product definition
    inventory   - Warehouses, branches, planned stock movements
    party       - Customers, suppliers, employees
"""

from core.primitives.inventory import Branch, StockMovement, Warehouse
from core.primitives.item import Product
from core.primitives.ledger import (
    ZERO,
    AccountingEntry,
    EntryType,
    SafeMovement,
    SalaryPayment,
    Safe,
    Transaction,
    TransactionItem,
    TransactionType,
    to_amount,
)
from core.primitives.party import Customer, Employee, EmployeeStatus, Supplier

__all__ = [
    "ZERO",
    "AccountingEntry",
    "Branch",
    "Customer",
    "Employee",
    "EmployeeStatus",
    "EntryType",
    "Product",
    "Safe",
    "SafeMovement",
    "SalaryPayment",
    "StockMovement",
    "Supplier",
    "Transaction",
    "TransactionItem",
    "TransactionType",
    "Warehouse",
    "to_amount",
]
