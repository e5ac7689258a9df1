"""
Manara Ledger Primitive - Transactions, Accounting Entries, Safes
===================================================================
Engine: Core Primitives
Authority: Manara ledger rules - append-only, replayable

The records every ledger component reads and writes:
    TransactionItem  - one line of a sale/purchase/loss/transfer
    Transaction      - one entry of the Transaction Log
    AccountingEntry  - revenue/expense voucher, mirrored into the log
    Safe             - named cash account
    SafeMovement     - planned change to one safe balance
    SalaryPayment    - payroll record behind a salary transaction

RULES:
- Records are frozen once built; "editing" is replacement by id
- Amounts are Decimal (exact arithmetic, no rounding)
- Quantities are int
- Dates are normalized ISO strings (see core.time.temporal)
- to_record()/from_record() give the JSON-compatible persisted shape

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from core.time.temporal import normalize_date

ZERO = Decimal(0)


def to_amount(value: Any) -> Decimal:
    """Coerce a monetary input into Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("amount must be numeric, got bool.")
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, (int, str)):
        try:
            return Decimal(value)
        except InvalidOperation:
            raise ValueError(f"amount '{value}' is not a number.") from None
    raise TypeError(f"amount must be numeric, got {type(value).__name__}.")


def _optional_amount(value: Any) -> Optional[Decimal]:
    return None if value is None else to_amount(value)


def _amount_str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class TransactionType(Enum):
    SALE = "sale"
    PURCHASE = "purchase"
    LOSS = "loss"
    TRANSFER = "transfer"
    SALARY = "salary"
    ACCOUNTING = "accounting"


# Transaction types that never move stock.
NON_INVENTORY_TYPES = frozenset({TransactionType.SALARY, TransactionType.ACCOUNTING})


class EntryType(Enum):
    REVENUE = "revenue"
    EXPENSE = "expense"


# ══════════════════════════════════════════════════════════════
# TRANSACTION ITEM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TransactionItem:
    """
    Line item of a Transaction.

    quantity is the total unit count (boxes already expanded).
    cost is the unit cost snapshotted from the product at entry time;
    None when the product has no known cost.
    """
    product_id: str
    quantity: int
    price: Decimal = ZERO
    cost: Optional[Decimal] = None
    product_name: str = ""
    loss_quantity: int = 0
    box_quantity: Optional[int] = None
    piece_quantity: Optional[int] = None

    def __post_init__(self):
        if not self.product_id or not isinstance(self.product_id, str):
            raise ValueError("product_id must be a non-empty string.")
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool):
            raise ValueError("quantity must be int.")
        if not isinstance(self.loss_quantity, int) or self.loss_quantity < 0:
            raise ValueError("loss_quantity must be a non-negative int.")
        object.__setattr__(self, "price", to_amount(self.price))
        object.__setattr__(self, "cost", _optional_amount(self.cost))

    @property
    def outgoing_quantity(self) -> int:
        """Units leaving the warehouse on a sale/loss (sold + written off)."""
        return self.quantity + self.loss_quantity

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @property
    def line_cost(self) -> Optional[Decimal]:
        if self.cost is None:
            return None
        return self.cost * self.quantity

    def to_record(self) -> dict:
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "quantity": self.quantity,
            "boxQuantity": self.box_quantity,
            "pieceQuantity": self.piece_quantity,
            "price": _amount_str(self.price),
            "cost": _amount_str(self.cost),
            "lossQuantity": self.loss_quantity,
        }

    @classmethod
    def from_record(cls, data: dict) -> TransactionItem:
        return cls(
            product_id=data["productId"],
            quantity=int(data["quantity"]),
            price=data.get("price") or ZERO,
            cost=data.get("cost"),
            product_name=data.get("productName") or "",
            loss_quantity=int(data.get("lossQuantity") or 0),
            box_quantity=data.get("boxQuantity"),
            piece_quantity=data.get("pieceQuantity"),
        )


# ══════════════════════════════════════════════════════════════
# TRANSACTION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Transaction:
    """
    One entry of the Transaction Log.

    total_amount is a magnitude; its sign is implied by the type.
    is_revenue is set only on accounting mirrors and tells the cash
    ledger and the safe statement which way the entry moves money.
    """
    transaction_id: str
    date: str
    transaction_type: TransactionType
    total_amount: Decimal
    items: Tuple[TransactionItem, ...] = ()
    entity_id: Optional[str] = None
    entity_name: Optional[str] = None
    warehouse_id: Optional[str] = None
    from_warehouse_id: Optional[str] = None
    to_warehouse_id: Optional[str] = None
    safe_id: Optional[str] = None
    branch_id: Optional[str] = None
    total_cost: Optional[Decimal] = None
    is_revenue: Optional[bool] = None

    def __post_init__(self):
        if not self.transaction_id or not isinstance(self.transaction_id, str):
            raise ValueError("transaction_id must be a non-empty string.")
        if not isinstance(self.transaction_type, TransactionType):
            object.__setattr__(
                self, "transaction_type", TransactionType(self.transaction_type)
            )
        object.__setattr__(self, "date", normalize_date(self.date))
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "total_amount", to_amount(self.total_amount))
        object.__setattr__(self, "total_cost", _optional_amount(self.total_cost))

        for item in self.items:
            if not isinstance(item, TransactionItem):
                raise TypeError("items must be TransactionItem instances.")

        if self.transaction_type in NON_INVENTORY_TYPES and self.items:
            raise ValueError(
                f"{self.transaction_type.value} transactions carry no items."
            )

        if self.transaction_type == TransactionType.ACCOUNTING:
            if not isinstance(self.is_revenue, bool):
                raise ValueError("accounting transactions must set is_revenue.")
        elif self.is_revenue is not None:
            raise ValueError("is_revenue is only valid on accounting transactions.")

    @property
    def is_inventory_move(self) -> bool:
        return self.transaction_type not in NON_INVENTORY_TYPES

    def references(self, entity_id: str) -> bool:
        """True if this transaction points at the given id anywhere."""
        if entity_id in (
            self.entity_id,
            self.warehouse_id,
            self.from_warehouse_id,
            self.to_warehouse_id,
            self.safe_id,
            self.branch_id,
        ):
            return True
        return any(item.product_id == entity_id for item in self.items)

    def to_record(self) -> dict:
        return {
            "id": self.transaction_id,
            "date": self.date,
            "type": self.transaction_type.value,
            "totalAmount": _amount_str(self.total_amount),
            "totalCost": _amount_str(self.total_cost),
            "items": [item.to_record() for item in self.items],
            "entityId": self.entity_id,
            "entityName": self.entity_name,
            "warehouseId": self.warehouse_id,
            "fromWarehouseId": self.from_warehouse_id,
            "toWarehouseId": self.to_warehouse_id,
            "safeId": self.safe_id,
            "branchId": self.branch_id,
            "isRevenue": self.is_revenue,
        }

    @classmethod
    def from_record(cls, data: dict) -> Transaction:
        return cls(
            transaction_id=data["id"],
            date=data["date"],
            transaction_type=TransactionType(data["type"]),
            total_amount=data["totalAmount"],
            total_cost=data.get("totalCost"),
            items=tuple(
                TransactionItem.from_record(item) for item in data.get("items", [])
            ),
            entity_id=data.get("entityId"),
            entity_name=data.get("entityName"),
            warehouse_id=data.get("warehouseId"),
            from_warehouse_id=data.get("fromWarehouseId"),
            to_warehouse_id=data.get("toWarehouseId"),
            safe_id=data.get("safeId"),
            branch_id=data.get("branchId"),
            is_revenue=data.get("isRevenue"),
        )


# ══════════════════════════════════════════════════════════════
# ACCOUNTING ENTRY
# ══════════════════════════════════════════════════════════════

ENTRY_LABELS: Dict[EntryType, str] = {
    EntryType.REVENUE: "Revenue",
    EntryType.EXPENSE: "Expense",
}


@dataclass(frozen=True)
class AccountingEntry:
    """
    Revenue or expense voucher against a safe.

    entity_id/entity_type link a settlement to a customer or supplier.
    """
    entry_id: str
    date: str
    entry_type: EntryType
    category: str
    amount: Decimal
    safe_id: str
    note: str = ""
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    branch_id: Optional[str] = None

    def __post_init__(self):
        if not self.entry_id or not isinstance(self.entry_id, str):
            raise ValueError("entry_id must be a non-empty string.")
        if not isinstance(self.entry_type, EntryType):
            object.__setattr__(self, "entry_type", EntryType(self.entry_type))
        object.__setattr__(self, "date", normalize_date(self.date))
        object.__setattr__(self, "amount", to_amount(self.amount))
        if self.amount <= 0:
            raise ValueError("amount must be positive.")
        if not self.safe_id:
            raise ValueError("safe_id must be non-empty.")
        if self.entity_type not in (None, "customer", "supplier"):
            raise ValueError(f"entity_type '{self.entity_type}' not valid.")

    @property
    def is_revenue(self) -> bool:
        return self.entry_type == EntryType.REVENUE

    @property
    def description(self) -> str:
        """Counterparty label of the mirror transaction."""
        return self.note or f"{ENTRY_LABELS[self.entry_type]}: {self.category}"

    def to_record(self) -> dict:
        return {
            "id": self.entry_id,
            "date": self.date,
            "type": self.entry_type.value,
            "category": self.category,
            "amount": _amount_str(self.amount),
            "safeId": self.safe_id,
            "note": self.note,
            "entityId": self.entity_id,
            "entityType": self.entity_type,
            "branchId": self.branch_id,
        }

    @classmethod
    def from_record(cls, data: dict) -> AccountingEntry:
        return cls(
            entry_id=data["id"],
            date=data["date"],
            entry_type=EntryType(data["type"]),
            category=data.get("category", ""),
            amount=data["amount"],
            safe_id=data["safeId"],
            note=data.get("note") or "",
            entity_id=data.get("entityId"),
            entity_type=data.get("entityType"),
            branch_id=data.get("branchId"),
        )


# ══════════════════════════════════════════════════════════════
# SAFE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Safe:
    """
    Named cash account.

    opening_balance is the balance the safe was registered with; the
    running balance lives in the cash ledger and may go negative.
    """
    safe_id: str
    name: str
    opening_balance: Decimal = ZERO

    def __post_init__(self):
        if not self.safe_id or not isinstance(self.safe_id, str):
            raise ValueError("safe_id must be a non-empty string.")
        object.__setattr__(self, "opening_balance", to_amount(self.opening_balance))

    @property
    def identity(self) -> str:
        return self.safe_id

    def to_record(self, balance: Optional[Decimal] = None) -> dict:
        return {
            "id": self.safe_id,
            "name": self.name,
            "openingBalance": _amount_str(self.opening_balance),
            "balance": _amount_str(
                self.opening_balance if balance is None else balance
            ),
        }

    @classmethod
    def from_record(cls, data: dict) -> Safe:
        opening = data.get("openingBalance")
        if opening is None:
            opening = data.get("balance", ZERO)
        return cls(safe_id=data["id"], name=data["name"], opening_balance=opening)


@dataclass(frozen=True)
class SafeMovement:
    """Planned change to one safe balance."""
    safe_id: str
    before: Decimal
    after: Decimal

    @property
    def delta(self) -> Decimal:
        return self.after - self.before


# ══════════════════════════════════════════════════════════════
# SALARY PAYMENT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SalaryPayment:
    """Payroll record. net_salary = base salary + bonus - deduction."""
    payment_id: str
    employee_id: str
    employee_name: str
    month: int
    year: int
    net_salary: Decimal
    date: str
    safe_id: str
    bonus: Decimal = ZERO
    deduction: Decimal = ZERO
    transaction_id: Optional[str] = None

    def __post_init__(self):
        if not self.payment_id:
            raise ValueError("payment_id must be non-empty.")
        if not 1 <= int(self.month) <= 12:
            raise ValueError("month must be between 1 and 12.")
        object.__setattr__(self, "date", normalize_date(self.date))
        object.__setattr__(self, "net_salary", to_amount(self.net_salary))
        object.__setattr__(self, "bonus", to_amount(self.bonus))
        object.__setattr__(self, "deduction", to_amount(self.deduction))

    def to_record(self) -> dict:
        return {
            "id": self.payment_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "month": self.month,
            "year": self.year,
            "bonus": _amount_str(self.bonus),
            "deduction": _amount_str(self.deduction),
            "netSalary": _amount_str(self.net_salary),
            "date": self.date,
            "safeId": self.safe_id,
            "transactionId": self.transaction_id,
        }

    @classmethod
    def from_record(cls, data: dict) -> SalaryPayment:
        return cls(
            payment_id=data["id"],
            employee_id=data["employeeId"],
            employee_name=data.get("employeeName", ""),
            month=int(data["month"]),
            year=int(data["year"]),
            bonus=data.get("bonus") or ZERO,
            deduction=data.get("deduction") or ZERO,
            net_salary=data["netSalary"],
            date=data["date"],
            safe_id=data["safeId"],
            transaction_id=data.get("transactionId"),
        )
