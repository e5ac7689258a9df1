"""
Manara Inventory Engine - Request Commands
============================================
Typed caller-side requests that convert into ledger Transactions.

Validation happens here, before the ledger is touched. The
LedgerStore itself assumes pre-validated input.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from core.primitives.item import Product
from core.primitives.ledger import (
    ZERO,
    Transaction,
    TransactionItem,
    TransactionType,
    to_amount,
)
from core.time.temporal import normalize_date

TRANSFER_LABEL = "Stock transfer"
INTERNAL_OPERATION_LABEL = "Internal operation"


# ══════════════════════════════════════════════════════════════
# LINE ITEMS
# ══════════════════════════════════════════════════════════════

def build_item(
    product: Product,
    box_quantity: int = 0,
    piece_quantity: int = 0,
    price=None,
    loss_quantity: int = 0,
) -> TransactionItem:
    """
    Expand box/piece counts into a line item.

    quantity = box_quantity * items_per_box + piece_quantity.
    The product's current cost is snapshotted onto the line; price
    defaults to the product's sale price.
    """
    if box_quantity < 0 or piece_quantity < 0:
        raise ValueError("box and piece quantities must be non-negative.")
    if loss_quantity < 0:
        raise ValueError("loss_quantity must be non-negative.")
    return TransactionItem(
        product_id=product.product_id,
        product_name=product.name,
        quantity=box_quantity * product.items_per_box + piece_quantity,
        box_quantity=box_quantity,
        piece_quantity=piece_quantity,
        price=product.price if price is None else to_amount(price),
        cost=product.cost,
        loss_quantity=loss_quantity,
    )


def totals_of(items: Sequence[TransactionItem]) -> Tuple[Decimal, Optional[Decimal]]:
    """(total amount, total cost). Lines without a known cost add nothing."""
    total_amount = sum((item.line_total for item in items), ZERO)
    costs = [item.line_cost for item in items if item.line_cost is not None]
    total_cost = sum(costs, ZERO) if costs else None
    return total_amount, total_cost


def _validate_items(items: Tuple[TransactionItem, ...]) -> None:
    if not items:
        raise ValueError("at least one item is required.")
    for item in items:
        if not isinstance(item, TransactionItem):
            raise ValueError("items must be TransactionItem instances.")
        if item.quantity <= 0:
            raise ValueError(
                f"quantity for product '{item.product_id}' must be positive."
            )
        if item.price < 0:
            raise ValueError(
                f"price for product '{item.product_id}' must be non-negative."
            )


def _zero_priced(items: Tuple[TransactionItem, ...]) -> Tuple[TransactionItem, ...]:
    return tuple(replace(item, price=ZERO) for item in items)


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SaleRequest:
    """Sale of goods from one warehouse to a customer."""
    customer_id: str
    customer_name: str
    warehouse_id: str
    items: Tuple[TransactionItem, ...]
    date: str
    safe_id: Optional[str] = None
    branch_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        if not self.customer_id:
            raise ValueError("customer_id must be non-empty.")
        if not self.warehouse_id:
            raise ValueError("warehouse_id must be non-empty.")
        object.__setattr__(self, "date", normalize_date(self.date))
        _validate_items(self.items)

    def to_transaction(self, transaction_id: str) -> Transaction:
        total_amount, total_cost = totals_of(self.items)
        return Transaction(
            transaction_id=transaction_id,
            date=self.date,
            transaction_type=TransactionType.SALE,
            items=self.items,
            total_amount=total_amount,
            total_cost=total_cost,
            entity_id=self.customer_id,
            entity_name=self.customer_name,
            warehouse_id=self.warehouse_id,
            safe_id=self.safe_id,
            branch_id=self.branch_id,
        )


@dataclass(frozen=True)
class PurchaseRequest:
    """Purchase of goods from a supplier into one warehouse."""
    supplier_id: str
    supplier_name: str
    warehouse_id: str
    items: Tuple[TransactionItem, ...]
    date: str
    safe_id: Optional[str] = None
    branch_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        if not self.supplier_id:
            raise ValueError("supplier_id must be non-empty.")
        if not self.warehouse_id:
            raise ValueError("warehouse_id must be non-empty.")
        object.__setattr__(self, "date", normalize_date(self.date))
        _validate_items(self.items)

    def to_transaction(self, transaction_id: str) -> Transaction:
        total_amount, total_cost = totals_of(self.items)
        return Transaction(
            transaction_id=transaction_id,
            date=self.date,
            transaction_type=TransactionType.PURCHASE,
            items=self.items,
            total_amount=total_amount,
            total_cost=total_cost,
            entity_id=self.supplier_id,
            entity_name=self.supplier_name,
            warehouse_id=self.warehouse_id,
            safe_id=self.safe_id,
            branch_id=self.branch_id,
        )


@dataclass(frozen=True)
class LossRequest:
    """Write-off of damaged or missing stock. Moves no cash."""
    warehouse_id: str
    items: Tuple[TransactionItem, ...]
    date: str
    branch_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "items", _zero_priced(tuple(self.items)))
        if not self.warehouse_id:
            raise ValueError("warehouse_id must be non-empty.")
        object.__setattr__(self, "date", normalize_date(self.date))
        _validate_items(self.items)

    def to_transaction(self, transaction_id: str) -> Transaction:
        _, total_cost = totals_of(self.items)
        return Transaction(
            transaction_id=transaction_id,
            date=self.date,
            transaction_type=TransactionType.LOSS,
            items=self.items,
            total_amount=ZERO,
            total_cost=total_cost,
            entity_name=INTERNAL_OPERATION_LABEL,
            warehouse_id=self.warehouse_id,
            branch_id=self.branch_id,
        )


@dataclass(frozen=True)
class TransferRequest:
    """Move stock between two different warehouses. Moves no cash."""
    from_warehouse_id: str
    to_warehouse_id: str
    items: Tuple[TransactionItem, ...]
    date: str
    branch_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "items", _zero_priced(tuple(self.items)))
        if not self.from_warehouse_id or not self.to_warehouse_id:
            raise ValueError("source and destination warehouses are required.")
        if self.from_warehouse_id == self.to_warehouse_id:
            raise ValueError("Cannot transfer stock to the same warehouse.")
        object.__setattr__(self, "date", normalize_date(self.date))
        _validate_items(self.items)

    def to_transaction(self, transaction_id: str) -> Transaction:
        return Transaction(
            transaction_id=transaction_id,
            date=self.date,
            transaction_type=TransactionType.TRANSFER,
            items=self.items,
            total_amount=ZERO,
            entity_name=TRANSFER_LABEL,
            from_warehouse_id=self.from_warehouse_id,
            to_warehouse_id=self.to_warehouse_id,
            branch_id=self.branch_id,
        )
