"""
Manara Inventory Engine - Stock Ledger
========================================
Per-product, per-warehouse quantity on hand.

Applying a transaction is split in two:
    plan(transaction, registry)  -> StockPlan (pure, nothing mutated)
    commit(plan)                 -> quantities updated
so the LedgerStore can commit stock, cash and the log append
together once every plan is ready.

Rules:
- salary and accounting transactions have no stock effect
- purchase adds at warehouse_id
- sale and loss remove quantity + loss_quantity at warehouse_id
- transfer removes at from_warehouse_id and adds at to_warehouse_id
- a decrement never drives a quantity below zero
- unknown products and warehouses are skipped with a notice
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from core.commands.notices import LedgerNotice
from core.primitives.inventory import StockMovement
from core.primitives.item import Product
from core.primitives.ledger import Transaction, TransactionType
from core.registry import EntityRegistry
from engines.inventory.policies import (
    insufficient_stock_policy,
    unknown_product_policy,
    unknown_warehouse_policy,
)

logger = logging.getLogger("manara.inventory")

StockKey = Tuple[str, str]


@dataclass(frozen=True)
class StockPlan:
    transaction_id: str
    movements: Tuple[StockMovement, ...] = ()
    notices: Tuple[LedgerNotice, ...] = ()


# ══════════════════════════════════════════════════════════════
# STOCK LEDGER
# ══════════════════════════════════════════════════════════════

class StockLedger:
    """
    In-memory store of current quantities.

    Mutated only through seed/commit (and the drop_* housekeeping
    calls the store makes when a product or warehouse is removed).
    """

    def __init__(self):
        self._stock: Dict[StockKey, int] = {}

    # ── Initial state ─────────────────────────────────────────

    def seed(self, product: Product) -> None:
        for warehouse_id, quantity in product.opening_stocks.items():
            self._stock[(product.product_id, warehouse_id)] = quantity

    def drop_product(self, product_id: str) -> None:
        for key in [k for k in self._stock if k[0] == product_id]:
            del self._stock[key]

    def drop_warehouse(self, warehouse_id: str) -> None:
        for key in [k for k in self._stock if k[1] == warehouse_id]:
            del self._stock[key]

    # ── Planning ──────────────────────────────────────────────

    def plan(self, transaction: Transaction, registry: EntityRegistry) -> StockPlan:
        if not transaction.is_inventory_move:
            return StockPlan(transaction_id=transaction.transaction_id)

        working: Dict[StockKey, int] = {}
        movements: List[StockMovement] = []
        notices: List[LedgerNotice] = []

        def current(key: StockKey) -> int:
            if key in working:
                return working[key]
            return self._stock.get(key, 0)

        def move(product_id: str, warehouse_id: str, requested: int) -> None:
            key = (product_id, warehouse_id)
            before = current(key)
            after = max(before + requested, 0)
            movement = StockMovement(
                product_id=product_id,
                warehouse_id=warehouse_id,
                before=before,
                after=after,
                requested=requested,
            )
            working[key] = after
            movements.append(movement)
            notice = insufficient_stock_policy(movement)
            if notice is not None:
                notices.append(notice)

        def warehouse_ok(warehouse_id: Optional[str]) -> bool:
            notice = unknown_warehouse_policy(warehouse_id, registry)
            if notice is not None:
                notices.append(notice)
                return False
            return True

        kind = transaction.transaction_type
        if kind == TransactionType.TRANSFER:
            targets_ok = all([
                warehouse_ok(transaction.from_warehouse_id),
                warehouse_ok(transaction.to_warehouse_id),
            ])
        else:
            targets_ok = warehouse_ok(transaction.warehouse_id)

        if targets_ok:
            for item in transaction.items:
                notice = unknown_product_policy(item.product_id, registry)
                if notice is not None:
                    notices.append(notice)
                    continue

                if kind == TransactionType.PURCHASE:
                    move(item.product_id, transaction.warehouse_id, item.quantity)
                elif kind in (TransactionType.SALE, TransactionType.LOSS):
                    move(
                        item.product_id,
                        transaction.warehouse_id,
                        -item.outgoing_quantity,
                    )
                elif kind == TransactionType.TRANSFER:
                    move(item.product_id, transaction.from_warehouse_id, -item.quantity)
                    move(item.product_id, transaction.to_warehouse_id, item.quantity)

        return StockPlan(
            transaction_id=transaction.transaction_id,
            movements=tuple(movements),
            notices=tuple(notices),
        )

    # ── Commit ────────────────────────────────────────────────

    def commit(self, plan: StockPlan) -> None:
        for movement in plan.movements:
            key = (movement.product_id, movement.warehouse_id)
            if movement.delta == 0 and key not in self._stock:
                continue
            self._stock[key] = movement.after
        for notice in plan.notices:
            logger.warning(
                f"[{plan.transaction_id}] {notice.code}: {notice.message}"
            )

    def apply(self, transaction: Transaction, registry: EntityRegistry) -> StockPlan:
        plan = self.plan(transaction, registry)
        self.commit(plan)
        return plan

    # ── Queries ───────────────────────────────────────────────

    def get_stock(self, product_id: str, warehouse_id: str) -> int:
        return self._stock.get((product_id, warehouse_id), 0)

    def stocks_for(self, product_id: str) -> Dict[str, int]:
        return {
            warehouse_id: quantity
            for (pid, warehouse_id), quantity in self._stock.items()
            if pid == product_id
        }

    def total_stock(self, product_id: str) -> int:
        return sum(self.stocks_for(product_id).values())

    def snapshot(self) -> Dict[StockKey, int]:
        return dict(self._stock)
