"""
Manara Cash Engine - Cash Ledger
==================================
Per-safe running balance.

Delta rules (applied only when safe_id is set):
    sale                  + total_amount
    purchase              - total_amount
    salary                - total_amount (net salary)
    accounting, revenue   + total_amount
    accounting, expense   - total_amount
    loss, transfer        no effect

Balances are exact Decimals and may go negative (overdraft).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple

from core.commands.notices import LedgerNotice
from core.primitives.ledger import (
    ZERO,
    Safe,
    SafeMovement,
    Transaction,
    TransactionType,
)
from core.registry import EntityRegistry
from engines.cash.policies import unknown_safe_policy

logger = logging.getLogger("manara.cash")


def cash_delta(transaction: Transaction) -> Decimal:
    """Signed effect of a transaction on its safe."""
    kind = transaction.transaction_type
    amount = transaction.total_amount
    if kind == TransactionType.SALE:
        return amount
    if kind in (TransactionType.PURCHASE, TransactionType.SALARY):
        return -amount
    if kind == TransactionType.ACCOUNTING:
        return amount if transaction.is_revenue else -amount
    return ZERO


@dataclass(frozen=True)
class CashPlan:
    transaction_id: str
    movement: Optional[SafeMovement] = None
    notices: Tuple[LedgerNotice, ...] = ()


# ══════════════════════════════════════════════════════════════
# CASH LEDGER
# ══════════════════════════════════════════════════════════════

class CashLedger:

    def __init__(self):
        self._balances: Dict[str, Decimal] = {}

    def seed(self, safe: Safe) -> None:
        self._balances[safe.safe_id] = safe.opening_balance

    def drop_safe(self, safe_id: str) -> None:
        self._balances.pop(safe_id, None)

    def plan(self, transaction: Transaction, registry: EntityRegistry) -> CashPlan:
        safe_id = transaction.safe_id
        delta = cash_delta(transaction)
        if safe_id is None or delta == ZERO:
            return CashPlan(transaction_id=transaction.transaction_id)

        notice = unknown_safe_policy(safe_id, registry)
        if notice is not None:
            return CashPlan(
                transaction_id=transaction.transaction_id,
                notices=(notice,),
            )

        before = self.balance_of(safe_id)
        return CashPlan(
            transaction_id=transaction.transaction_id,
            movement=SafeMovement(safe_id=safe_id, before=before, after=before + delta),
        )

    def commit(self, plan: CashPlan) -> None:
        if plan.movement is not None:
            self._balances[plan.movement.safe_id] = plan.movement.after
        for notice in plan.notices:
            logger.warning(
                f"[{plan.transaction_id}] {notice.code}: {notice.message}"
            )

    def apply(self, transaction: Transaction, registry: EntityRegistry) -> CashPlan:
        plan = self.plan(transaction, registry)
        self.commit(plan)
        return plan

    def balance_of(self, safe_id: str) -> Decimal:
        return self._balances.get(safe_id, ZERO)

    def snapshot(self) -> Dict[str, Decimal]:
        return dict(self._balances)
