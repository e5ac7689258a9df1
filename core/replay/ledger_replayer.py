"""
Manara Replay Engine - Ledger Replayer
========================================
Rebuilds stock quantities and safe balances from the Transaction
Log and checks them against the live ledger.

Replay doctrine:
- READ the log only; never append, never modify
- Start from an empty registry and replay the registry journal
  alongside the log, each add or removal at its own log position
- Apply in append order through the same stock/cash rules as live
- Derived state must match exactly; any difference is reported

Every transaction is therefore resolved against the registry as it
stood when it was appended, not as it stands now.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from core.commands.notices import LedgerNotice
from core.ledger.store import LedgerStore, apply_registry_change
from core.primitives.ledger import Transaction
from core.registry import EntityKind, EntityRegistry, RegistryChange
from core.replay.errors import ReplayMismatchError
from engines.cash.services import CashLedger
from engines.inventory.services import StockLedger

logger = logging.getLogger("manara.replay")


# ══════════════════════════════════════════════════════════════
# REPLAY RESULT
# ══════════════════════════════════════════════════════════════

@dataclass
class ReplayResult:
    """Structured result of a replay operation."""

    transactions_replayed: int = 0
    stock: Dict[Tuple[str, str], int] = field(default_factory=dict)
    balances: Dict[str, Decimal] = field(default_factory=dict)
    notices: List[LedgerNotice] = field(default_factory=list)
    mismatches: List[dict] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.mismatches


# ══════════════════════════════════════════════════════════════
# REPLAY
# ══════════════════════════════════════════════════════════════

def replay_log(
    journal: Iterable[RegistryChange],
    transactions: Iterable[Transaction],
) -> ReplayResult:
    """Fold the registry journal and the log into fresh ledgers."""
    registry = EntityRegistry()
    stock = StockLedger()
    cash = CashLedger()
    changes = sorted(journal, key=lambda change: change.sequence)
    applied = 0

    def catch_up(position: int) -> None:
        nonlocal applied
        while applied < len(changes) and changes[applied].position <= position:
            apply_registry_change(changes[applied], registry, stock, cash)
            applied += 1

    result = ReplayResult()
    for position, transaction in enumerate(transactions):
        catch_up(position)
        stock_plan = stock.apply(transaction, registry)
        cash_plan = cash.apply(transaction, registry)
        result.notices.extend(stock_plan.notices + cash_plan.notices)
        result.transactions_replayed += 1
    catch_up(result.transactions_replayed)

    result.stock = stock.snapshot()
    result.balances = cash.snapshot()
    return result


def diff_state(
    expected_stock: Dict[Tuple[str, str], int],
    actual_stock: Dict[Tuple[str, str], int],
    expected_balances: Dict[str, Decimal],
    actual_balances: Dict[str, Decimal],
) -> List[dict]:
    """Differences between two derived states. Absent rows count as zero."""
    mismatches = []
    for key in sorted(set(expected_stock) | set(actual_stock)):
        expected = expected_stock.get(key, 0)
        actual = actual_stock.get(key, 0)
        if expected != actual:
            mismatches.append({
                "kind": "stock",
                "product_id": key[0],
                "warehouse_id": key[1],
                "expected": expected,
                "actual": actual,
            })
    for safe_id in sorted(set(expected_balances) | set(actual_balances)):
        expected = expected_balances.get(safe_id, Decimal(0))
        actual = actual_balances.get(safe_id, Decimal(0))
        if expected != actual:
            mismatches.append({
                "kind": "balance",
                "safe_id": safe_id,
                "expected": str(expected),
                "actual": str(actual),
            })
    return mismatches


def verify_replay(store: LedgerStore, strict: bool = False) -> ReplayResult:
    """
    Replay the store's journal and log from scratch and compare with
    its live stock and balances. In strict mode a difference raises
    ReplayMismatchError.
    """
    logger.info("Replay verification started")
    result = replay_log(store.registry_journal(), store.transactions())
    result.mismatches = diff_state(
        result.stock,
        store.stock_levels(),
        result.balances,
        store.safe_balances(),
    )

    if result.mismatches:
        logger.warning(
            f"Replay verification found {len(result.mismatches)} mismatch(es) "
            f"over {result.transactions_replayed} transactions"
        )
        if strict:
            raise ReplayMismatchError(result.mismatches)
    else:
        logger.info(
            f"Replay verification complete: "
            f"{result.transactions_replayed} transactions, state matches"
        )
    return result


def persisted_state_mismatches(store: LedgerStore, data: dict) -> List[dict]:
    """Compare persisted current stocks/balances with a rebuilt store."""
    persisted_stock = {}
    for record in data.get(EntityKind.PRODUCT.value, []):
        for row in record.get("stocks") or []:
            persisted_stock[(record["id"], row["warehouseId"])] = int(row["quantity"])
    persisted_balances = {
        record["id"]: Decimal(str(record["balance"]))
        for record in data.get(EntityKind.SAFE.value, [])
        if record.get("balance") is not None
    }
    return diff_state(
        store.stock_levels(),
        persisted_stock,
        store.safe_balances(),
        persisted_balances,
    )
