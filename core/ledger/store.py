"""
Manara Ledger - Ledger Store
==============================
The explicit store owning the Entity Registry, the Stock Ledger,
the Cash Ledger and the Transaction Log.

Its methods are the only mutation surface:
    add_entity / update_entity / remove_entity
    append / append_accounting_entry / pay_salary
Everything else reads.

Atomicity:
    Every mutator runs under one re-entrant lock. An append first
    plans the stock and cash effects (nothing mutated), then commits
    both together with the log append. A reader holding the lock
    never observes stock updated while cash or the log is not.

Registry adds and removals are journaled with the log position at
which they happened, so a rebuild resolves every transaction against
the registry as it stood when the transaction was appended.

Business edge cases (unknown references, oversell) never raise;
they come back as notices on the LedgerOutcome.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from core.commands.notices import LedgerNotice, NoticeCode
from core.commands.outcomes import LedgerOutcome
from core.ledger.errors import (
    DuplicateSkuError,
    DuplicateTransactionError,
    ImmutableFieldError,
)
from core.ledger.ids import TransactionIdGenerator
from core.ledger.log import TransactionLog
from core.primitives.item import Product
from core.primitives.ledger import (
    AccountingEntry,
    SalaryPayment,
    Safe,
    Transaction,
)
from core.registry import (
    ENTITY_CLASSES,
    EntityKind,
    EntityRegistry,
    RegistryAction,
    RegistryChange,
    kind_of,
)
from core.time.clock import Clock, get_default_clock
from engines.accounting.services import mirror_accounting_entry
from engines.cash.services import CashLedger
from engines.hr.services import salary_transaction
from engines.inventory.services import StockLedger

logger = logging.getLogger("manara.ledger")


def apply_registry_change(
    change: RegistryChange,
    registry: EntityRegistry,
    stock: StockLedger,
    cash: CashLedger,
) -> Optional[object]:
    """
    Apply one add or removal to a registry and the ledgers seeded
    from it. Returns the added or removed entity, None when a
    removal finds nothing.
    """
    if change.action == RegistryAction.ADD:
        registry.add(change.entity)
        if isinstance(change.entity, Product):
            stock.seed(change.entity)
        elif isinstance(change.entity, Safe):
            cash.seed(change.entity)
        return change.entity

    removed = registry.remove(change.kind, change.entity_id)
    if removed is None:
        return None
    if change.kind == EntityKind.PRODUCT:
        stock.drop_product(change.entity_id)
    elif change.kind == EntityKind.WAREHOUSE:
        stock.drop_warehouse(change.entity_id)
    elif change.kind == EntityKind.SAFE:
        cash.drop_safe(change.entity_id)
    return removed


class LedgerStore:

    def __init__(self, clock: Optional[Clock] = None):
        self._lock = threading.RLock()
        self._clock = clock or get_default_clock()
        self._ids = TransactionIdGenerator(self._clock)
        self._registry = EntityRegistry()
        self._stock = StockLedger()
        self._cash = CashLedger()
        self._log = TransactionLog()
        self._accounting_entries: Dict[str, AccountingEntry] = {}
        self._salary_payments: List[SalaryPayment] = []
        self._journal: List[RegistryChange] = []

    @property
    def clock(self) -> Clock:
        return self._clock

    # ══════════════════════════════════════════════════════════
    # ENTITY REGISTRY
    # ══════════════════════════════════════════════════════════

    def add_entity(self, entity) -> LedgerOutcome:
        """Register a new entity. Product SKUs, when set, are unique."""
        with self._lock:
            kind = kind_of(entity)
            if isinstance(entity, Product):
                self._check_sku(entity)
            self._change(RegistryAction.ADD, kind, entity.identity, entity)
            logger.info(f"Registered {kind.value} '{entity.identity}'")
            return LedgerOutcome()

    def update_entity(self, entity) -> LedgerOutcome:
        """Replace by identity. Opening stocks and balances are fixed."""
        with self._lock:
            kind = kind_of(entity)
            previous = self._registry.get(kind, entity.identity)
            if previous is None:
                return self._absorbed(LedgerNotice(
                    code=NoticeCode.REFERENCE_NOT_FOUND,
                    message=f"{kind.value} '{entity.identity}' is not registered; nothing updated.",
                    reference=entity.identity,
                    policy_name="registry_update",
                ))

            if isinstance(entity, Product) and previous.opening_stocks != entity.opening_stocks:
                raise ImmutableFieldError(entity.identity, "opening_stocks")
            if isinstance(entity, Safe) and previous.opening_balance != entity.opening_balance:
                raise ImmutableFieldError(entity.identity, "opening_balance")
            if isinstance(entity, Product):
                self._check_sku(entity)

            self._registry.update(entity)
            logger.info(f"Updated {kind.value} '{entity.identity}'")
            return LedgerOutcome()

    def remove_entity(self, kind: EntityKind, entity_id: str) -> LedgerOutcome:
        """
        Delete by identity. Historical transactions keep their ids;
        every transaction still pointing at the entity is reported.
        """
        with self._lock:
            removed = self._change(RegistryAction.REMOVE, kind, entity_id)
            if removed is None:
                return self._absorbed(LedgerNotice(
                    code=NoticeCode.REFERENCE_NOT_FOUND,
                    message=f"{kind.value} '{entity_id}' is not registered; nothing removed.",
                    reference=entity_id,
                    policy_name="registry_remove",
                ))

            logger.info(f"Removed {kind.value} '{entity_id}'")

            referencing = self._log.referencing(entity_id)
            if not referencing:
                return LedgerOutcome()
            return self._absorbed(LedgerNotice(
                code=NoticeCode.DANGLING_REFERENCE,
                message=(
                    f"{kind.value} '{entity_id}' is still referenced by "
                    f"{len(referencing)} transaction(s)."
                ),
                reference=entity_id,
                policy_name="registry_remove",
            ))

    def get_entity(self, kind: EntityKind, entity_id: Optional[str]):
        with self._lock:
            return self._registry.get(kind, entity_id)

    def list_entities(self, kind: EntityKind) -> tuple:
        with self._lock:
            return self._registry.list(kind)

    # ══════════════════════════════════════════════════════════
    # LEDGER MUTATORS
    # ══════════════════════════════════════════════════════════

    def append(self, transaction: Transaction) -> LedgerOutcome:
        with self._lock:
            return self._append(transaction)

    def append_accounting_entry(self, entry: AccountingEntry) -> LedgerOutcome:
        """Cash effect plus exactly one `accounting` mirror in the log."""
        with self._lock:
            if entry.entry_id in self._accounting_entries:
                raise DuplicateTransactionError(entry.entry_id)

            def record() -> None:
                self._accounting_entries[entry.entry_id] = entry

            return self._append(mirror_accounting_entry(entry), on_commit=record)

    def pay_salary(self, payment: SalaryPayment) -> LedgerOutcome:
        with self._lock:
            return self._append(
                salary_transaction(payment),
                on_commit=lambda: self._salary_payments.append(payment),
            )

    def next_transaction_id(self, prefix: str = "") -> str:
        with self._lock:
            return self._ids.next(prefix=prefix, is_taken=self._is_taken)

    # ── Request helpers ───────────────────────────────────────

    def record(self, request) -> LedgerOutcome:
        """Append a Sale/Purchase/Loss/Transfer request under a fresh id."""
        with self._lock:
            return self._append(request.to_transaction(self.next_transaction_id()))

    def record_accounting(self, request, prefix: str = "") -> LedgerOutcome:
        """Append an AccountingEntryRequest or SettlementRequest."""
        with self._lock:
            entry = request.to_entry(self.next_transaction_id(prefix=prefix))
            return self.append_accounting_entry(entry)

    def settle(self, request) -> LedgerOutcome:
        return self.record_accounting(request, prefix="PAY-")

    def record_salary(self, request) -> LedgerOutcome:
        with self._lock:
            return self.pay_salary(request.to_payment(self.next_transaction_id()))

    # ── Internal ──────────────────────────────────────────────

    def _change(
        self,
        action: RegistryAction,
        kind: EntityKind,
        entity_id: str,
        entity=None,
    ) -> Optional[object]:
        change = RegistryChange(
            sequence=len(self._journal),
            position=len(self._log),
            action=action,
            kind=kind,
            entity_id=entity_id,
            entity=entity,
        )
        affected = apply_registry_change(change, self._registry, self._stock, self._cash)
        if affected is not None:
            self._journal.append(change)
        return affected

    def _check_sku(self, product: Product) -> None:
        if not product.sku:
            return
        for other in self._registry.list(EntityKind.PRODUCT):
            if other.sku == product.sku and other.identity != product.identity:
                raise DuplicateSkuError(product.sku, product.identity, other.identity)

    def _is_taken(self, transaction_id: str) -> bool:
        return (
            transaction_id in self._log
            or transaction_id in self._accounting_entries
        )

    def _append(
        self,
        transaction: Transaction,
        on_commit: Optional[Callable[[], None]] = None,
    ) -> LedgerOutcome:
        self._log.check_appendable(transaction)

        stock_plan = self._stock.plan(transaction, self._registry)
        cash_plan = self._cash.plan(transaction, self._registry)

        self._stock.commit(stock_plan)
        self._cash.commit(cash_plan)
        self._log.append(transaction)
        if on_commit is not None:
            on_commit()

        logger.info(
            f"Appended {transaction.transaction_type.value} "
            f"'{transaction.transaction_id}' amount={transaction.total_amount}"
        )
        return LedgerOutcome(
            transaction_id=transaction.transaction_id,
            notices=stock_plan.notices + cash_plan.notices,
        )

    @staticmethod
    def _absorbed(notice: LedgerNotice) -> LedgerOutcome:
        logger.warning(f"{notice.code}: {notice.message}")
        return LedgerOutcome(notices=(notice,))

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def transactions(self) -> Tuple[Transaction, ...]:
        """Chronological (append) order."""
        with self._lock:
            return self._log.in_append_order()

    def transactions_newest_first(self) -> Tuple[Transaction, ...]:
        with self._lock:
            return self._log.newest_first()

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        with self._lock:
            return self._log.get(transaction_id)

    def accounting_entries(self) -> Tuple[AccountingEntry, ...]:
        with self._lock:
            return tuple(self._accounting_entries.values())

    def salary_payments(self) -> Tuple[SalaryPayment, ...]:
        with self._lock:
            return tuple(self._salary_payments)

    def registry_journal(self) -> Tuple[RegistryChange, ...]:
        """Every add and removal, in the order they happened."""
        with self._lock:
            return tuple(self._journal)

    def stock_of(self, product_id: str, warehouse_id: str) -> int:
        with self._lock:
            return self._stock.get_stock(product_id, warehouse_id)

    def stocks_for(self, product_id: str) -> Dict[str, int]:
        with self._lock:
            return self._stock.stocks_for(product_id)

    def total_stock(self, product_id: str) -> int:
        with self._lock:
            return self._stock.total_stock(product_id)

    def stock_levels(self) -> Dict[Tuple[str, str], int]:
        with self._lock:
            return self._stock.snapshot()

    def safe_balance(self, safe_id: str) -> Decimal:
        with self._lock:
            return self._cash.balance_of(safe_id)

    def safe_balances(self) -> Dict[str, Decimal]:
        with self._lock:
            return self._cash.snapshot()

    # ══════════════════════════════════════════════════════════
    # PERSISTED SHAPE
    # ══════════════════════════════════════════════════════════

    def snapshot(self) -> dict:
        """JSON-compatible state, keyed by collection."""
        with self._lock:
            data = {}
            for kind in EntityKind:
                records = []
                for entity in self._registry.list(kind):
                    if kind == EntityKind.PRODUCT:
                        records.append(entity.to_record(
                            stocks=self._stock.stocks_for(entity.identity)
                        ))
                    elif kind == EntityKind.SAFE:
                        records.append(entity.to_record(
                            balance=self._cash.balance_of(entity.identity)
                        ))
                    else:
                        records.append(entity.to_record())
                data[kind.value] = records
            data["transactions"] = [t.to_record() for t in self._log]
            data["accountingEntries"] = [
                e.to_record() for e in self._accounting_entries.values()
            ]
            data["salaryPayments"] = [p.to_record() for p in self._salary_payments]
            data["registryJournal"] = [c.to_record() for c in self._journal]
            return data

    @classmethod
    def from_snapshot(cls, data: dict, clock: Optional[Clock] = None) -> LedgerStore:
        """
        Rebuild a store by replaying the persisted log through the
        normal append path, with each registry add and removal placed
        back at the log position where it happened. Current entity
        records are applied last, so later renames survive.

        A snapshot without a registry journal registers its current
        entities before the first transaction. Persisted current
        stocks/balances are ignored here.
        """
        store = cls(clock=clock)
        current = [
            ENTITY_CLASSES[kind].from_record(record)
            for kind in EntityKind
            for record in data.get(kind.value, [])
        ]
        changes = [
            RegistryChange.from_record(record)
            for record in data.get("registryJournal") or []
        ]
        if not changes:
            changes = [
                RegistryChange(
                    sequence=sequence,
                    position=0,
                    action=RegistryAction.ADD,
                    kind=kind_of(entity),
                    entity_id=entity.identity,
                    entity=entity,
                )
                for sequence, entity in enumerate(current)
            ]
        pending = deque(sorted(changes, key=lambda change: change.sequence))

        entries = {
            record["id"]: AccountingEntry.from_record(record)
            for record in data.get("accountingEntries", [])
        }
        payments = {
            p.transaction_id or p.payment_id: p
            for p in (
                SalaryPayment.from_record(record)
                for record in data.get("salaryPayments", [])
            )
        }

        def keep_entry(entry: AccountingEntry) -> Callable[[], None]:
            def record() -> None:
                store._accounting_entries[entry.entry_id] = entry
            return record

        def keep_payment(payment: SalaryPayment) -> Callable[[], None]:
            return lambda: store._salary_payments.append(payment)

        def catch_up(position: int) -> None:
            while pending and pending[0].position <= position:
                change = pending.popleft()
                store._change(change.action, change.kind, change.entity_id, change.entity)

        with store._lock:
            for position, record in enumerate(data.get("transactions", [])):
                catch_up(position)
                transaction = Transaction.from_record(record)
                entry = entries.get(transaction.transaction_id)
                payment = payments.get(transaction.transaction_id)
                if entry is not None:
                    store._append(transaction, on_commit=keep_entry(entry))
                elif payment is not None:
                    store._append(transaction, on_commit=keep_payment(payment))
                else:
                    store._append(transaction)
            catch_up(len(store._log))
            for entity in current:
                store._registry.update(entity)

        logger.info(
            f"Rebuilt ledger: {len(store._log)} transactions, "
            f"{len(store._accounting_entries)} accounting entries"
        )
        return store

    @classmethod
    def from_entities(cls, entities: Iterable, clock: Optional[Clock] = None) -> LedgerStore:
        store = cls(clock=clock)
        for entity in entities:
            store.add_entity(entity)
        return store
