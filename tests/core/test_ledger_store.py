"""
Manara Ledger Store - Test Suite
==================================
Tests for: entity lifecycle, append atomicity, stock and cash
effects, absorbed notices, accounting mirrors, payroll, and the
snapshot rebuild path.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest


def _clock():
    from core.time.clock import FixedClock
    return FixedClock(datetime(2025, 1, 1, tzinfo=timezone.utc))


def _store(stock=0, balance=0, cost=5):
    from core.ledger.store import LedgerStore
    from core.primitives.inventory import Warehouse
    from core.primitives.item import Product
    from core.primitives.ledger import Safe
    from core.primitives.party import Customer, Employee, Supplier

    opening = {"W1": stock} if stock else {}
    return LedgerStore.from_entities([
        Warehouse(warehouse_id="W1", name="Main"),
        Warehouse(warehouse_id="W2", name="Annex"),
        Product(product_id="P1", name="Rice", price=10, cost=cost, opening_stocks=opening),
        Safe(safe_id="S1", name="Till", opening_balance=balance),
        Customer(customer_id="C1", name="Client"),
        Supplier(supplier_id="V1", name="Vendor"),
        Employee(employee_id="E1", name="Sara", base_salary=3000),
    ], clock=_clock())


def _item(quantity, price=10, cost=5, product_id="P1", loss=0):
    from core.primitives.ledger import TransactionItem
    return TransactionItem(
        product_id=product_id, quantity=quantity, price=price, cost=cost,
        loss_quantity=loss,
    )


def _purchase(store, quantity, cost=5, safe_id="S1"):
    from engines.inventory.commands import PurchaseRequest
    return store.record(PurchaseRequest(
        supplier_id="V1", supplier_name="Vendor", warehouse_id="W1",
        items=[_item(quantity, price=cost, cost=cost)],
        date="2025-01-01", safe_id=safe_id,
    ))


def _sale(store, quantity, price=10, warehouse_id="W1", product_id="P1", loss=0):
    from engines.inventory.commands import SaleRequest
    return store.record(SaleRequest(
        customer_id="C1", customer_name="Client", warehouse_id=warehouse_id,
        items=[_item(quantity, price=price, product_id=product_id, loss=loss)],
        date="2025-01-02", safe_id="S1",
    ))


# ══════════════════════════════════════════════════════════════
# ENTITY LIFECYCLE
# ══════════════════════════════════════════════════════════════

class TestEntityLifecycle:
    def test_product_seeds_opening_stock(self):
        store = _store(stock=7)
        assert store.stock_of("P1", "W1") == 7
        assert store.total_stock("P1") == 7

    def test_safe_seeds_opening_balance(self):
        store = _store(balance=100)
        assert store.safe_balance("S1") == Decimal(100)

    def test_duplicate_entity_raises(self):
        from core.ledger.errors import DuplicateEntityError
        from core.primitives.party import Customer
        store = _store()
        with pytest.raises(DuplicateEntityError):
            store.add_entity(Customer(customer_id="C1", name="Again"))

    def test_update_replaces_by_identity(self):
        from core.primitives.party import Customer
        from core.registry import EntityKind
        store = _store()
        outcome = store.update_entity(Customer(customer_id="C1", name="Renamed"))
        assert outcome.is_clean
        assert store.get_entity(EntityKind.CUSTOMER, "C1").name == "Renamed"

    def test_update_unknown_is_a_notice(self):
        from core.commands.notices import NoticeCode
        from core.primitives.party import Customer
        store = _store()
        outcome = store.update_entity(Customer(customer_id="NOPE", name="X"))
        assert outcome.codes == (NoticeCode.REFERENCE_NOT_FOUND,)

    def test_update_cannot_rewrite_opening_stock(self):
        from core.ledger.errors import ImmutableFieldError
        from core.primitives.item import Product
        store = _store(stock=3)
        with pytest.raises(ImmutableFieldError):
            store.update_entity(Product(
                product_id="P1", name="Rice", opening_stocks={"W1": 99},
            ))

    def test_update_cannot_rewrite_opening_balance(self):
        from core.ledger.errors import ImmutableFieldError
        from core.primitives.ledger import Safe
        store = _store(balance=10)
        with pytest.raises(ImmutableFieldError):
            store.update_entity(Safe(safe_id="S1", name="Till", opening_balance=500))

    def test_price_update_keeps_stock(self):
        from core.primitives.item import Product
        store = _store(stock=3)
        store.update_entity(Product(
            product_id="P1", name="Rice", price=12, cost=5, opening_stocks={"W1": 3},
        ))
        assert store.stock_of("P1", "W1") == 3

    def test_remove_unreferenced_is_clean(self):
        from core.registry import EntityKind
        store = _store()
        outcome = store.remove_entity(EntityKind.SUPPLIER, "V1")
        assert outcome.is_clean
        assert store.get_entity(EntityKind.SUPPLIER, "V1") is None

    def test_remove_referenced_reports_dangling(self):
        from core.commands.notices import NoticeCode
        from core.registry import EntityKind
        store = _store(stock=5)
        _sale(store, 1)
        outcome = store.remove_entity(EntityKind.CUSTOMER, "C1")
        assert outcome.codes == (NoticeCode.DANGLING_REFERENCE,)
        assert len(store.transactions()) == 1

    def test_remove_product_drops_stock_rows(self):
        from core.registry import EntityKind
        store = _store(stock=5)
        store.remove_entity(EntityKind.PRODUCT, "P1")
        assert store.stocks_for("P1") == {}

    def test_remove_unknown_is_a_notice(self):
        from core.commands.notices import NoticeCode
        from core.registry import EntityKind
        store = _store()
        outcome = store.remove_entity(EntityKind.SAFE, "NOPE")
        assert outcome.codes == (NoticeCode.REFERENCE_NOT_FOUND,)


# ══════════════════════════════════════════════════════════════
# INVENTORY AND CASH EFFECTS
# ══════════════════════════════════════════════════════════════

class TestPurchaseThenSale:
    def test_stock_and_cash(self):
        store = _store(balance=1000)
        assert _purchase(store, 10).is_clean
        assert store.stock_of("P1", "W1") == 10
        assert store.safe_balance("S1") == Decimal(950)

        assert _sale(store, 4).is_clean
        assert store.stock_of("P1", "W1") == 6
        assert store.safe_balance("S1") == Decimal(990)

    def test_sale_snapshots_cost(self):
        store = _store()
        _purchase(store, 10)
        outcome = _sale(store, 4)
        sale = store.get_transaction(outcome.transaction_id)
        assert sale.total_amount == Decimal(40)
        assert sale.total_cost == Decimal(20)

    def test_loss_quantity_leaves_with_the_sale(self):
        store = _store(stock=10)
        _sale(store, 4, loss=1)
        assert store.stock_of("P1", "W1") == 5


class TestTransfer:
    def test_moves_between_warehouses(self):
        from engines.inventory.commands import TransferRequest
        store = _store(stock=10)
        outcome = store.record(TransferRequest(
            from_warehouse_id="W1", to_warehouse_id="W2",
            items=[_item(3)], date="2025-01-03",
        ))
        assert outcome.is_clean
        assert store.stock_of("P1", "W1") == 7
        assert store.stock_of("P1", "W2") == 3

    def test_moves_no_cash(self):
        from engines.inventory.commands import TransferRequest
        store = _store(stock=10, balance=50)
        store.record(TransferRequest(
            from_warehouse_id="W1", to_warehouse_id="W2",
            items=[_item(3)], date="2025-01-03",
        ))
        assert store.safe_balance("S1") == Decimal(50)


class TestOversell:
    def test_clamps_at_zero_with_notice(self):
        from core.commands.notices import NoticeCode
        store = _store(stock=2)
        outcome = _sale(store, 5)
        assert store.stock_of("P1", "W1") == 0
        assert outcome.codes == (NoticeCode.INSUFFICIENT_STOCK,)
        assert outcome.transaction_id is not None

    def test_sale_still_records_full_amount(self):
        store = _store(stock=2, balance=0)
        outcome = _sale(store, 5)
        assert store.get_transaction(outcome.transaction_id).total_amount == Decimal(50)
        assert store.safe_balance("S1") == Decimal(50)


class TestUnknownReferences:
    def test_unknown_product_is_skipped(self):
        from core.commands.notices import NoticeCode
        store = _store(stock=5)
        outcome = _sale(store, 1, product_id="GHOST")
        assert outcome.codes == (NoticeCode.REFERENCE_NOT_FOUND,)
        assert store.stock_of("P1", "W1") == 5
        assert len(store.transactions()) == 1

    def test_unknown_warehouse_is_skipped(self):
        from core.commands.notices import NoticeCode
        store = _store(stock=5)
        outcome = _sale(store, 1, warehouse_id="W9")
        assert NoticeCode.REFERENCE_NOT_FOUND in outcome.codes
        assert store.stock_levels() == {("P1", "W1"): 5}

    def test_unknown_safe_is_skipped(self):
        from core.commands.notices import NoticeCode
        store = _store(stock=5)
        outcome = _purchase(store, 1, safe_id="S9")
        assert outcome.codes == (NoticeCode.REFERENCE_NOT_FOUND,)
        assert store.stock_of("P1", "W1") == 6
        assert "S9" not in store.safe_balances()


class TestAppendOnly:
    def test_duplicate_id_raises_and_mutates_nothing(self):
        from core.ledger.errors import DuplicateTransactionError
        from core.primitives.ledger import Transaction
        store = _store(stock=5, balance=0)
        txn = Transaction(
            transaction_id="T1", date="2025-01-02", transaction_type="sale",
            total_amount=10, items=[_item(1)], warehouse_id="W1", safe_id="S1",
        )
        store.append(txn)
        with pytest.raises(DuplicateTransactionError):
            store.append(txn)
        assert store.stock_of("P1", "W1") == 4
        assert store.safe_balance("S1") == Decimal(10)
        assert len(store.transactions()) == 1

    def test_ids_are_unique_under_a_fixed_clock(self):
        store = _store(stock=10)
        ids = {_sale(store, 1).transaction_id for _ in range(3)}
        assert len(ids) == 3

    def test_newest_first(self):
        store = _store(stock=10)
        first = _sale(store, 1).transaction_id
        second = _sale(store, 1).transaction_id
        assert [t.transaction_id for t in store.transactions_newest_first()] == [second, first]


# ══════════════════════════════════════════════════════════════
# ACCOUNTING, SETTLEMENT, PAYROLL
# ══════════════════════════════════════════════════════════════

class TestAccountingMirror:
    def test_expense_leaves_the_safe_and_is_mirrored_once(self):
        from core.primitives.ledger import TransactionType
        from engines.accounting.commands import AccountingEntryRequest
        store = _store(balance=500)
        outcome = store.record_accounting(AccountingEntryRequest(
            entry_type="expense", category="Rent", amount=200,
            safe_id="S1", date="2025-01-05",
        ))
        assert store.safe_balance("S1") == Decimal(300)
        mirrors = [
            t for t in store.transactions()
            if t.transaction_type == TransactionType.ACCOUNTING
        ]
        assert len(mirrors) == 1
        assert mirrors[0].transaction_id == outcome.transaction_id
        assert mirrors[0].is_revenue is False
        assert mirrors[0].entity_name == "Expense: Rent"
        assert len(store.accounting_entries()) == 1

    def test_duplicate_entry_id_raises(self):
        from core.ledger.errors import DuplicateTransactionError
        from core.primitives.ledger import AccountingEntry
        store = _store()
        entry = AccountingEntry(
            entry_id="A1", date="2025-01-01", entry_type="revenue",
            category="Misc", amount=5, safe_id="S1",
        )
        store.append_accounting_entry(entry)
        with pytest.raises(DuplicateTransactionError):
            store.append_accounting_entry(entry)
        assert len(store.transactions()) == 1


class TestSettlement:
    def test_customer_settlement_closes_the_statement(self):
        from engines.accounting.commands import SettlementRequest
        from projections.statements import AccountKind, statement_for

        store = _store(stock=10, balance=0)
        _sale(store, 50)
        outcome = store.settle(SettlementRequest(
            account_type="customer", account_id="C1", amount=500,
            safe_id="S1", date="2025-01-10", account_name="Client",
        ))
        assert outcome.transaction_id.startswith("PAY-")
        assert store.safe_balance("S1") == Decimal(1000)

        statement = statement_for(store, AccountKind.CUSTOMER, "C1")
        assert statement.closing_balance == Decimal(0)


class TestPayroll:
    def test_salary_leaves_the_safe(self):
        from core.primitives.ledger import TransactionType
        from core.registry import EntityKind
        from engines.hr.commands import SalaryPaymentRequest

        store = _store(balance=5000)
        employee = store.get_entity(EntityKind.EMPLOYEE, "E1")
        outcome = store.record_salary(SalaryPaymentRequest(
            employee=employee, month=1, year=2025, safe_id="S1",
            date="2025-01-31", bonus=200, deduction=100,
        ))
        assert outcome.is_clean
        assert store.safe_balance("S1") == Decimal(1900)
        salary = store.get_transaction(outcome.transaction_id)
        assert salary.transaction_type == TransactionType.SALARY
        assert salary.total_amount == Decimal(3100)
        assert store.salary_payments()[0].transaction_id == outcome.transaction_id


# ══════════════════════════════════════════════════════════════
# SNAPSHOT
# ══════════════════════════════════════════════════════════════

class TestSnapshot:
    def test_snapshot_carries_current_state(self):
        store = _store(stock=10, balance=100)
        _sale(store, 4)
        data = store.snapshot()
        product = data["products"][0]
        assert product["stocks"] == [{"warehouseId": "W1", "quantity": 6}]
        assert product["openingStocks"] == [{"warehouseId": "W1", "quantity": 10}]
        assert data["safes"][0]["balance"] == "140"
        assert len(data["transactions"]) == 1

    def test_rebuild_reaches_the_same_state(self):
        from core.ledger.store import LedgerStore
        from engines.accounting.commands import AccountingEntryRequest
        from engines.inventory.commands import TransferRequest

        store = _store(stock=10, balance=100)
        _purchase(store, 5)
        _sale(store, 4)
        store.record(TransferRequest(
            from_warehouse_id="W1", to_warehouse_id="W2",
            items=[_item(2)], date="2025-01-03",
        ))
        store.record_accounting(AccountingEntryRequest(
            entry_type="revenue", category="Misc", amount=7,
            safe_id="S1", date="2025-01-04",
        ))

        rebuilt = LedgerStore.from_snapshot(store.snapshot(), clock=_clock())
        assert rebuilt.stock_levels() == store.stock_levels()
        assert rebuilt.safe_balances() == store.safe_balances()
        assert rebuilt.transactions() == store.transactions()
        assert rebuilt.accounting_entries() == store.accounting_entries()

    def test_snapshot_journals_registry_changes(self):
        from core.registry import EntityKind
        store = _store()
        _sale(store, 1)
        store.remove_entity(EntityKind.WAREHOUSE, "W2")
        journal = store.snapshot()["registryJournal"]
        assert len(journal) == 8
        assert journal[-1] == {
            "id": "7", "position": 1, "action": "remove",
            "kind": "warehouses", "entityId": "W2", "entity": None,
        }

    def test_snapshot_without_journal_registers_entities_first(self):
        from core.ledger.store import LedgerStore
        store = _store(stock=10, balance=100)
        _sale(store, 4)
        data = store.snapshot()
        del data["registryJournal"]

        rebuilt = LedgerStore.from_snapshot(data, clock=_clock())
        assert rebuilt.stock_of("P1", "W1") == 6
        assert rebuilt.safe_balance("S1") == Decimal(140)
        assert len(rebuilt.registry_journal()) == 7


# ══════════════════════════════════════════════════════════════
# REGISTRY HISTORY - rebuilds follow adds and removals in place
# ══════════════════════════════════════════════════════════════

class TestRegistryHistory:
    def test_removed_warehouse_stays_removed_after_rebuild(self):
        from core.ledger.store import LedgerStore
        from core.registry import EntityKind
        from engines.inventory.commands import TransferRequest

        store = _store(stock=10)
        store.record(TransferRequest(
            from_warehouse_id="W1", to_warehouse_id="W2",
            items=[_item(3)], date="2025-01-03",
        ))
        store.remove_entity(EntityKind.WAREHOUSE, "W2")
        assert store.stock_of("P1", "W1") == 7

        rebuilt = LedgerStore.from_snapshot(store.snapshot(), clock=_clock())
        assert rebuilt.stock_of("P1", "W1") == 7
        assert rebuilt.stock_levels() == store.stock_levels()
        assert rebuilt.get_entity(EntityKind.WAREHOUSE, "W2") is None

    def test_product_registered_later_keeps_skipped_purchase(self):
        from core.commands.notices import NoticeCode
        from core.ledger.store import LedgerStore
        from core.primitives.item import Product
        from engines.inventory.commands import PurchaseRequest

        store = _store()
        outcome = store.record(PurchaseRequest(
            supplier_id="V1", supplier_name="Vendor", warehouse_id="W1",
            items=[_item(5, product_id="P2")], date="2025-01-01", safe_id="S1",
        ))
        assert outcome.notices[0].code == NoticeCode.REFERENCE_NOT_FOUND
        store.add_entity(Product(product_id="P2", name="Sugar", price=8))
        assert store.stock_of("P2", "W1") == 0

        rebuilt = LedgerStore.from_snapshot(store.snapshot(), clock=_clock())
        assert rebuilt.stock_of("P2", "W1") == 0
        assert rebuilt.stock_levels() == store.stock_levels()

    def test_reregistered_product_starts_from_its_new_opening_stock(self):
        from core.ledger.store import LedgerStore
        from core.primitives.item import Product
        from core.registry import EntityKind

        store = _store(stock=10)
        _sale(store, 4)
        store.remove_entity(EntityKind.PRODUCT, "P1")
        store.add_entity(Product(
            product_id="P1", name="Rice", price=10, cost=5, opening_stocks={"W1": 3},
        ))
        _sale(store, 1)
        assert store.stock_of("P1", "W1") == 2

        rebuilt = LedgerStore.from_snapshot(store.snapshot(), clock=_clock())
        assert rebuilt.stock_of("P1", "W1") == 2

    def test_later_rename_survives_rebuild(self):
        from core.ledger.store import LedgerStore
        from core.primitives.inventory import Warehouse
        from core.registry import EntityKind

        store = _store(stock=10)
        _sale(store, 1)
        store.update_entity(Warehouse(warehouse_id="W1", name="Head office"))

        rebuilt = LedgerStore.from_snapshot(store.snapshot(), clock=_clock())
        assert rebuilt.get_entity(EntityKind.WAREHOUSE, "W1").name == "Head office"
        assert rebuilt.stock_of("P1", "W1") == 9


# ══════════════════════════════════════════════════════════════
# SKU UNIQUENESS
# ══════════════════════════════════════════════════════════════

class TestSkuUniqueness:
    def _with_sku(self):
        from core.primitives.item import Product
        store = _store()
        store.add_entity(Product(product_id="P2", name="Sugar", sku="SKU-1"))
        return store

    def test_add_with_taken_sku_raises(self):
        from core.ledger.errors import DuplicateSkuError
        from core.primitives.item import Product
        from core.registry import EntityKind

        store = self._with_sku()
        with pytest.raises(DuplicateSkuError) as exc:
            store.add_entity(Product(product_id="P3", name="Salt", sku="SKU-1"))
        assert exc.value.holder_id == "P2"
        assert store.get_entity(EntityKind.PRODUCT, "P3") is None
        assert len(store.registry_journal()) == 8

    def test_update_to_taken_sku_raises(self):
        from core.ledger.errors import DuplicateSkuError
        from core.primitives.item import Product
        from core.registry import EntityKind

        store = self._with_sku()
        with pytest.raises(DuplicateSkuError):
            store.update_entity(Product(product_id="P1", name="Rice", price=10, cost=5, sku="SKU-1"))
        assert store.get_entity(EntityKind.PRODUCT, "P1").sku == ""

    def test_product_keeps_its_own_sku_on_update(self):
        from core.primitives.item import Product
        from core.registry import EntityKind

        store = self._with_sku()
        store.update_entity(Product(product_id="P2", name="White sugar", sku="SKU-1"))
        assert store.get_entity(EntityKind.PRODUCT, "P2").name == "White sugar"

    def test_empty_skus_do_not_collide(self):
        from core.primitives.item import Product
        from core.registry import EntityKind

        store = _store()
        store.add_entity(Product(product_id="P2", name="Sugar"))
        assert store.get_entity(EntityKind.PRODUCT, "P2").sku == ""

    def test_removed_product_frees_its_sku(self):
        from core.primitives.item import Product
        from core.registry import EntityKind

        store = self._with_sku()
        store.remove_entity(EntityKind.PRODUCT, "P2")
        store.add_entity(Product(product_id="P3", name="Salt", sku="SKU-1"))
        assert store.get_entity(EntityKind.PRODUCT, "P3").sku == "SKU-1"
