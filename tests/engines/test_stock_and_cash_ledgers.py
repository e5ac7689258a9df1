"""
Manara Stock and Cash Ledgers - Test Suite
============================================
Tests for: plan/commit separation, clamping, repeated products,
cash deltas per transaction type, policies.
"""

from decimal import Decimal

import pytest


def _registry():
    from core.primitives.inventory import Warehouse
    from core.primitives.item import Product
    from core.primitives.ledger import Safe
    from core.registry import EntityRegistry
    registry = EntityRegistry()
    registry.add(Warehouse(warehouse_id="W1", name="Main"))
    registry.add(Warehouse(warehouse_id="W2", name="Annex"))
    registry.add(Product(product_id="P1", name="Rice", opening_stocks={"W1": 5}))
    registry.add(Safe(safe_id="S1", name="Till", opening_balance=100))
    return registry


def _stock_ledger(registry):
    from core.registry import EntityKind
    from engines.inventory.services import StockLedger
    ledger = StockLedger()
    for product in registry.list(EntityKind.PRODUCT):
        ledger.seed(product)
    return ledger


def _txn(kind, items=(), **fields):
    from core.primitives.ledger import Transaction
    return Transaction(
        transaction_id=fields.pop("transaction_id", "T1"),
        date="2025-01-01",
        transaction_type=kind,
        total_amount=fields.pop("total_amount", 0),
        items=items,
        **fields,
    )


def _item(quantity, product_id="P1"):
    from core.primitives.ledger import TransactionItem
    return TransactionItem(product_id=product_id, quantity=quantity)


class TestStockPlan:
    def test_plan_mutates_nothing(self):
        registry = _registry()
        ledger = _stock_ledger(registry)
        plan = ledger.plan(_txn("sale", [_item(2)], warehouse_id="W1"), registry)
        assert plan.movements[0].after == 3
        assert ledger.get_stock("P1", "W1") == 5
        ledger.commit(plan)
        assert ledger.get_stock("P1", "W1") == 3

    def test_repeated_product_uses_working_quantity(self):
        from core.commands.notices import NoticeCode
        registry = _registry()
        ledger = _stock_ledger(registry)
        plan = ledger.apply(
            _txn("sale", [_item(3), _item(3)], warehouse_id="W1"), registry
        )
        assert [m.after for m in plan.movements] == [2, 0]
        assert plan.movements[1].shortfall == 1
        assert [n.code for n in plan.notices] == [NoticeCode.INSUFFICIENT_STOCK]

    def test_salary_has_no_stock_effect(self):
        registry = _registry()
        ledger = _stock_ledger(registry)
        plan = ledger.plan(_txn("salary", total_amount=10, safe_id="S1"), registry)
        assert plan.movements == ()

    def test_transfer_with_unknown_destination_moves_nothing(self):
        registry = _registry()
        ledger = _stock_ledger(registry)
        plan = ledger.apply(
            _txn("transfer", [_item(1)], from_warehouse_id="W1", to_warehouse_id="W9"),
            registry,
        )
        assert plan.movements == ()
        assert plan.notices[0].reference == "W9"
        assert ledger.get_stock("P1", "W1") == 5

    def test_transfer_oversell_still_credits_destination(self):
        registry = _registry()
        ledger = _stock_ledger(registry)
        ledger.apply(
            _txn("transfer", [_item(8)], from_warehouse_id="W1", to_warehouse_id="W2"),
            registry,
        )
        assert ledger.get_stock("P1", "W1") == 0
        assert ledger.get_stock("P1", "W2") == 8

    def test_drop_warehouse(self):
        registry = _registry()
        ledger = _stock_ledger(registry)
        ledger.drop_warehouse("W1")
        assert ledger.snapshot() == {}


class TestStockMovement:
    def test_negative_after_rejected(self):
        from core.primitives.inventory import StockMovement
        with pytest.raises(ValueError):
            StockMovement(product_id="P", warehouse_id="W", before=1, after=-1, requested=-2)

    def test_unclamped_has_no_shortfall(self):
        from core.primitives.inventory import StockMovement
        movement = StockMovement(product_id="P", warehouse_id="W", before=4, after=1, requested=-3)
        assert not movement.clamped
        assert movement.shortfall == 0


class TestCashDelta:
    @pytest.mark.parametrize("kind,extra,expected", [
        ("sale", {}, Decimal(50)),
        ("purchase", {}, Decimal(-50)),
        ("salary", {}, Decimal(-50)),
        ("accounting", {"is_revenue": True}, Decimal(50)),
        ("accounting", {"is_revenue": False}, Decimal(-50)),
        ("loss", {}, Decimal(0)),
        ("transfer", {}, Decimal(0)),
    ])
    def test_signs(self, kind, extra, expected):
        from engines.cash.services import cash_delta
        assert cash_delta(_txn(kind, total_amount=50, **extra)) == expected


class TestCashLedger:
    def _ledger(self, registry):
        from core.registry import EntityKind
        from engines.cash.services import CashLedger
        ledger = CashLedger()
        for safe in registry.list(EntityKind.SAFE):
            ledger.seed(safe)
        return ledger

    def test_overdraft_allowed(self):
        registry = _registry()
        ledger = self._ledger(registry)
        ledger.apply(_txn("purchase", total_amount=250, safe_id="S1"), registry)
        assert ledger.balance_of("S1") == Decimal(-150)

    def test_no_safe_no_effect(self):
        registry = _registry()
        ledger = self._ledger(registry)
        plan = ledger.plan(_txn("sale", total_amount=10), registry)
        assert plan.movement is None
        assert plan.notices == ()

    def test_unknown_safe_notice(self):
        from core.commands.notices import NoticeCode
        registry = _registry()
        ledger = self._ledger(registry)
        plan = ledger.apply(_txn("sale", total_amount=10, safe_id="S9"), registry)
        assert plan.movement is None
        assert plan.notices[0].code == NoticeCode.REFERENCE_NOT_FOUND
        assert ledger.snapshot() == {"S1": Decimal(100)}
