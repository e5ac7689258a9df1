"""
Manara Ledger Primitives - Test Suite
=======================================
Tests for: Transaction, TransactionItem, AccountingEntry, Safe,
Product, parties, and the persisted record shape.
"""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest


# ══════════════════════════════════════════════════════════════
# AMOUNTS
# ══════════════════════════════════════════════════════════════

class TestToAmount:
    def test_float_has_no_binary_artefacts(self):
        from core.primitives.ledger import to_amount
        assert to_amount(0.1) + to_amount(0.2) == Decimal("0.3")

    def test_accepts_int_str_decimal(self):
        from core.primitives.ledger import to_amount
        assert to_amount(5) == Decimal(5)
        assert to_amount("12.50") == Decimal("12.50")
        assert to_amount(Decimal("1.1")) == Decimal("1.1")

    def test_rejects_bool_and_garbage(self):
        from core.primitives.ledger import to_amount
        with pytest.raises(TypeError):
            to_amount(True)
        with pytest.raises(ValueError):
            to_amount("abc")


# ══════════════════════════════════════════════════════════════
# TRANSACTIONS
# ══════════════════════════════════════════════════════════════

class TestTransactionItem:
    def test_line_totals(self):
        from core.primitives.ledger import TransactionItem
        item = TransactionItem(product_id="P", quantity=4, price=10, cost=5, loss_quantity=1)
        assert item.line_total == Decimal(40)
        assert item.line_cost == Decimal(20)
        assert item.outgoing_quantity == 5

    def test_unknown_cost(self):
        from core.primitives.ledger import TransactionItem
        item = TransactionItem(product_id="P", quantity=2, price=3)
        assert item.cost is None
        assert item.line_cost is None

    def test_quantity_must_be_int(self):
        from core.primitives.ledger import TransactionItem
        with pytest.raises(ValueError, match="int"):
            TransactionItem(product_id="P", quantity=1.5)


class TestTransaction:
    def _sale(self, **overrides):
        from core.primitives.ledger import Transaction, TransactionItem, TransactionType
        data = dict(
            transaction_id="T1",
            date="2025-01-02",
            transaction_type=TransactionType.SALE,
            total_amount=40,
            items=[TransactionItem(product_id="P", quantity=4, price=10, cost=5)],
            entity_id="C1",
            entity_name="Client",
            warehouse_id="W1",
            safe_id="S1",
        )
        data.update(overrides)
        return Transaction(**data)

    def test_items_become_tuple_and_amount_decimal(self):
        t = self._sale()
        assert isinstance(t.items, tuple)
        assert t.total_amount == Decimal(40)

    def test_is_frozen(self):
        t = self._sale()
        with pytest.raises(FrozenInstanceError):
            t.total_amount = Decimal(1)

    def test_type_string_is_coerced(self):
        from core.primitives.ledger import TransactionType
        t = self._sale(transaction_type="purchase")
        assert t.transaction_type == TransactionType.PURCHASE

    def test_malformed_date_rejected(self):
        with pytest.raises(ValueError, match="ISO"):
            self._sale(date="02/01/2025")

    def test_salary_has_no_items(self):
        from core.primitives.ledger import TransactionItem
        with pytest.raises(ValueError, match="no items"):
            self._sale(transaction_type="salary", items=[TransactionItem(product_id="P", quantity=1)])

    def test_accounting_requires_polarity(self):
        with pytest.raises(ValueError, match="is_revenue"):
            self._sale(transaction_type="accounting", items=())

    def test_polarity_only_on_accounting(self):
        with pytest.raises(ValueError, match="only valid"):
            self._sale(is_revenue=True)

    def test_references(self):
        t = self._sale()
        assert t.references("C1")
        assert t.references("P")
        assert t.references("S1")
        assert not t.references("X")

    def test_record_shape(self):
        record = self._sale().to_record()
        assert record["id"] == "T1"
        assert record["type"] == "sale"
        assert record["totalAmount"] == "40"
        assert record["items"][0]["productId"] == "P"
        assert record["items"][0]["cost"] == "5"
        assert record["isRevenue"] is None

    def test_from_record_restores_equal_transaction(self):
        from core.primitives.ledger import Transaction
        t = self._sale()
        assert Transaction.from_record(t.to_record()) == t


class TestAccountingEntry:
    def test_description_defaults_to_type_and_category(self):
        from core.primitives.ledger import AccountingEntry, EntryType
        entry = AccountingEntry(
            entry_id="A1", date="2025-01-01", entry_type=EntryType.EXPENSE,
            category="Rent", amount=100, safe_id="S1",
        )
        assert entry.description == "Expense: Rent"
        assert not entry.is_revenue

    def test_note_wins_over_default(self):
        from core.primitives.ledger import AccountingEntry
        entry = AccountingEntry(
            entry_id="A1", date="2025-01-01", entry_type="revenue",
            category="Misc", amount=5, safe_id="S1", note="Scrap sale",
        )
        assert entry.description == "Scrap sale"
        assert entry.is_revenue

    def test_amount_must_be_positive(self):
        from core.primitives.ledger import AccountingEntry
        with pytest.raises(ValueError, match="positive"):
            AccountingEntry(
                entry_id="A1", date="2025-01-01", entry_type="revenue",
                category="Misc", amount=0, safe_id="S1",
            )

    def test_entity_type_is_checked(self):
        from core.primitives.ledger import AccountingEntry
        with pytest.raises(ValueError, match="entity_type"):
            AccountingEntry(
                entry_id="A1", date="2025-01-01", entry_type="revenue",
                category="Misc", amount=1, safe_id="S1", entity_type="employee",
            )


# ══════════════════════════════════════════════════════════════
# REFERENCE DATA
# ══════════════════════════════════════════════════════════════

class TestProduct:
    def test_opening_stocks_from_rows(self):
        from core.primitives.item import Product
        product = Product.from_record({
            "id": "P", "name": "Rice", "price": "12", "cost": None,
            "stocks": [{"warehouseId": "W1", "quantity": 7}],
        })
        assert product.opening_stocks == {"W1": 7}
        assert not product.has_cost

    def test_negative_opening_stock_rejected(self):
        from core.primitives.item import Product
        with pytest.raises(ValueError, match="non-negative"):
            Product(product_id="P", name="Rice", opening_stocks={"W1": -1})

    def test_record_carries_current_and_opening_stocks(self):
        from core.primitives.item import Product
        product = Product(product_id="P", name="Rice", cost=3, opening_stocks={"W1": 2})
        record = product.to_record(stocks={"W1": 9})
        assert record["stocks"] == [{"warehouseId": "W1", "quantity": 9}]
        assert record["openingStocks"] == [{"warehouseId": "W1", "quantity": 2}]
        assert record["cost"] == "3"


class TestSafe:
    def test_record_balance(self):
        from core.primitives.ledger import Safe
        safe = Safe(safe_id="S1", name="Main", opening_balance="100000")
        assert safe.to_record()["balance"] == "100000"
        assert safe.to_record(balance=Decimal("-5"))["balance"] == "-5"
        assert Safe.from_record(safe.to_record(balance=Decimal(1))) == safe


class TestEmployee:
    def test_status_and_payability(self):
        from core.primitives.party import Employee, EmployeeStatus
        employee = Employee(employee_id="E1", name="Sara", base_salary=3000, status="terminated")
        assert employee.status == EmployeeStatus.TERMINATED
        assert not employee.is_payable

    def test_negative_salary_rejected(self):
        from core.primitives.party import Employee
        with pytest.raises(ValueError, match="base_salary"):
            Employee(employee_id="E1", name="Sara", base_salary=-1)


class TestSupplier:
    def test_rating_bounds(self):
        from core.primitives.party import Supplier
        with pytest.raises(ValueError, match="rating"):
            Supplier(supplier_id="V1", name="Vendor", rating=6)
