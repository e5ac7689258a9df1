"""
Manara Projections - Profitability Report
===========================================
Sales, purchases, cost of goods sold, gross profit, margin, and
per-product / per-customer profit rankings.

COGS is Σ item.cost × item.quantity over sale lines, using the cost
snapshotted on the line. A line without a known cost adds nothing
to COGS, and the product (or customer) it belongs to gets no profit
figure; such entries are listed apart instead of being ranked.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from core.primitives.ledger import ZERO, Transaction, TransactionType
from projections.analytics.filters import ReportFilters, filter_transactions


@dataclass(frozen=True)
class ProductProfit:
    product_id: str
    product_name: str
    quantity_sold: int
    sales: Decimal
    cost: Optional[Decimal]

    @property
    def profit(self) -> Optional[Decimal]:
        if self.cost is None:
            return None
        return self.sales - self.cost


@dataclass(frozen=True)
class CustomerProfit:
    entity_id: str
    entity_name: str
    sales: Decimal
    cost: Optional[Decimal]
    invoice_count: int

    @property
    def profit(self) -> Optional[Decimal]:
        if self.cost is None:
            return None
        return self.sales - self.cost


@dataclass(frozen=True)
class ProfitabilityReport:
    total_sales: Decimal
    total_purchases: Decimal
    cogs: Decimal
    units_sold: int
    products: Tuple[ProductProfit, ...]
    customers: Tuple[CustomerProfit, ...]
    unpriced_products: Tuple[ProductProfit, ...]
    unpriced_customers: Tuple[CustomerProfit, ...]

    @property
    def gross_profit(self) -> Decimal:
        return self.total_sales - self.cogs

    @property
    def margin(self) -> Decimal:
        """gross_profit / total_sales; 0 when nothing was sold."""
        if self.total_sales == 0:
            return ZERO
        return self.gross_profit / self.total_sales

    def top_products(self, limit: int) -> Tuple[ProductProfit, ...]:
        return self.products[:limit]

    def top_customers(self, limit: int) -> Tuple[CustomerProfit, ...]:
        return self.customers[:limit]


class _Tally:
    __slots__ = ("name", "quantity", "sales", "cost", "cost_known", "count")

    def __init__(self, name: str):
        self.name = name
        self.quantity = 0
        self.sales = ZERO
        self.cost = ZERO
        self.cost_known = True
        self.count = 0


def _ranked(entries: List) -> Tuple[tuple, tuple]:
    known = [e for e in entries if e.profit is not None]
    unknown = [e for e in entries if e.profit is None]
    # sorted() is stable with reverse=True: ties keep encounter order.
    return tuple(sorted(known, key=lambda e: e.profit, reverse=True)), tuple(unknown)


def sale_cogs(transaction: Transaction) -> Decimal:
    return sum(
        (item.line_cost for item in transaction.items if item.line_cost is not None),
        ZERO,
    )


def profitability_report(
    transactions: Iterable[Transaction],
    filters: Optional[ReportFilters] = None,
) -> ProfitabilityReport:
    total_sales = ZERO
    total_purchases = ZERO
    cogs = ZERO
    units_sold = 0
    products: Dict[str, _Tally] = {}
    customers: Dict[str, _Tally] = {}

    for transaction in filter_transactions(transactions, filters):
        if transaction.transaction_type == TransactionType.PURCHASE:
            total_purchases += transaction.total_amount
            continue
        if transaction.transaction_type != TransactionType.SALE:
            continue

        total_sales += transaction.total_amount
        invoice_cost = ZERO
        invoice_cost_known = True

        for item in transaction.items:
            units_sold += item.quantity
            tally = products.setdefault(item.product_id, _Tally(item.product_name))
            tally.quantity += item.quantity
            tally.sales += item.line_total
            if item.line_cost is None:
                tally.cost_known = False
                invoice_cost_known = False
            else:
                tally.cost += item.line_cost
                invoice_cost += item.line_cost
                cogs += item.line_cost

        if transaction.entity_id:
            tally = customers.setdefault(
                transaction.entity_id, _Tally(transaction.entity_name or "")
            )
            tally.sales += transaction.total_amount
            tally.cost += invoice_cost
            tally.cost_known = tally.cost_known and invoice_cost_known
            tally.count += 1

    product_rows = [
        ProductProfit(
            product_id=product_id,
            product_name=t.name,
            quantity_sold=t.quantity,
            sales=t.sales,
            cost=t.cost if t.cost_known else None,
        )
        for product_id, t in products.items()
    ]
    customer_rows = [
        CustomerProfit(
            entity_id=entity_id,
            entity_name=t.name,
            sales=t.sales,
            cost=t.cost if t.cost_known else None,
            invoice_count=t.count,
        )
        for entity_id, t in customers.items()
    ]

    ranked_products, unpriced_products = _ranked(product_rows)
    ranked_customers, unpriced_customers = _ranked(customer_rows)

    return ProfitabilityReport(
        total_sales=total_sales,
        total_purchases=total_purchases,
        cogs=cogs,
        units_sold=units_sold,
        products=ranked_products,
        customers=ranked_customers,
        unpriced_products=unpriced_products,
        unpriced_customers=unpriced_customers,
    )
