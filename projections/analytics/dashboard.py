"""
Manara Projections - Dashboard
================================
Headline metrics over the whole log plus low-stock alerts.
Computed on demand; nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Iterable, Optional, Tuple

from core.config import get_ledger_settings
from core.primitives.item import Product
from core.primitives.ledger import ZERO, Transaction, TransactionType
from core.registry import EntityKind
from projections.analytics.reports import sale_cogs


@dataclass(frozen=True)
class EntityActivity:
    entity_name: str
    total_amount: Decimal


@dataclass(frozen=True)
class LowStockAlert:
    product_id: str
    product_name: str
    on_hand: int
    min_threshold: int


@dataclass(frozen=True)
class DashboardSummary:
    total_sales: Decimal
    total_purchases: Decimal
    units_sold: int
    cogs: Decimal
    top_entities: Tuple[EntityActivity, ...]
    low_stock: Tuple[LowStockAlert, ...]

    @property
    def net(self) -> Decimal:
        return self.total_sales - self.total_purchases

    @property
    def gross_profit(self) -> Decimal:
        return self.total_sales - self.cogs


def top_entities(transactions: Iterable[Transaction], limit: int) -> Tuple[EntityActivity, ...]:
    """Σ total_amount per counterparty name, largest first."""
    activity: Dict[str, Decimal] = {}
    for transaction in transactions:
        if transaction.entity_name:
            activity[transaction.entity_name] = (
                activity.get(transaction.entity_name, ZERO) + transaction.total_amount
            )
    ranked = sorted(activity.items(), key=lambda pair: pair[1], reverse=True)
    return tuple(EntityActivity(name, total) for name, total in ranked[:limit])


def low_stock_alerts(
    products: Iterable[Product],
    total_stock: Callable[[str], int],
) -> Tuple[LowStockAlert, ...]:
    """Products whose on-hand total across warehouses is at or below threshold."""
    alerts = []
    for product in products:
        on_hand = total_stock(product.product_id)
        if on_hand <= product.min_threshold:
            alerts.append(LowStockAlert(
                product_id=product.product_id,
                product_name=product.name,
                on_hand=on_hand,
                min_threshold=product.min_threshold,
            ))
    return tuple(alerts)


def dashboard_summary(store, limit: Optional[int] = None) -> DashboardSummary:
    if limit is None:
        limit = get_ledger_settings().top_entities_limit

    transactions = store.transactions()
    total_sales = ZERO
    total_purchases = ZERO
    units_sold = 0
    cogs = ZERO
    for transaction in transactions:
        if transaction.transaction_type == TransactionType.SALE:
            total_sales += transaction.total_amount
            units_sold += sum(item.quantity for item in transaction.items)
            cogs += sale_cogs(transaction)
        elif transaction.transaction_type == TransactionType.PURCHASE:
            total_purchases += transaction.total_amount

    return DashboardSummary(
        total_sales=total_sales,
        total_purchases=total_purchases,
        units_sold=units_sold,
        cogs=cogs,
        top_entities=top_entities(transactions, limit),
        low_stock=low_stock_alerts(
            store.list_entities(EntityKind.PRODUCT), store.total_stock
        ),
    )
