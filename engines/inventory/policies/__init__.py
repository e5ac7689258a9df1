"""
Manara Inventory Engine - Policies
====================================
Checks run while planning the stock effect of a transaction.

A policy never blocks the transaction. It returns a LedgerNotice
describing what the engine absorbed, or None when all is well.
"""

from __future__ import annotations

from typing import Optional

from core.commands.notices import LedgerNotice, NoticeCode
from core.primitives.inventory import StockMovement
from core.registry import EntityKind, EntityRegistry


def unknown_product_policy(
    product_id: str,
    registry: EntityRegistry,
) -> Optional[LedgerNotice]:
    """Items referencing an unregistered product are skipped."""
    if registry.contains(EntityKind.PRODUCT, product_id):
        return None

    return LedgerNotice(
        code=NoticeCode.REFERENCE_NOT_FOUND,
        message=f"Product '{product_id}' is not registered; item skipped.",
        reference=product_id,
        policy_name="unknown_product_policy",
    )


def unknown_warehouse_policy(
    warehouse_id: Optional[str],
    registry: EntityRegistry,
) -> Optional[LedgerNotice]:
    """Stock cannot move in or out of an unregistered warehouse."""
    if registry.contains(EntityKind.WAREHOUSE, warehouse_id):
        return None

    return LedgerNotice(
        code=NoticeCode.REFERENCE_NOT_FOUND,
        message=f"Warehouse '{warehouse_id}' is not registered; movement skipped.",
        reference=warehouse_id,
        policy_name="unknown_warehouse_policy",
    )


def insufficient_stock_policy(
    movement: StockMovement,
) -> Optional[LedgerNotice]:
    """Report a decrement that was clamped at zero."""
    if not movement.clamped:
        return None

    return LedgerNotice(
        code=NoticeCode.INSUFFICIENT_STOCK,
        message=(
            f"Insufficient stock: {movement.before} available, "
            f"{-movement.requested} requested for product "
            f"{movement.product_id} at warehouse {movement.warehouse_id}. "
            f"Quantity clamped to 0."
        ),
        reference=movement.product_id,
        policy_name="insufficient_stock_policy",
    )
