"""
Manara Inventory Primitive - Warehouses, Branches, Stock Movements
====================================================================
Engine: Core Primitives
Authority: Manara ledger rules

Location records and the planned stock change produced by the
Inventory Engine when it plans a transaction.

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Warehouse:
    warehouse_id: str
    name: str
    location: str = ""
    manager: str = ""

    def __post_init__(self):
        if not self.warehouse_id or not isinstance(self.warehouse_id, str):
            raise ValueError("warehouse_id must be a non-empty string.")

    @property
    def identity(self) -> str:
        return self.warehouse_id

    def to_record(self) -> dict:
        return {
            "id": self.warehouse_id,
            "name": self.name,
            "location": self.location,
            "manager": self.manager,
        }

    @classmethod
    def from_record(cls, data: dict) -> Warehouse:
        return cls(
            warehouse_id=data["id"],
            name=data["name"],
            location=data.get("location") or "",
            manager=data.get("manager") or "",
        )


@dataclass(frozen=True)
class Branch:
    branch_id: str
    name: str
    location: str = ""
    manager: str = ""

    def __post_init__(self):
        if not self.branch_id or not isinstance(self.branch_id, str):
            raise ValueError("branch_id must be a non-empty string.")

    @property
    def identity(self) -> str:
        return self.branch_id

    def to_record(self) -> dict:
        return {
            "id": self.branch_id,
            "name": self.name,
            "location": self.location,
            "manager": self.manager,
        }

    @classmethod
    def from_record(cls, data: dict) -> Branch:
        return cls(
            branch_id=data["id"],
            name=data["name"],
            location=data.get("location") or "",
            manager=data.get("manager") or "",
        )


@dataclass(frozen=True)
class StockMovement:
    """
    Planned change to one (product, warehouse) quantity.

    requested is the signed change the transaction asked for; the
    applied change (after - before) differs from it only when a
    decrement was clamped at zero.
    """
    product_id: str
    warehouse_id: str
    before: int
    after: int
    requested: int

    def __post_init__(self):
        if self.after < 0:
            raise ValueError("stock quantity cannot go negative.")

    @property
    def delta(self) -> int:
        return self.after - self.before

    @property
    def clamped(self) -> bool:
        return self.delta != self.requested

    @property
    def shortfall(self) -> int:
        """Units requested but not available."""
        return self.delta - self.requested if self.clamped else 0
