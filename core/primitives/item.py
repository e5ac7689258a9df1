"""
Manara Item Primitive - Product Definition
============================================
Engine: Core Primitives
Authority: Manara ledger rules

A Product is reference data held in the Entity Registry and
consumed by: Inventory Engine, Analytics, Movement Registry.

RULES:
- Products are immutable snapshots; updates replace by id
- Prices and costs are Decimal
- cost is optional; absence means cost-based metrics are undefined
- opening_stocks is the stock the product was registered with;
  current on-hand quantities are owned by the Stock Ledger
- unit and packaging are display-only

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Mapping, Optional

from core.primitives.ledger import ZERO, to_amount


def _stock_rows(stocks: Mapping[str, int]) -> list:
    return [
        {"warehouseId": warehouse_id, "quantity": quantity}
        for warehouse_id, quantity in stocks.items()
    ]


def _stock_map(rows) -> Dict[str, int]:
    if isinstance(rows, Mapping):
        return {str(k): int(v) for k, v in rows.items()}
    return {row["warehouseId"]: int(row["quantity"]) for row in rows or []}


@dataclass(frozen=True)
class Product:
    product_id: str
    name: str
    sku: str = ""
    price: Decimal = ZERO
    cost: Optional[Decimal] = None
    min_threshold: int = 0
    items_per_box: int = 1
    unit: str = "piece"
    packaging: str = ""
    branch_id: Optional[str] = None
    opening_stocks: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if not self.product_id or not isinstance(self.product_id, str):
            raise ValueError("product_id must be a non-empty string.")
        if not self.name:
            raise ValueError("name must be non-empty.")
        if not isinstance(self.items_per_box, int) or self.items_per_box < 1:
            raise ValueError("items_per_box must be a positive int.")
        if not isinstance(self.min_threshold, int) or self.min_threshold < 0:
            raise ValueError("min_threshold must be a non-negative int.")
        object.__setattr__(self, "price", to_amount(self.price))
        if self.cost is not None:
            object.__setattr__(self, "cost", to_amount(self.cost))
        stocks = _stock_map(self.opening_stocks)
        for warehouse_id, quantity in stocks.items():
            if quantity < 0:
                raise ValueError(
                    f"opening stock for '{warehouse_id}' must be non-negative."
                )
        object.__setattr__(self, "opening_stocks", stocks)

    @property
    def identity(self) -> str:
        return self.product_id

    @property
    def has_cost(self) -> bool:
        return self.cost is not None

    def to_record(self, stocks: Optional[Mapping[str, int]] = None) -> dict:
        """
        Persisted shape. `stocks` are the current quantities supplied
        by the Stock Ledger; the opening quantities when omitted.
        """
        return {
            "id": self.product_id,
            "name": self.name,
            "sku": self.sku,
            "price": str(self.price),
            "cost": None if self.cost is None else str(self.cost),
            "minThreshold": self.min_threshold,
            "itemsPerBox": self.items_per_box,
            "unit": self.unit,
            "packaging": self.packaging,
            "branchId": self.branch_id,
            "openingStocks": _stock_rows(self.opening_stocks),
            "stocks": _stock_rows(
                self.opening_stocks if stocks is None else stocks
            ),
        }

    @classmethod
    def from_record(cls, data: dict) -> Product:
        opening = data.get("openingStocks")
        if opening is None:
            opening = data.get("stocks", [])
        return cls(
            product_id=data["id"],
            name=data["name"],
            sku=data.get("sku") or "",
            price=data.get("price") or ZERO,
            cost=data.get("cost"),
            min_threshold=int(data.get("minThreshold") or 0),
            items_per_box=int(data.get("itemsPerBox") or 1),
            unit=data.get("unit") or "piece",
            packaging=data.get("packaging") or "",
            branch_id=data.get("branchId"),
            opening_stocks=_stock_map(opening),
        )
