"""
Manara Party Primitive - Customers, Suppliers, Employees
==========================================================
Engine: Core Primitives
Authority: Manara ledger rules

Counterparties of ledger transactions. Customer and supplier
balances are never stored here; they are reconstructed from the
Transaction Log by the statement projection.

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from core.primitives.ledger import ZERO, to_amount
from core.time.temporal import normalize_date


def _require_id(value, field_name: str) -> None:
    if not value or not isinstance(value, str):
        raise ValueError(f"{field_name} must be a non-empty string.")


@dataclass(frozen=True)
class Customer:
    customer_id: str
    name: str
    phone: str = ""
    address: str = ""

    def __post_init__(self):
        _require_id(self.customer_id, "customer_id")

    @property
    def identity(self) -> str:
        return self.customer_id

    def to_record(self) -> dict:
        return {
            "id": self.customer_id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
        }

    @classmethod
    def from_record(cls, data: dict) -> Customer:
        return cls(
            customer_id=data["id"],
            name=data["name"],
            phone=data.get("phone") or "",
            address=data.get("address") or "",
        )


@dataclass(frozen=True)
class Supplier:
    supplier_id: str
    name: str
    contact: str = ""
    category: str = ""
    rating: int = 0

    def __post_init__(self):
        _require_id(self.supplier_id, "supplier_id")
        if not 0 <= self.rating <= 5:
            raise ValueError("rating must be between 0 and 5.")

    @property
    def identity(self) -> str:
        return self.supplier_id

    def to_record(self) -> dict:
        return {
            "id": self.supplier_id,
            "name": self.name,
            "contact": self.contact,
            "category": self.category,
            "rating": self.rating,
        }

    @classmethod
    def from_record(cls, data: dict) -> Supplier:
        return cls(
            supplier_id=data["id"],
            name=data["name"],
            contact=data.get("contact") or "",
            category=data.get("category") or "",
            rating=int(data.get("rating") or 0),
        )


class EmployeeStatus(Enum):
    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class Employee:
    employee_id: str
    name: str
    base_salary: Decimal = ZERO
    position: str = ""
    department: str = ""
    phone: str = ""
    joining_date: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    branch_id: Optional[str] = None

    def __post_init__(self):
        _require_id(self.employee_id, "employee_id")
        object.__setattr__(self, "base_salary", to_amount(self.base_salary))
        if self.base_salary < 0:
            raise ValueError("base_salary must be non-negative.")
        if not isinstance(self.status, EmployeeStatus):
            object.__setattr__(self, "status", EmployeeStatus(self.status))
        if self.joining_date is not None:
            object.__setattr__(self, "joining_date", normalize_date(self.joining_date))

    @property
    def identity(self) -> str:
        return self.employee_id

    @property
    def is_payable(self) -> bool:
        return self.status != EmployeeStatus.TERMINATED

    def to_record(self) -> dict:
        return {
            "id": self.employee_id,
            "name": self.name,
            "position": self.position,
            "department": self.department,
            "baseSalary": str(self.base_salary),
            "phone": self.phone,
            "joiningDate": self.joining_date,
            "status": self.status.value,
            "branchId": self.branch_id,
        }

    @classmethod
    def from_record(cls, data: dict) -> Employee:
        return cls(
            employee_id=data["id"],
            name=data["name"],
            base_salary=data.get("baseSalary") or ZERO,
            position=data.get("position") or "",
            department=data.get("department") or "",
            phone=data.get("phone") or "",
            joining_date=data.get("joiningDate"),
            status=EmployeeStatus(data.get("status") or "active"),
            branch_id=data.get("branchId"),
        )
