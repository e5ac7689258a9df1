"""
Manara HR Engine - Request Commands
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from core.primitives.ledger import ZERO, SalaryPayment, to_amount
from core.primitives.party import Employee
from core.time.temporal import normalize_date


@dataclass(frozen=True)
class SalaryPaymentRequest:
    """Monthly salary: net = base salary + bonus - deduction."""
    employee: Employee
    month: int
    year: int
    safe_id: str
    date: str
    bonus: Decimal = ZERO
    deduction: Decimal = ZERO

    def __post_init__(self):
        if not isinstance(self.employee, Employee):
            raise ValueError("employee must be an Employee.")
        if not self.employee.is_payable:
            raise ValueError(
                f"employee '{self.employee.employee_id}' is terminated."
            )
        if not isinstance(self.month, int) or not 1 <= self.month <= 12:
            raise ValueError("month must be an int between 1 and 12.")
        if not isinstance(self.year, int) or self.year < 1900:
            raise ValueError("year must be a valid int.")
        if not self.safe_id:
            raise ValueError("safe_id must be non-empty.")
        object.__setattr__(self, "date", normalize_date(self.date))
        object.__setattr__(self, "bonus", to_amount(self.bonus))
        object.__setattr__(self, "deduction", to_amount(self.deduction))
        if self.bonus < 0 or self.deduction < 0:
            raise ValueError("bonus and deduction must be non-negative.")
        if self.net_salary < 0:
            raise ValueError("deduction exceeds base salary plus bonus.")

    @property
    def net_salary(self) -> Decimal:
        return self.employee.base_salary + self.bonus - self.deduction

    def to_payment(self, payment_id: str) -> SalaryPayment:
        return SalaryPayment(
            payment_id=payment_id,
            employee_id=self.employee.employee_id,
            employee_name=self.employee.name,
            month=self.month,
            year=self.year,
            bonus=self.bonus,
            deduction=self.deduction,
            net_salary=self.net_salary,
            date=self.date,
            safe_id=self.safe_id,
            transaction_id=payment_id,
        )
