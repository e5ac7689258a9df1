"""
Manara HR Engine - Payroll
============================
Salary payments leave the safe through a `salary` transaction on
the normal append path.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Tuple

from core.primitives.ledger import ZERO, SalaryPayment, Transaction, TransactionType


def salary_label(payment: SalaryPayment) -> str:
    return f"Salary: {payment.employee_name} ({payment.month}/{payment.year})"


def salary_transaction(payment: SalaryPayment) -> Transaction:
    return Transaction(
        transaction_id=payment.transaction_id or payment.payment_id,
        date=payment.date,
        transaction_type=TransactionType.SALARY,
        total_amount=payment.net_salary,
        entity_name=salary_label(payment),
        safe_id=payment.safe_id,
    )


def payments_for_period(
    payments: Iterable[SalaryPayment],
    month: int,
    year: int,
    employee_id: Optional[str] = None,
) -> Tuple[SalaryPayment, ...]:
    return tuple(
        p for p in payments
        if p.month == month
        and p.year == year
        and (employee_id is None or p.employee_id == employee_id)
    )


def total_paid(payments: Iterable[SalaryPayment]) -> Decimal:
    return sum((p.net_salary for p in payments), ZERO)
