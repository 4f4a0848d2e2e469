from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import BatchStatus, PaymentStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class PayrollBatch:
    """A payroll run for one period.

    total_amount always equals the sum of the batch's record net salaries;
    version is bumped on every write and checked on update.
    """

    batch_id: int
    name: str
    status: BatchStatus
    total_amount: Decimal
    employee_count: int
    created_at: datetime
    version: int = 0
    finalized_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollInput:
    """HR-entered baseline for one employee and period.

    Every calculation starts from this row, never from a previously
    adjusted line.
    """

    employee_id: int
    period_label: str
    overtime_hours: Decimal = ZERO
    allowances: Decimal = ZERO
    behavioral_deductions: Decimal = ZERO


@dataclass(frozen=True)
class PayrollRecord:
    """One payroll line per (batch, employee).

    gross_salary = basic_salary + overtime_amount + total_allowances
    total_deductions = behavioral_deductions + loan_deductions
    net_salary = gross_salary - total_deductions
    """

    employee_id: int
    basic_salary: Decimal
    overtime_hours: Decimal
    overtime_amount: Decimal
    total_allowances: Decimal
    behavioral_deductions: Decimal
    loan_deductions: Decimal
    total_deductions: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    payment_status: PaymentStatus = PaymentStatus.READY
    integrity_score: Optional[Decimal] = None
    tax_id: Optional[str] = None
    bank_account: Optional[str] = None
    batch_id: Optional[int] = None
    record_id: Optional[int] = None
