from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...core.constants import CURRENCY_QUANTUM
from ...core.enums import PaymentStatus
from ...core.exceptions import ValidationError
from ..model import ZERO, PayrollRecord


def to_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LineInputs:
    """Everything the calculator needs for one employee, already loaded."""

    employee_id: int
    basic_salary: Optional[Decimal]
    overtime_hours: Decimal = ZERO
    allowances: Decimal = ZERO
    behavioral_deductions: Decimal = ZERO
    loan_installments: Decimal = ZERO
    tax_id: Optional[str] = None
    bank_account: Optional[str] = None


@dataclass(frozen=True)
class LineResult:
    """Either a computed line or the reason it could not be computed."""

    line: Optional[PayrollRecord] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.line is not None


def recompute_totals(line: PayrollRecord) -> PayrollRecord:
    """Rebuild gross, deductions and net from a line's components."""
    gross = to_money(line.basic_salary + line.overtime_amount + line.total_allowances)
    total_deductions = to_money(line.behavioral_deductions + line.loan_deductions)
    net = gross - total_deductions

    status = line.payment_status
    if status != PaymentStatus.PAID:
        status = PaymentStatus.FLAGGED if net < 0 else PaymentStatus.READY

    return replace(
        line,
        gross_salary=gross,
        total_deductions=total_deductions,
        net_salary=net,
        payment_status=status,
    )


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def hourly_rate(self, basic_salary: Optional[Decimal]) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def calculate(self, inputs: LineInputs) -> LineResult:
        raise NotImplementedError

    def recompute(self, line: PayrollRecord) -> PayrollRecord:
        return recompute_totals(line)
