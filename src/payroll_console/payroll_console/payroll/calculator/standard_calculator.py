from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ...core.exceptions import MissingRequiredField, MissingSalaryError
from ..model import ZERO, PayrollRecord
from ..policy import PayrollPolicy
from .base import LineInputs, LineResult, PayrollCalculator, recompute_totals, to_money


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: flat overtime multiplier over basic / standard monthly hours."""

    def __init__(self, policy: Optional[PayrollPolicy] = None):
        self._policy = policy or PayrollPolicy()

    def hourly_rate(self, basic_salary: Optional[Decimal]) -> Decimal:
        if not basic_salary:
            return ZERO
        return Decimal(basic_salary) / self._policy.standard_monthly_hours

    def calculate(self, inputs: LineInputs) -> LineResult:
        if not inputs.basic_salary:
            return LineResult(error=MissingSalaryError(inputs.employee_id))

        amounts = {
            "basic_salary": inputs.basic_salary,
            "overtime_hours": inputs.overtime_hours,
            "allowances": inputs.allowances,
            "behavioral_deductions": inputs.behavioral_deductions,
            "loan_installments": inputs.loan_installments,
        }
        for name, value in amounts.items():
            if value < 0:
                return LineResult(error=MissingRequiredField(name, "must not be negative"))

        overtime_amount = to_money(inputs.overtime_hours * self.hourly_rate(inputs.basic_salary) * self._policy.overtime_multiplier)

        line = PayrollRecord(
            employee_id=inputs.employee_id,
            basic_salary=to_money(inputs.basic_salary),
            overtime_hours=inputs.overtime_hours,
            overtime_amount=overtime_amount,
            total_allowances=to_money(inputs.allowances),
            behavioral_deductions=to_money(inputs.behavioral_deductions),
            loan_deductions=to_money(inputs.loan_installments),
            total_deductions=ZERO,
            gross_salary=ZERO,
            net_salary=ZERO,
            tax_id=inputs.tax_id,
            bank_account=inputs.bank_account,
        )
        return LineResult(line=recompute_totals(line))
