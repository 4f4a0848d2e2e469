from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee, the compensation anchor for payroll.

    Note: plain data object (no DB access code). basic_salary may be absent
    for newly hired staff; the calculator reports that instead of paying zero.
    """

    employee_id: int
    full_name: str
    basic_salary: Optional[Decimal]
    hire_date: Optional[date]
    status: EmployeeStatus
    dept_id: Optional[int] = None
    tax_id: Optional[str] = None
    bank_account: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
