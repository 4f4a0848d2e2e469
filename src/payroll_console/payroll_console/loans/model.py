from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import LoanStatus


@dataclass(frozen=True)
class Loan:
    loan_id: int
    employee_id: int
    total_amount: Decimal
    monthly_installment: Decimal
    remaining_amount: Decimal
    start_date: date
    status: LoanStatus
    reason: Optional[str] = None
