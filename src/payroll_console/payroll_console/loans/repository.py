from __future__ import annotations

from decimal import Decimal
from typing import Protocol, Sequence

from .model import Loan


class LoanRepository(Protocol):
    def fetch_active_installments(self) -> dict[int, Decimal]:
        """Sum of monthly installments of ACTIVE loans, keyed by employee_id."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[Loan]:
        raise NotImplementedError
