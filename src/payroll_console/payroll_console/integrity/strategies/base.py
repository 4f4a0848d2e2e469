from __future__ import annotations

from abc import ABC, abstractmethod

from ...payroll.model import PayrollRecord


class IntegrityStrategy(ABC):
    """Strategy Pattern: encapsulate how an integrity score changes a payroll line.

    adjust() touches allowances/deductions only; totals are rebuilt by the caller.
    """

    @abstractmethod
    def adjust(self, line: PayrollRecord) -> PayrollRecord:
        raise NotImplementedError
