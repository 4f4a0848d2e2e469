from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from ...payroll.model import PayrollRecord
from .base import IntegrityStrategy


class BonusOverrideStrategy(IntegrityStrategy):
    """High score: allowances become the flat bonus (override, not added)."""

    def __init__(self, amount: Decimal):
        self.amount = amount

    def adjust(self, line: PayrollRecord) -> PayrollRecord:
        return replace(line, total_allowances=self.amount)
