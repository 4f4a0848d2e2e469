from __future__ import annotations

from ...payroll.model import PayrollRecord
from .base import IntegrityStrategy


class NeutralStrategy(IntegrityStrategy):
    """Score between the thresholds: line unchanged."""

    def adjust(self, line: PayrollRecord) -> PayrollRecord:
        return line
