from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from ...payroll.model import PayrollRecord
from .base import IntegrityStrategy


class PenaltyStrategy(IntegrityStrategy):
    """Low score: flat penalty added to behavioural deductions.

    Additive on every application, unlike the bonus. Apply it to a line
    freshly computed from its baseline or the penalty stacks.
    """

    def __init__(self, amount: Decimal):
        self.amount = amount

    def adjust(self, line: PayrollRecord) -> PayrollRecord:
        return replace(line, behavioral_deductions=line.behavioral_deductions + self.amount)
