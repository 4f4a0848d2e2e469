from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional

from ..payroll.calculator.base import recompute_totals, to_money
from ..payroll.model import PayrollRecord
from ..payroll.policy import PayrollPolicy
from .strategies.base import IntegrityStrategy
from .strategies.bonus_strategy import BonusOverrideStrategy
from .strategies.neutral_strategy import NeutralStrategy
from .strategies.penalty_strategy import PenaltyStrategy


@dataclass
class IntegrityStrategyFactory:
    """Factory Pattern: choose the integrity strategy from the score thresholds."""

    policy: PayrollPolicy = field(default_factory=PayrollPolicy)

    def for_score(self, score: Decimal) -> IntegrityStrategy:
        if score >= self.policy.integrity_bonus_threshold:
            return BonusOverrideStrategy(to_money(self.policy.integrity_bonus_amount))
        if score < self.policy.integrity_penalty_threshold:
            return PenaltyStrategy(to_money(self.policy.integrity_penalty_amount))
        return NeutralStrategy()


def apply_integrity_rule(
    line: PayrollRecord,
    score: Decimal,
    *,
    factory: Optional[IntegrityStrategyFactory] = None,
) -> PayrollRecord:
    factory = factory or IntegrityStrategyFactory()
    adjusted = factory.for_score(score).adjust(line)
    return recompute_totals(replace(adjusted, integrity_score=score))
