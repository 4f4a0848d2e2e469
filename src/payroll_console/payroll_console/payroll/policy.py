from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.validators import to_decimal
from ..core.constants import (
    DEFAULT_ANNUAL_LEAVE_ALLOWANCE,
    DEFAULT_INTEGRITY_BONUS_AMOUNT,
    DEFAULT_INTEGRITY_BONUS_THRESHOLD,
    DEFAULT_INTEGRITY_PENALTY_AMOUNT,
    DEFAULT_INTEGRITY_PENALTY_THRESHOLD,
    DEFAULT_OVERTIME_MULTIPLIER,
    DEFAULT_STANDARD_MONTHLY_HOURS,
)
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PayrollPolicy:
    """Business constants passed into the calculator, integrity rules and leave validator."""

    standard_monthly_hours: Decimal = DEFAULT_STANDARD_MONTHLY_HOURS
    overtime_multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER
    integrity_bonus_amount: Decimal = DEFAULT_INTEGRITY_BONUS_AMOUNT
    integrity_bonus_threshold: Decimal = DEFAULT_INTEGRITY_BONUS_THRESHOLD
    integrity_penalty_amount: Decimal = DEFAULT_INTEGRITY_PENALTY_AMOUNT
    integrity_penalty_threshold: Decimal = DEFAULT_INTEGRITY_PENALTY_THRESHOLD
    default_annual_leave_allowance: int = DEFAULT_ANNUAL_LEAVE_ALLOWANCE

    def __post_init__(self) -> None:
        if self.standard_monthly_hours <= 0:
            raise ValidationError("standard_monthly_hours must be positive")
        if self.overtime_multiplier < 0:
            raise ValidationError("overtime_multiplier must not be negative")
        if self.integrity_penalty_threshold > self.integrity_bonus_threshold:
            raise ValidationError("integrity penalty threshold must not exceed the bonus threshold")
        if self.default_annual_leave_allowance < 0:
            raise ValidationError("default_annual_leave_allowance must not be negative")

    @classmethod
    def from_settings(cls, values: Optional[Mapping[str, Any]]) -> "PayrollPolicy":
        """Build from a settings dict; unknown keys are ignored, missing keys keep defaults."""
        if not values:
            return cls()
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in values or values[f.name] in (None, ""):
                continue
            raw = values[f.name]
            kwargs[f.name] = int(raw) if f.name == "default_annual_leave_allowance" else to_decimal(raw, f.name)
        return cls(**kwargs)
