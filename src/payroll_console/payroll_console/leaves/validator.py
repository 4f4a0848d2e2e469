from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import inclusive_days
from ..core.constants import DEFAULT_ANNUAL_LEAVE_ALLOWANCE
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import InsufficientBalance, InvalidDateRange, ValidationError
from .model import LeaveRequest


@dataclass(frozen=True)
class LeaveDecision:
    """Outcome of a balance check; carries the numbers either way for the user message."""

    leave_type: LeaveType
    requested_days: int
    used_days: int
    remaining_balance: int
    error: Optional[ValidationError] = None

    @property
    def eligible(self) -> bool:
        return self.error is None


class LeaveBalanceValidator:
    """Annual leave balance rule.

    Only APPROVED Annual leaves starting in the current calendar year count
    as used. Sick/Unpaid/Emergency requests skip the balance check.
    """

    def __init__(self, annual_allowance: int = DEFAULT_ANNUAL_LEAVE_ALLOWANCE):
        self.annual_allowance = int(annual_allowance)

    def used_days(self, history: Iterable[LeaveRequest], *, year: int) -> int:
        return sum(
            inclusive_days(r.start_date, r.end_date)
            for r in history
            if r.status == RequestStatus.APPROVED and r.leave_type == LeaveType.ANNUAL and r.start_date.year == year
        )

    def remaining(self, history: Iterable[LeaveRequest], *, year: int) -> int:
        return self.annual_allowance - self.used_days(history, year=year)

    def evaluate(
        self,
        history: Iterable[LeaveRequest],
        *,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        today: date,
    ) -> LeaveDecision:
        history = list(history)
        requested = inclusive_days(start_date, end_date)
        used = self.used_days(history, year=today.year)
        remaining = self.annual_allowance - used

        if requested <= 0:
            return LeaveDecision(
                leave_type=leave_type,
                requested_days=requested,
                used_days=used,
                remaining_balance=remaining,
                error=InvalidDateRange(f"end date {end_date.isoformat()} is before start date {start_date.isoformat()}"),
            )

        error: Optional[ValidationError] = None
        if leave_type == LeaveType.ANNUAL and requested > remaining:
            error = InsufficientBalance(remaining_balance=remaining, requested_days=requested)

        return LeaveDecision(
            leave_type=leave_type,
            requested_days=requested,
            used_days=used,
            remaining_balance=remaining,
            error=error,
        )
