from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.retry import retry_read
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT, DEFAULT_READ_RETRY_ATTEMPTS, DEFAULT_READ_RETRY_BACKOFF_SECONDS
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from .model import LeaveRequest
from .repository import LeaveRepository
from .validator import LeaveBalanceValidator, LeaveDecision

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaveBalance:
    employee_id: int
    year: int
    allowance: int
    used_days: int
    remaining_days: int


class LeaveService:
    """Use case: submit and resolve leave requests against the annual balance."""

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        validator: Optional[LeaveBalanceValidator] = None,
        clock: Callable[[], date] = today_local,
        retry_attempts: int = DEFAULT_READ_RETRY_ATTEMPTS,
        retry_backoff: float = DEFAULT_READ_RETRY_BACKOFF_SECONDS,
    ):
        self._leaves = leaves
        self._employees = employees
        self._validator = validator or LeaveBalanceValidator()
        self._clock = clock
        self._retry_attempts = retry_attempts
        self._retry_backoff = retry_backoff

    def _read(self, fn):
        return retry_read(fn, attempts=self._retry_attempts, backoff=self._retry_backoff)

    def _require_active_employee(self, employee_id: int) -> None:
        employee = self._read(lambda: self._employees.get_by_id(int(employee_id)))
        if not employee:
            raise ValidationError("Employee does not exist")
        if not employee.is_active:
            raise ValidationError("Employee is not active")

    def _approved_annual(self, employee_id: int, year: int) -> Sequence[LeaveRequest]:
        return self._read(lambda: self._leaves.fetch_approved_annual_leaves(employee_id=int(employee_id), year=year))

    def check_request(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
    ) -> LeaveDecision:
        today = self._clock()
        history: Sequence[LeaveRequest] = []
        if leave_type == LeaveType.ANNUAL:
            history = self._approved_annual(employee_id, today.year)
        return self._validator.evaluate(
            history,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            today=today,
        )

    def submit_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        reason = require_non_empty(reason, "reason")
        self._require_active_employee(employee_id)

        decision = self.check_request(
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
        )
        if decision.error is not None:
            log.info("leave request rejected for employee %s: %s", employee_id, decision.error)
            raise decision.error

        return self._leaves.insert_leave_request(
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )

    def balance(self, *, employee_id: int) -> LeaveBalance:
        year = self._clock().year
        history = self._approved_annual(employee_id, year)
        used = self._validator.used_days(history, year=year)
        return LeaveBalance(
            employee_id=int(employee_id),
            year=year,
            allowance=self._validator.annual_allowance,
            used_days=used,
            remaining_days=self._validator.annual_allowance - used,
        )

    def approve_leave(self, *, manager_id: int, request_id: int, manager_note: str = "") -> None:
        req = self._read(lambda: self._leaves.get_leave(request_id=int(request_id)))
        if not req:
            raise ValidationError("Leave request does not exist")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Leave request was already resolved")

        # Other Annual requests may have been approved since this one was filed.
        if req.leave_type == LeaveType.ANNUAL:
            decision = self.check_request(
                employee_id=req.employee_id,
                leave_type=req.leave_type,
                start_date=req.start_date,
                end_date=req.end_date,
            )
            if decision.error is not None:
                raise decision.error

        ok = self._leaves.decide_leave(
            request_id=int(request_id),
            status=RequestStatus.APPROVED,
            decided_by=int(manager_id),
            manager_note=(manager_note or "").strip() or None,
        )
        if not ok:
            raise ValidationError("Approving the leave request failed")

    def reject_leave(self, *, manager_id: int, request_id: int, manager_note: str = "") -> None:
        ok = self._leaves.decide_leave(
            request_id=int(request_id),
            status=RequestStatus.REJECTED,
            decided_by=int(manager_id),
            manager_note=(manager_note or "").strip() or None,
        )
        if not ok:
            raise ValidationError("Rejecting the leave request failed")

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[LeaveRequest]:
        return self._read(lambda: self._leaves.list_leave_requests(status=status, employee_id=employee_id, limit=limit))
