from __future__ import annotations

from datetime import date

import pytest

from payroll_console.core.enums import EmployeeStatus, LeaveType, RequestStatus
from payroll_console.core.exceptions import InsufficientBalance, InvalidDateRange, MissingRequiredField, ValidationError
from payroll_console.leaves.service import LeaveService
from payroll_console.leaves.validator import LeaveBalanceValidator


@pytest.fixture
def service(leaves_repo, employees_repo, fixed_today):
    return LeaveService(leaves_repo, employees_repo, clock=lambda: fixed_today, retry_backoff=0)


def test_submit_annual_leave_within_balance(service, leaves_repo):
    rid = service.submit_leave(
        employee_id=1,
        leave_type=LeaveType.ANNUAL,
        start_date=date(2024, 7, 1),
        end_date=date(2024, 7, 5),
        reason="Family trip",
    )

    saved = leaves_repo.get_leave(request_id=rid)
    assert saved.status == RequestStatus.PENDING
    assert saved.reason == "Family trip"


def test_submit_over_balance_is_rejected(service, leaves_repo, make_leave):
    leaves_repo.leaves[1] = make_leave(1, 1, date(2024, 1, 1), date(2024, 1, 21))

    with pytest.raises(InsufficientBalance) as exc:
        service.submit_leave(
            employee_id=1,
            leave_type=LeaveType.ANNUAL,
            start_date=date(2024, 7, 1),
            end_date=date(2024, 7, 1),
            reason="One more day",
        )
    assert exc.value.remaining_balance == 0
    assert len(leaves_repo.leaves) == 1


def test_submit_sick_leave_ignores_balance(service, leaves_repo, make_leave):
    leaves_repo.leaves[1] = make_leave(1, 1, date(2024, 1, 1), date(2024, 1, 21))

    rid = service.submit_leave(
        employee_id=1,
        leave_type=LeaveType.SICK,
        start_date=date(2024, 7, 1),
        end_date=date(2024, 7, 10),
        reason="Flu",
    )
    assert leaves_repo.get_leave(request_id=rid).leave_type == LeaveType.SICK


def test_submit_rejects_reversed_dates(service):
    with pytest.raises(InvalidDateRange):
        service.submit_leave(
            employee_id=1,
            leave_type=LeaveType.ANNUAL,
            start_date=date(2024, 7, 5),
            end_date=date(2024, 7, 1),
            reason="x",
        )


def test_submit_requires_reason(service):
    with pytest.raises(MissingRequiredField, match="reason"):
        service.submit_leave(
            employee_id=1,
            leave_type=LeaveType.ANNUAL,
            start_date=date(2024, 7, 1),
            end_date=date(2024, 7, 1),
            reason="  ",
        )


def test_submit_for_unknown_or_inactive_employee(leaves_repo, in_memory_employees, make_employee, fixed_today):
    employees = in_memory_employees([make_employee(2, status=EmployeeStatus.INACTIVE)])
    service = LeaveService(leaves_repo, employees, clock=lambda: fixed_today)

    with pytest.raises(ValidationError, match="does not exist"):
        service.submit_leave(
            employee_id=1, leave_type=LeaveType.SICK, start_date=date(2024, 7, 1), end_date=date(2024, 7, 1), reason="x"
        )
    with pytest.raises(ValidationError, match="not active"):
        service.submit_leave(
            employee_id=2, leave_type=LeaveType.SICK, start_date=date(2024, 7, 1), end_date=date(2024, 7, 1), reason="x"
        )


def test_balance_reports_used_and_remaining(service, leaves_repo, make_leave):
    leaves_repo.leaves[1] = make_leave(1, 1, date(2024, 3, 4), date(2024, 3, 8))
    leaves_repo.leaves[2] = make_leave(2, 1, date(2023, 3, 4), date(2023, 3, 8))

    balance = service.balance(employee_id=1)

    assert balance.year == 2024
    assert balance.allowance == 21
    assert balance.used_days == 5
    assert balance.remaining_days == 16


def test_custom_allowance_flows_through(leaves_repo, employees_repo, fixed_today):
    service = LeaveService(leaves_repo, employees_repo, validator=LeaveBalanceValidator(30), clock=lambda: fixed_today)
    assert service.balance(employee_id=1).remaining_days == 30


def test_approve_rechecks_balance(service, leaves_repo, make_leave):
    first = service.submit_leave(
        employee_id=1, leave_type=LeaveType.ANNUAL, start_date=date(2024, 7, 1), end_date=date(2024, 7, 15), reason="a"
    )
    second = service.submit_leave(
        employee_id=1, leave_type=LeaveType.ANNUAL, start_date=date(2024, 8, 1), end_date=date(2024, 8, 10), reason="b"
    )

    service.approve_leave(manager_id=9, request_id=first)
    assert leaves_repo.get_leave(request_id=first).status == RequestStatus.APPROVED

    # 15 used, 6 left, 10 requested
    with pytest.raises(InsufficientBalance):
        service.approve_leave(manager_id=9, request_id=second)
    assert leaves_repo.get_leave(request_id=second).status == RequestStatus.PENDING


def test_approve_twice_fails(service):
    rid = service.submit_leave(
        employee_id=1, leave_type=LeaveType.SICK, start_date=date(2024, 7, 1), end_date=date(2024, 7, 1), reason="a"
    )
    service.approve_leave(manager_id=9, request_id=rid, manager_note="get well")

    with pytest.raises(ValidationError, match="already resolved"):
        service.approve_leave(manager_id=9, request_id=rid)


def test_approve_unknown_request(service):
    with pytest.raises(ValidationError, match="does not exist"):
        service.approve_leave(manager_id=9, request_id=404)


def test_reject_records_decision(service, leaves_repo):
    rid = service.submit_leave(
        employee_id=1, leave_type=LeaveType.UNPAID, start_date=date(2024, 7, 1), end_date=date(2024, 7, 3), reason="a"
    )
    service.reject_leave(manager_id=9, request_id=rid, manager_note=" busy month ")

    saved = leaves_repo.get_leave(request_id=rid)
    assert saved.status == RequestStatus.REJECTED
    assert saved.decided_by == 9
    assert saved.manager_note == "busy month"

    with pytest.raises(ValidationError):
        service.reject_leave(manager_id=9, request_id=rid)


def test_list_requests_filters(service):
    service.submit_leave(
        employee_id=1, leave_type=LeaveType.SICK, start_date=date(2024, 7, 1), end_date=date(2024, 7, 1), reason="a"
    )
    assert len(service.list_requests(employee_id=1)) == 1
    assert service.list_requests(status=RequestStatus.APPROVED) == []
