from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from payroll_console.core.constants import DEFAULT_INTEGRITY_SCORE
from payroll_console.core.enums import BatchStatus, EmployeeStatus, LeaveType, LoanStatus, PaymentStatus, RequestStatus
from payroll_console.core.exceptions import BatchFinalizedError, BatchNotFound, ConcurrentUpdateError
from payroll_console.employees.model import Employee
from payroll_console.leaves.model import LeaveRequest
from payroll_console.loans.model import Loan
from payroll_console.payroll.model import PayrollBatch, PayrollInput, PayrollRecord
from payroll_console.payroll.policy import PayrollPolicy
from payroll_console.payroll.service import PayrollService


class InMemoryEmployees:
    def __init__(self, employees=()):
        self.by_id: dict[int, Employee] = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.by_id.get(int(employee_id))

    def list_employees(self, *, active_only: bool = True):
        return [e for e in self.by_id.values() if e.is_active or not active_only]


class InMemoryLoans:
    def __init__(self, loans=()):
        self.loans: list[Loan] = list(loans)

    def fetch_active_installments(self) -> dict[int, Decimal]:
        out: dict[int, Decimal] = {}
        for loan in self.loans:
            if loan.status == LoanStatus.ACTIVE:
                out[loan.employee_id] = out.get(loan.employee_id, Decimal("0")) + loan.monthly_installment
        return out

    def list_for_employee(self, employee_id: int):
        return [loan for loan in self.loans if loan.employee_id == employee_id]


class InMemoryIntegrity:
    def __init__(self, scores=None):
        self.scores: dict[int, Decimal] = {k: Decimal(str(v)) for k, v in (scores or {}).items()}

    def fetch_integrity_score(self, employee_id: int) -> Decimal:
        return self.scores.get(int(employee_id), DEFAULT_INTEGRITY_SCORE)

    def fetch_all_scores(self) -> dict[int, Decimal]:
        return dict(self.scores)


class InMemoryPayroll:
    """Mirrors the MySQL repository contract, including the single-open-batch rule."""

    def __init__(self):
        self.batches: dict[int, PayrollBatch] = {}
        self.records: dict[tuple[int, int], PayrollRecord] = {}
        self.inputs: dict[tuple[int, str], PayrollInput] = {}
        self.upsert_calls = 0
        self._next_batch = 1
        self._next_record = 1

    def add_input(self, employee_id: int, period_label: str, **amounts) -> None:
        values = {k: Decimal(str(v)) for k, v in amounts.items()}
        self.inputs[(employee_id, period_label)] = PayrollInput(employee_id=employee_id, period_label=period_label, **values)

    def get_open_batch(self) -> Optional[PayrollBatch]:
        for b in self.batches.values():
            if b.status.is_open:
                return b
        return None

    def fetch_or_create_open_batch(self, period_label: str) -> PayrollBatch:
        existing = self.get_open_batch()
        if existing:
            return existing
        batch = PayrollBatch(
            batch_id=self._next_batch,
            name=period_label,
            status=BatchStatus.DRAFT,
            total_amount=Decimal("0"),
            employee_count=0,
            created_at=datetime(2024, 6, 10, 9, 0),
        )
        self._next_batch += 1
        self.batches[batch.batch_id] = batch
        return batch

    def get_batch(self, batch_id: int) -> Optional[PayrollBatch]:
        return self.batches.get(int(batch_id))

    def list_batches(self, *, limit: int = 200):
        return sorted(self.batches.values(), key=lambda b: b.batch_id, reverse=True)[:limit]

    def mark_processing(self, *, batch_id: int, expected_version: int) -> bool:
        b = self.batches.get(batch_id)
        if not b or b.version != expected_version or b.status != BatchStatus.DRAFT:
            return False
        self.batches[batch_id] = replace(b, status=BatchStatus.PROCESSING, version=b.version + 1)
        return True

    def update_batch_totals(self, *, batch_id: int, total_amount, employee_count: int, expected_version: int) -> bool:
        b = self.batches.get(batch_id)
        if not b or b.version != expected_version or b.status == BatchStatus.FINALIZED:
            return False
        self.batches[batch_id] = replace(b, total_amount=total_amount, employee_count=employee_count, version=b.version + 1)
        return True

    def finalize_batch(self, *, batch_id: int, expected_version: int) -> bool:
        b = self.batches.get(batch_id)
        if not b or b.version != expected_version or b.status == BatchStatus.FINALIZED:
            return False
        self.batches[batch_id] = replace(
            b,
            status=BatchStatus.FINALIZED,
            version=b.version + 1,
            finalized_at=datetime(2024, 6, 30, 17, 0),
        )
        for key, r in list(self.records.items()):
            if key[0] == batch_id and r.payment_status == PaymentStatus.READY:
                self.records[key] = replace(r, payment_status=PaymentStatus.PAID)
        return True

    def fetch_payroll_inputs(self, period_label: str) -> dict[int, PayrollInput]:
        return {emp: i for (emp, label), i in self.inputs.items() if label == period_label}

    def fetch_payroll_records(self, batch_id: int):
        return [r for (b, _), r in sorted(self.records.items()) if b == batch_id]

    def _check_writable(self, batch_id: int) -> None:
        b = self.batches.get(batch_id)
        if not b:
            raise BatchNotFound(batch_id)
        if b.status == BatchStatus.FINALIZED:
            raise BatchFinalizedError(batch_id)

    def _write(self, batch_id: int, records) -> None:
        self.upsert_calls += 1
        keep = {r.employee_id for r in records}
        for key in [k for k in self.records if k[0] == batch_id and k[1] not in keep]:
            del self.records[key]
        for r in records:
            key = (batch_id, r.employee_id)
            existing = self.records.get(key)
            record_id = existing.record_id if existing else self._next_record
            if not existing:
                self._next_record += 1
            self.records[key] = replace(r, batch_id=batch_id, record_id=record_id)

    def upsert_payroll_records(self, *, batch_id: int, records) -> None:
        self._check_writable(batch_id)
        self._write(batch_id, records)

    def replace_batch_lines(self, *, batch_id: int, records, total_amount, employee_count: int, expected_version: int) -> None:
        self._check_writable(batch_id)
        b = self.batches[batch_id]
        # checked before writing so a conflict leaves lines and totals untouched, as the rollback does
        if b.version != expected_version:
            raise ConcurrentUpdateError(f"payroll batch {batch_id} was modified concurrently; rerun the calculation")
        self._write(batch_id, records)
        self.batches[batch_id] = replace(b, total_amount=total_amount, employee_count=employee_count, version=b.version + 1)


class InMemoryLeaves:
    def __init__(self, leaves=()):
        self.leaves: dict[int, LeaveRequest] = {r.request_id: r for r in leaves}

    def fetch_approved_annual_leaves(self, *, employee_id: int, year: int):
        return [
            r
            for r in self.leaves.values()
            if r.employee_id == employee_id
            and r.leave_type == LeaveType.ANNUAL
            and r.status == RequestStatus.APPROVED
            and r.start_date.year == year
        ]

    def insert_leave_request(self, *, employee_id, leave_type, start_date, end_date, reason) -> int:
        rid = max(self.leaves, default=0) + 1
        self.leaves[rid] = LeaveRequest(
            request_id=rid,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=datetime(2024, 6, 10, 10, 0),
        )
        return rid

    def get_leave(self, *, request_id: int):
        return self.leaves.get(int(request_id))

    def list_leave_requests(self, *, status=None, employee_id=None, limit=200):
        out = [
            r
            for r in self.leaves.values()
            if (status is None or r.status == status) and (employee_id is None or r.employee_id == employee_id)
        ]
        return out[:limit]

    def decide_leave(self, *, request_id, status, decided_by, manager_note=None) -> bool:
        req = self.leaves.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.leaves[int(request_id)] = replace(
            req,
            status=status,
            decided_by=decided_by,
            decided_at=datetime(2024, 6, 11, 9, 0),
            manager_note=manager_note,
        )
        return True


def _employee(employee_id: int = 1, basic_salary="6000", *, status=EmployeeStatus.ACTIVE, full_name=None) -> Employee:
    return Employee(
        employee_id=employee_id,
        full_name=full_name or f"Employee {employee_id}",
        basic_salary=Decimal(basic_salary) if basic_salary is not None else None,
        hire_date=date(2020, 1, 1),
        status=status,
        tax_id=f"TAX-{employee_id}",
        bank_account=f"EG0200{employee_id:04d}",
    )


def _loan(employee_id: int, installment, *, loan_id: int = 1, status=LoanStatus.ACTIVE) -> Loan:
    return Loan(
        loan_id=loan_id,
        employee_id=employee_id,
        total_amount=Decimal(installment) * 10,
        monthly_installment=Decimal(installment),
        remaining_amount=Decimal(installment) * 10,
        start_date=date(2024, 1, 1),
        status=status,
    )


def _leave(request_id, employee_id, start, end, *, leave_type=LeaveType.ANNUAL, status=RequestStatus.APPROVED) -> LeaveRequest:
    return LeaveRequest(
        request_id=request_id,
        employee_id=employee_id,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        reason="x",
        status=status,
        created_at=datetime(start.year, start.month, start.day),
    )


@pytest.fixture
def fixed_today() -> date:
    return date(2024, 6, 10)


@pytest.fixture
def make_employee():
    return _employee


@pytest.fixture
def make_loan():
    return _loan


@pytest.fixture
def make_leave():
    return _leave


@pytest.fixture
def policy() -> PayrollPolicy:
    return PayrollPolicy()


@pytest.fixture
def payroll_repo() -> InMemoryPayroll:
    return InMemoryPayroll()


@pytest.fixture
def leaves_repo() -> InMemoryLeaves:
    return InMemoryLeaves()


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees([_employee(1)])


@pytest.fixture
def build_payroll_service(payroll_repo, policy, fixed_today):
    """Factory: PayrollService over in-memory repositories sharing payroll_repo."""

    def build(employees=(), loans=(), scores=None, **kwargs):
        kwargs.setdefault("policy", policy)
        kwargs.setdefault("clock", lambda: fixed_today)
        kwargs.setdefault("retry_backoff", 0)
        return PayrollService(
            InMemoryEmployees(employees),
            InMemoryLoans(loans),
            InMemoryIntegrity(scores),
            payroll_repo,
            **kwargs,
        )

    return build


@pytest.fixture
def in_memory_employees():
    return InMemoryEmployees
