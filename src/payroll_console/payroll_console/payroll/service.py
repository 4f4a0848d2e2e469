from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from ..common.cancellation import NEVER_CANCELLED, CancellationToken
from ..common.datetime_utils import today_local
from ..common.retry import retry_read
from ..core.constants import (
    DEFAULT_INTEGRITY_SCORE,
    DEFAULT_LIST_LIMIT,
    DEFAULT_READ_RETRY_ATTEMPTS,
    DEFAULT_READ_RETRY_BACKOFF_SECONDS,
)
from ..core.enums import BatchStatus, LoanStatus, PaymentStatus
from ..core.exceptions import BatchFinalizedError, BatchNotFound, ConcurrentUpdateError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..integrity.factory import IntegrityStrategyFactory, apply_integrity_rule
from ..integrity.repository import IntegrityRepository
from ..loans.model import Loan
from ..loans.repository import LoanRepository
from .aggregator import BatchAggregator
from .calculator.base import LineInputs, LineResult, PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import ZERO, PayrollBatch, PayrollInput, PayrollRecord
from .policy import PayrollPolicy
from .repository import PayrollRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedEmployee:
    employee_id: int
    full_name: str
    reason: str


@dataclass(frozen=True)
class CalculationReport:
    batch: PayrollBatch
    records: list[PayrollRecord]
    skipped: list[SkippedEmployee] = field(default_factory=list)
    requested_label: Optional[str] = None

    @property
    def flagged(self) -> list[PayrollRecord]:
        return [r for r in self.records if r.payment_status == PaymentStatus.FLAGGED]


@dataclass(frozen=True)
class EmployeePreview:
    employee: Employee
    result: LineResult
    loans: list[Loan]
    integrity_score: Decimal
    period_label: str = ""


class PayrollService:
    """Use case: calculate, inspect and finalize payroll batches."""

    def __init__(
        self,
        employees: EmployeeRepository,
        loans: LoanRepository,
        integrity: IntegrityRepository,
        payroll: PayrollRepository,
        *,
        policy: Optional[PayrollPolicy] = None,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], date] = today_local,
        retry_attempts: int = DEFAULT_READ_RETRY_ATTEMPTS,
        retry_backoff: float = DEFAULT_READ_RETRY_BACKOFF_SECONDS,
    ):
        self._employees = employees
        self._loans = loans
        self._integrity = integrity
        self._payroll = payroll
        self._policy = policy or PayrollPolicy()
        self._calculator = calculator or StandardPayrollCalculator(self._policy)
        self._integrity_factory = IntegrityStrategyFactory(self._policy)
        self._aggregator = BatchAggregator(payroll)
        self._clock = clock
        self._retry_attempts = retry_attempts
        self._retry_backoff = retry_backoff

    def _read(self, fn):
        return retry_read(fn, attempts=self._retry_attempts, backoff=self._retry_backoff)

    def build_line(
        self,
        employee: Employee,
        *,
        baseline: Optional[PayrollInput],
        loan_installments: Decimal,
        integrity_score: Decimal,
    ) -> LineResult:
        """Pure step: baseline -> calculator -> integrity rule."""
        inputs = LineInputs(
            employee_id=employee.employee_id,
            basic_salary=employee.basic_salary,
            overtime_hours=baseline.overtime_hours if baseline else ZERO,
            allowances=baseline.allowances if baseline else ZERO,
            behavioral_deductions=baseline.behavioral_deductions if baseline else ZERO,
            loan_installments=loan_installments,
            tax_id=employee.tax_id,
            bank_account=employee.bank_account,
        )
        result = self._calculator.calculate(inputs)
        if not result.ok:
            return result
        line = apply_integrity_rule(result.line, integrity_score, factory=self._integrity_factory)
        return LineResult(line=line)

    def run_calculation(
        self,
        *,
        period_label: Optional[str] = None,
        cancel: CancellationToken = NEVER_CANCELLED,
    ) -> CalculationReport:
        label = (period_label or "").strip() or self._clock().isoformat()
        log.info("payroll calculation requested (period=%s)", label)

        employees = self._read(lambda: self._employees.list_employees(active_only=True))
        installments = self._read(self._loans.fetch_active_installments)
        scores = self._read(self._integrity.fetch_all_scores)
        cancel.raise_if_cancelled()

        batch = self._payroll.fetch_or_create_open_batch(label)
        if batch.name != label:
            log.warning(
                "payroll batch %s is already open for period %s; using its inputs instead of %s",
                batch.batch_id,
                batch.name,
                label,
            )
        baselines = self._read(lambda: self._payroll.fetch_payroll_inputs(batch.name))
        cancel.raise_if_cancelled()

        records: list[PayrollRecord] = []
        skipped: list[SkippedEmployee] = []
        for emp in employees:
            result = self.build_line(
                emp,
                baseline=baselines.get(emp.employee_id),
                loan_installments=installments.get(emp.employee_id, ZERO),
                integrity_score=scores.get(emp.employee_id, DEFAULT_INTEGRITY_SCORE),
            )
            if not result.ok:
                log.warning("skipping employee %s: %s", emp.employee_id, result.error)
                skipped.append(SkippedEmployee(emp.employee_id, emp.full_name, str(result.error)))
                continue
            if result.line.net_salary < 0:
                log.warning("employee %s has negative net salary %s; line flagged", emp.employee_id, result.line.net_salary)
            records.append(result.line)

        cancel.raise_if_cancelled()

        if batch.status == BatchStatus.DRAFT:
            if not self._payroll.mark_processing(batch_id=batch.batch_id, expected_version=batch.version):
                raise ConcurrentUpdateError(f"payroll batch {batch.batch_id} was modified concurrently; rerun the calculation")
            batch = replace(batch, status=BatchStatus.PROCESSING, version=batch.version + 1)

        batch = self._aggregator.persist(batch, records)
        log.info(
            "payroll batch %s calculated: %s lines, total %s, %s skipped",
            batch.batch_id,
            batch.employee_count,
            batch.total_amount,
            len(skipped),
        )
        return CalculationReport(
            batch=batch,
            records=[replace(r, batch_id=batch.batch_id) for r in records],
            skipped=skipped,
            requested_label=label,
        )

    def preview_employee(self, *, employee_id: int, period_label: Optional[str] = None) -> EmployeePreview:
        """Compute one employee's line without persisting anything."""
        employee = self._read(lambda: self._employees.get_by_id(int(employee_id)))
        if not employee:
            raise ValidationError("Employee does not exist")

        label = (period_label or "").strip()
        if not label:
            # Same inputs a calculation would use: the open batch's period, else today.
            open_batch = self._read(self._payroll.get_open_batch)
            label = open_batch.name if open_batch else self._clock().isoformat()
        loans = [loan for loan in self._read(lambda: self._loans.list_for_employee(employee.employee_id)) if loan.status == LoanStatus.ACTIVE]
        score = self._read(lambda: self._integrity.fetch_integrity_score(employee.employee_id))
        baselines = self._read(lambda: self._payroll.fetch_payroll_inputs(label))

        result = self.build_line(
            employee,
            baseline=baselines.get(employee.employee_id),
            loan_installments=sum((loan.monthly_installment for loan in loans), ZERO),
            integrity_score=score,
        )
        return EmployeePreview(employee=employee, result=result, loans=loans, integrity_score=score, period_label=label)

    def get_batch(self, batch_id: int) -> PayrollBatch:
        batch = self._read(lambda: self._payroll.get_batch(int(batch_id)))
        if not batch:
            raise BatchNotFound(int(batch_id))
        return batch

    def list_batches(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[PayrollBatch]:
        return self._read(lambda: self._payroll.list_batches(limit=limit))

    def list_records(self, batch_id: int) -> Sequence[PayrollRecord]:
        self.get_batch(batch_id)
        return self._read(lambda: self._payroll.fetch_payroll_records(int(batch_id)))

    def finalize_batch(self, *, batch_id: int, force: bool = False) -> PayrollBatch:
        """Close the batch for good; READY lines become PAID."""
        batch = self.get_batch(batch_id)
        if batch.status == BatchStatus.FINALIZED:
            raise BatchFinalizedError(batch.batch_id)

        records = self._read(lambda: self._payroll.fetch_payroll_records(batch.batch_id))
        if not records:
            raise ValidationError("Payroll batch has no lines; run the calculation first")

        flagged = [r for r in records if r.payment_status == PaymentStatus.FLAGGED]
        if flagged and not force:
            raise ValidationError(f"{len(flagged)} payroll line(s) are flagged for review")

        if not self._payroll.finalize_batch(batch_id=batch.batch_id, expected_version=batch.version):
            raise ConcurrentUpdateError(f"payroll batch {batch.batch_id} was modified concurrently; reload and retry")

        log.info("payroll batch %s finalized (%s lines, %s flagged)", batch.batch_id, len(records), len(flagged))
        return self.get_batch(batch.batch_id)
