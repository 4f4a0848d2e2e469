"""Row schemas for data read from MySQL.

Rows are validated here before they become domain objects, so a NULL or
garbage value fails at the repository edge instead of inside payroll
arithmetic.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import BatchStatus, EmployeeStatus, LeaveType, LoanStatus, PaymentStatus, RequestStatus
from ..employees.model import Employee
from ..integrity.model import IntegrityScore
from ..leaves.model import LeaveRequest
from ..loans.model import Loan
from ..payroll.model import PayrollBatch, PayrollInput, PayrollRecord


class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class EmployeeRow(_Row):
    employee_id: int
    full_name: str = Field(..., min_length=1)
    basic_salary: Optional[Decimal] = Field(None, ge=0)
    hire_date: Optional[date] = None
    status: EmployeeStatus
    dept_id: Optional[int] = None
    tax_id: Optional[str] = None
    bank_account: Optional[str] = None

    def to_model(self) -> Employee:
        return Employee(**self.model_dump())


class LoanRow(_Row):
    loan_id: int
    employee_id: int
    total_amount: Decimal = Field(..., ge=0)
    monthly_installment: Decimal = Field(..., ge=0)
    remaining_amount: Decimal = Field(..., ge=0)
    start_date: date
    status: LoanStatus
    reason: Optional[str] = None

    def to_model(self) -> Loan:
        return Loan(**self.model_dump())


class InstallmentSumRow(_Row):
    employee_id: int
    installment_sum: Decimal = Field(..., ge=0)


class IntegrityScoreRow(_Row):
    employee_id: int
    score: Decimal = Field(..., ge=0, le=100)

    def to_model(self) -> IntegrityScore:
        return IntegrityScore(**self.model_dump())


class PayrollInputRow(_Row):
    employee_id: int
    period_label: str = Field(..., min_length=1)
    overtime_hours: Decimal = Field(Decimal("0"), ge=0)
    allowances: Decimal = Field(Decimal("0"), ge=0)
    behavioral_deductions: Decimal = Field(Decimal("0"), ge=0)

    def to_model(self) -> PayrollInput:
        return PayrollInput(**self.model_dump())


class PayrollBatchRow(_Row):
    batch_id: int
    name: str = Field(..., min_length=1)
    status: BatchStatus
    total_amount: Decimal
    employee_count: int = Field(..., ge=0)
    created_at: datetime
    version: int = Field(0, ge=0)
    finalized_at: Optional[datetime] = None

    def to_model(self) -> PayrollBatch:
        return PayrollBatch(**self.model_dump())


class PayrollRecordRow(_Row):
    record_id: int
    batch_id: int
    employee_id: int
    basic_salary: Decimal = Field(..., ge=0)
    overtime_hours: Decimal = Field(..., ge=0)
    overtime_amount: Decimal = Field(..., ge=0)
    total_allowances: Decimal = Field(..., ge=0)
    behavioral_deductions: Decimal = Field(..., ge=0)
    loan_deductions: Decimal = Field(..., ge=0)
    total_deductions: Decimal = Field(..., ge=0)
    gross_salary: Decimal
    # Negative nets are kept as-is and flagged, not rejected.
    net_salary: Decimal
    payment_status: PaymentStatus
    integrity_score: Optional[Decimal] = Field(None, ge=0, le=100)
    tax_id: Optional[str] = None
    bank_account: Optional[str] = None

    def to_model(self) -> PayrollRecord:
        return PayrollRecord(**self.model_dump())


class LeaveRequestRow(_Row):
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    manager_note: Optional[str] = None

    def to_model(self) -> LeaveRequest:
        return LeaveRequest(**self.model_dump())
