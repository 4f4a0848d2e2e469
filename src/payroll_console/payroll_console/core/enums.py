from __future__ import annotations

from enum import Enum


class EmployeeStatus(str, Enum):
    """Employees are never hard-deleted; HR flips the status instead."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class BatchStatus(str, Enum):
    """Payroll batch lifecycle: DRAFT -> PROCESSING -> FINALIZED."""

    DRAFT = "DRAFT"
    PROCESSING = "PROCESSING"
    FINALIZED = "FINALIZED"

    @property
    def is_open(self) -> bool:
        return self in (BatchStatus.DRAFT, BatchStatus.PROCESSING)


class PaymentStatus(str, Enum):
    READY = "READY"
    FLAGGED = "FLAGGED"
    PAID = "PAID"


class LoanStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


class LeaveType(str, Enum):
    ANNUAL = "Annual"
    SICK = "Sick"
    UNPAID = "Unpaid"
    EMERGENCY = "Emergency"


class RequestStatus(str, Enum):
    """Approval flow status for leave requests."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
