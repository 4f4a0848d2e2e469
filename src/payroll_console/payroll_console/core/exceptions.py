from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateRange(ValidationError):
    """End date lies before the start date."""


class InsufficientBalance(ValidationError):
    """Requested annual leave exceeds the remaining balance."""

    def __init__(self, remaining_balance: int, requested_days: int):
        self.remaining_balance = remaining_balance
        self.requested_days = requested_days
        super().__init__(f"remaining balance: {remaining_balance} days, requested: {requested_days} days")


class MissingRequiredField(ValidationError):
    """A required input is absent or out of range."""

    def __init__(self, field_name: str, detail: str = "is required"):
        self.field_name = field_name
        super().__init__(f"{field_name} {detail}")


class MissingSalaryError(MissingRequiredField):
    """Employee has no basic salary, so no payroll line can be produced."""

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__("basic_salary", f"is missing for employee {employee_id}")


class TransientIOError(DomainError):
    """Backend unreachable or query failed; nothing was saved."""


class DataIntegrityError(DomainError):
    """Stored data contradicts what the operation expects."""


class BatchNotFound(DataIntegrityError):
    def __init__(self, batch_id: int):
        self.batch_id = batch_id
        super().__init__(f"payroll batch {batch_id} not found")


class BatchFinalizedError(DataIntegrityError):
    def __init__(self, batch_id: int):
        self.batch_id = batch_id
        super().__init__(f"payroll batch {batch_id} is finalized and cannot change")


class ConcurrentUpdateError(DataIntegrityError):
    """Optimistic version check failed: someone else updated the row first."""


class MalformedRowError(DataIntegrityError):
    """A row from the store failed schema validation."""


class OperationCancelled(DomainError):
    """The triggering context went away before the operation finished."""
