from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import PayrollBatch, PayrollInput, PayrollRecord


class PayrollRepository(Protocol):
    # Batches
    def fetch_or_create_open_batch(self, period_label: str) -> PayrollBatch:
        """Return the single open (DRAFT/PROCESSING) batch, creating it if none exists.

        Implementations must make creation safe under concurrent callers.
        """

        raise NotImplementedError

    def get_open_batch(self) -> Optional[PayrollBatch]:
        raise NotImplementedError

    def get_batch(self, batch_id: int) -> Optional[PayrollBatch]:
        raise NotImplementedError

    def list_batches(self, *, limit: int = 200) -> Sequence[PayrollBatch]:
        raise NotImplementedError

    def mark_processing(self, *, batch_id: int, expected_version: int) -> bool:
        raise NotImplementedError

    def update_batch_totals(
        self,
        *,
        batch_id: int,
        total_amount: Decimal,
        employee_count: int,
        expected_version: int,
    ) -> bool:
        raise NotImplementedError

    def finalize_batch(self, *, batch_id: int, expected_version: int) -> bool:
        raise NotImplementedError

    # Inputs and records
    def fetch_payroll_inputs(self, period_label: str) -> dict[int, PayrollInput]:
        raise NotImplementedError

    def fetch_payroll_records(self, batch_id: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def upsert_payroll_records(self, *, batch_id: int, records: Sequence[PayrollRecord]) -> None:
        """Insert or overwrite lines keyed on (batch_id, employee_id).

        Lines already stored for employees not in `records` are removed.
        """

        raise NotImplementedError

    def replace_batch_lines(
        self,
        *,
        batch_id: int,
        records: Sequence[PayrollRecord],
        total_amount: Decimal,
        employee_count: int,
        expected_version: int,
    ) -> None:
        """Upsert + prune the lines and write the totals in one transaction.

        Raises ConcurrentUpdateError when the version check fails; nothing is kept then.
        """

        raise NotImplementedError
