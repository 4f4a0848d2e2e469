from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, Sequence

from ..core.enums import BatchStatus
from ..core.exceptions import BatchFinalizedError
from .model import ZERO, PayrollBatch, PayrollRecord
from .repository import PayrollRepository


@dataclass(frozen=True)
class BatchTotals:
    total_amount: Decimal
    employee_count: int


def summarize(records: Iterable[PayrollRecord]) -> BatchTotals:
    total = ZERO
    count = 0
    for r in records:
        total += r.net_salary
        count += 1
    return BatchTotals(total_amount=total, employee_count=count)


class BatchAggregator:
    """Replace a batch's lines and keep its totals equal to the sum of their nets."""

    def __init__(self, payroll: PayrollRepository):
        self._payroll = payroll

    def persist(self, batch: PayrollBatch, records: Sequence[PayrollRecord]) -> PayrollBatch:
        if batch.status == BatchStatus.FINALIZED:
            raise BatchFinalizedError(batch.batch_id)

        stamped = [replace(r, batch_id=batch.batch_id) for r in records]
        # The batch ends up holding exactly these lines, so their sum is the batch total.
        totals = summarize(stamped)
        self._payroll.replace_batch_lines(
            batch_id=batch.batch_id,
            records=stamped,
            total_amount=totals.total_amount,
            employee_count=totals.employee_count,
            expected_version=batch.version,
        )

        return replace(
            batch,
            total_amount=totals.total_amount,
            employee_count=totals.employee_count,
            version=batch.version + 1,
        )
