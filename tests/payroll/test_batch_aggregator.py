from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from payroll_console.core.enums import BatchStatus
from payroll_console.core.exceptions import BatchFinalizedError, ConcurrentUpdateError
from payroll_console.payroll.aggregator import BatchAggregator, summarize
from payroll_console.payroll.calculator.base import LineInputs
from payroll_console.payroll.calculator.standard_calculator import StandardPayrollCalculator


def _record(employee_id: int, salary: str, loans: str = "0"):
    return (
        StandardPayrollCalculator()
        .calculate(LineInputs(employee_id=employee_id, basic_salary=Decimal(salary), loan_installments=Decimal(loans)))
        .line
    )


def test_summarize_sums_net_and_counts_lines():
    totals = summarize([_record(1, "3000"), _record(2, "4000", loans="500")])
    assert totals.total_amount == Decimal("6500.00")
    assert totals.employee_count == 2


def test_summarize_empty():
    totals = summarize([])
    assert totals.total_amount == Decimal("0")
    assert totals.employee_count == 0


def test_persist_writes_lines_and_totals(payroll_repo):
    batch = payroll_repo.fetch_or_create_open_batch("2024-06")
    saved = BatchAggregator(payroll_repo).persist(batch, [_record(1, "3000"), _record(2, "4000")])

    assert saved.total_amount == Decimal("7000.00")
    assert saved.employee_count == 2
    assert saved.version == batch.version + 1
    stored = payroll_repo.get_batch(batch.batch_id)
    assert stored.total_amount == Decimal("7000.00")
    assert all(r.batch_id == batch.batch_id for r in payroll_repo.fetch_payroll_records(batch.batch_id))


def test_persist_twice_keeps_one_line_per_employee(payroll_repo):
    aggregator = BatchAggregator(payroll_repo)
    batch = payroll_repo.fetch_or_create_open_batch("2024-06")

    batch = aggregator.persist(batch, [_record(1, "3000"), _record(2, "4000")])
    batch = aggregator.persist(batch, [_record(1, "3500"), _record(2, "4000")])

    records = payroll_repo.fetch_payroll_records(batch.batch_id)
    assert [r.employee_id for r in records] == [1, 2]
    assert batch.total_amount == Decimal("7500.00")
    assert batch.employee_count == 2


def test_rerun_drops_lines_for_employees_no_longer_calculated(payroll_repo):
    aggregator = BatchAggregator(payroll_repo)
    batch = payroll_repo.fetch_or_create_open_batch("2024-06")

    batch = aggregator.persist(batch, [_record(1, "3000"), _record(2, "4000")])
    batch = aggregator.persist(batch, [_record(1, "3000")])

    assert [r.employee_id for r in payroll_repo.fetch_payroll_records(batch.batch_id)] == [1]
    assert batch.employee_count == 1
    assert batch.total_amount == Decimal("3000.00")
    assert payroll_repo.get_batch(batch.batch_id).total_amount == Decimal("3000.00")


def test_rerun_with_no_lines_empties_batch(payroll_repo):
    aggregator = BatchAggregator(payroll_repo)
    batch = payroll_repo.fetch_or_create_open_batch("2024-06")

    batch = aggregator.persist(batch, [_record(1, "3000")])
    batch = aggregator.persist(batch, [])

    assert payroll_repo.fetch_payroll_records(batch.batch_id) == []
    assert batch.total_amount == Decimal("0")
    assert batch.employee_count == 0


def test_persist_rejects_finalized_batch(payroll_repo):
    batch = payroll_repo.fetch_or_create_open_batch("2024-06")
    finalized = replace(batch, status=BatchStatus.FINALIZED)

    with pytest.raises(BatchFinalizedError):
        BatchAggregator(payroll_repo).persist(finalized, [_record(1, "3000")])
    assert payroll_repo.upsert_calls == 0


def test_persist_with_stale_version_fails(payroll_repo):
    batch = payroll_repo.fetch_or_create_open_batch("2024-06")
    aggregator = BatchAggregator(payroll_repo)
    aggregator.persist(batch, [_record(1, "3000")])

    with pytest.raises(ConcurrentUpdateError):
        aggregator.persist(batch, [_record(1, "3100")])

    # the losing write keeps neither its lines nor its totals
    stored = payroll_repo.fetch_payroll_records(batch.batch_id)
    assert [r.net_salary for r in stored] == [Decimal("3000.00")]
    assert payroll_repo.get_batch(batch.batch_id).total_amount == Decimal("3000.00")
