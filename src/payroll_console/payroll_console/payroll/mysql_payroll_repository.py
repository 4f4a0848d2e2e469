from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import BatchStatus, PaymentStatus
from ..core.exceptions import BatchFinalizedError, BatchNotFound, ConcurrentUpdateError, DataIntegrityError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, parse_row
from ..database.row_schemas import PayrollBatchRow, PayrollInputRow, PayrollRecordRow
from .model import PayrollBatch, PayrollInput, PayrollRecord
from .repository import PayrollRepository

log = logging.getLogger(__name__)

_BATCH_COLUMNS = "batch_id, name, status, total_amount, employee_count, created_at, version, finalized_at"

_RECORD_COLUMNS = (
    "record_id, batch_id, employee_id, basic_salary, overtime_hours, overtime_amount, "
    "total_allowances, behavioral_deductions, loan_deductions, total_deductions, "
    "gross_salary, net_salary, payment_status, integrity_score, tax_id, bank_account"
)


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Batches --------
    def get_open_batch(self) -> Optional[PayrollBatch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BATCH_COLUMNS}
                FROM payroll_batches
                WHERE status IN (%s, %s)
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (BatchStatus.DRAFT.value, BatchStatus.PROCESSING.value),
            )
            row = fetchone(cur)
            return parse_row(PayrollBatchRow, row).to_model() if row else None

    def fetch_or_create_open_batch(self, period_label: str) -> PayrollBatch:
        existing = self.get_open_batch()
        if existing:
            return existing

        # uq_one_open_batch (on the generated open_slot column) lets only one
        # DRAFT/PROCESSING row exist, so a racing insert fails with ER_DUP_ENTRY.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payroll_batches(name, status, total_amount, employee_count, version)
                    VALUES(%s,%s,0,0,0)
                    """,
                    (period_label, BatchStatus.DRAFT.value),
                )
                batch_id = int(cur.lastrowid)
        except mysql.connector.errors.IntegrityError as e:
            if not is_duplicate_key(e):
                raise
            log.info("open payroll batch created concurrently, reusing it")
            existing = self.get_open_batch()
            if not existing:
                raise DataIntegrityError("open payroll batch vanished after a duplicate insert") from e
            return existing

        log.info("created payroll batch %s (%s)", batch_id, period_label)
        batch = self.get_batch(batch_id)
        if not batch:
            raise BatchNotFound(batch_id)
        return batch

    def get_batch(self, batch_id: int) -> Optional[PayrollBatch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_BATCH_COLUMNS} FROM payroll_batches WHERE batch_id=%s", (int(batch_id),))
            row = fetchone(cur)
            return parse_row(PayrollBatchRow, row).to_model() if row else None

    def list_batches(self, *, limit: int = 200) -> Sequence[PayrollBatch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_BATCH_COLUMNS} FROM payroll_batches ORDER BY created_at DESC LIMIT %s",
                (int(limit),),
            )
            return [parse_row(PayrollBatchRow, r).to_model() for r in fetchall(cur)]

    def mark_processing(self, *, batch_id: int, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_batches
                SET status=%s, version=version+1
                WHERE batch_id=%s AND version=%s AND status=%s
                """,
                (BatchStatus.PROCESSING.value, int(batch_id), int(expected_version), BatchStatus.DRAFT.value),
            )
            return cur.rowcount > 0

    def update_batch_totals(
        self,
        *,
        batch_id: int,
        total_amount: Decimal,
        employee_count: int,
        expected_version: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_batches
                SET total_amount=%s, employee_count=%s, version=version+1
                WHERE batch_id=%s AND version=%s AND status<>%s
                """,
                (
                    total_amount,
                    int(employee_count),
                    int(batch_id),
                    int(expected_version),
                    BatchStatus.FINALIZED.value,
                ),
            )
            return cur.rowcount > 0

    def finalize_batch(self, *, batch_id: int, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_batches
                SET status=%s, finalized_at=NOW(), version=version+1
                WHERE batch_id=%s AND version=%s AND status<>%s
                """,
                (BatchStatus.FINALIZED.value, int(batch_id), int(expected_version), BatchStatus.FINALIZED.value),
            )
            if cur.rowcount == 0:
                return False
            cur.execute(
                "UPDATE payroll_records SET payment_status=%s WHERE batch_id=%s AND payment_status=%s",
                (PaymentStatus.PAID.value, int(batch_id), PaymentStatus.READY.value),
            )
            return True

    # -------- Inputs and records --------
    def fetch_payroll_inputs(self, period_label: str) -> dict[int, PayrollInput]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, period_label, overtime_hours, allowances, behavioral_deductions
                FROM payroll_inputs
                WHERE period_label=%s
                """,
                (period_label,),
            )
            return {i.employee_id: i for i in (parse_row(PayrollInputRow, r).to_model() for r in fetchall(cur))}

    def fetch_payroll_records(self, batch_id: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM payroll_records WHERE batch_id=%s ORDER BY employee_id",
                (int(batch_id),),
            )
            return [parse_row(PayrollRecordRow, r).to_model() for r in fetchall(cur)]

    def upsert_payroll_records(self, *, batch_id: int, records: Sequence[PayrollRecord]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            _lock_open_batch(cur, batch_id)
            _write_records(cur, batch_id, records)

    def replace_batch_lines(
        self,
        *,
        batch_id: int,
        records: Sequence[PayrollRecord],
        total_amount: Decimal,
        employee_count: int,
        expected_version: int,
    ) -> None:
        # Lines and totals commit together; a lost version check rolls the lines back.
        with db_cursor(self._conn_factory) as (_, cur):
            _lock_open_batch(cur, batch_id)
            _write_records(cur, batch_id, records)
            cur.execute(
                """
                UPDATE payroll_batches
                SET total_amount=%s, employee_count=%s, version=version+1
                WHERE batch_id=%s AND version=%s AND status<>%s
                """,
                (
                    total_amount,
                    int(employee_count),
                    int(batch_id),
                    int(expected_version),
                    BatchStatus.FINALIZED.value,
                ),
            )
            if cur.rowcount == 0:
                log.warning("payroll batch %s changed during calculation (version %s)", batch_id, expected_version)
                raise ConcurrentUpdateError(f"payroll batch {batch_id} was modified concurrently; rerun the calculation")


def _lock_open_batch(cur, batch_id: int) -> None:
    cur.execute("SELECT status FROM payroll_batches WHERE batch_id=%s FOR UPDATE", (int(batch_id),))
    row = fetchone(cur)
    if not row:
        raise BatchNotFound(batch_id)
    if row["status"] == BatchStatus.FINALIZED.value:
        raise BatchFinalizedError(batch_id)


def _write_records(cur, batch_id: int, records: Sequence[PayrollRecord]) -> None:
    """Make the batch hold exactly `records`: upsert them and drop lines for anyone else."""
    if records:
        cur.executemany(
            """
            INSERT INTO payroll_records(
                batch_id, employee_id, basic_salary, overtime_hours, overtime_amount,
                total_allowances, behavioral_deductions, loan_deductions, total_deductions,
                gross_salary, net_salary, payment_status, integrity_score, tax_id, bank_account
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                basic_salary=VALUES(basic_salary),
                overtime_hours=VALUES(overtime_hours),
                overtime_amount=VALUES(overtime_amount),
                total_allowances=VALUES(total_allowances),
                behavioral_deductions=VALUES(behavioral_deductions),
                loan_deductions=VALUES(loan_deductions),
                total_deductions=VALUES(total_deductions),
                gross_salary=VALUES(gross_salary),
                net_salary=VALUES(net_salary),
                payment_status=VALUES(payment_status),
                integrity_score=VALUES(integrity_score),
                tax_id=VALUES(tax_id),
                bank_account=VALUES(bank_account)
            """,
            [
                (
                    int(batch_id),
                    int(r.employee_id),
                    r.basic_salary,
                    r.overtime_hours,
                    r.overtime_amount,
                    r.total_allowances,
                    r.behavioral_deductions,
                    r.loan_deductions,
                    r.total_deductions,
                    r.gross_salary,
                    r.net_salary,
                    r.payment_status.value,
                    r.integrity_score,
                    r.tax_id,
                    r.bank_account,
                )
                for r in records
            ],
        )

    employee_ids = [int(r.employee_id) for r in records]
    if employee_ids:
        placeholders = ",".join(["%s"] * len(employee_ids))
        cur.execute(
            f"DELETE FROM payroll_records WHERE batch_id=%s AND employee_id NOT IN ({placeholders})",
            (int(batch_id), *employee_ids),
        )
    else:
        cur.execute("DELETE FROM payroll_records WHERE batch_id=%s", (int(batch_id),))
    if cur.rowcount:
        log.info("removed %s stale line(s) from payroll batch %s", cur.rowcount, batch_id)
