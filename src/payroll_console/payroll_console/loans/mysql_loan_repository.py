from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ..core.enums import LoanStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, parse_row
from ..database.row_schemas import InstallmentSumRow, LoanRow
from .model import Loan
from .repository import LoanRepository


class MySQLLoanRepository(LoanRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def fetch_active_installments(self) -> dict[int, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, SUM(monthly_installment) AS installment_sum
                FROM loans
                WHERE status=%s
                GROUP BY employee_id
                """,
                (LoanStatus.ACTIVE.value,),
            )
            out: dict[int, Decimal] = {}
            for r in fetchall(cur):
                row = parse_row(InstallmentSumRow, r)
                out[row.employee_id] = row.installment_sum
            return out

    def list_for_employee(self, employee_id: int) -> Sequence[Loan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT loan_id, employee_id, total_amount, monthly_installment,
                       remaining_amount, start_date, status, reason
                FROM loans
                WHERE employee_id=%s
                ORDER BY start_date DESC
                """,
                (int(employee_id),),
            )
            return [parse_row(LoanRow, r).to_model() for r in fetchall(cur)]
