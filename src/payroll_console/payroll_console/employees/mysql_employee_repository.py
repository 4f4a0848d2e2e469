from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, parse_row
from ..database.row_schemas import EmployeeRow
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, full_name, basic_salary, hire_date, status, dept_id, tax_id, bank_account"


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            if not row:
                return None
            return parse_row(EmployeeRow, row).to_model()

    def list_employees(self, *, active_only: bool = True) -> Sequence[Employee]:
        sql = f"SELECT {_COLUMNS} FROM employees"
        params: tuple = ()
        if active_only:
            sql += " WHERE status=%s"
            params = (EmployeeStatus.ACTIVE.value,)
        sql += " ORDER BY employee_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [parse_row(EmployeeRow, r).to_model() for r in fetchall(cur)]
