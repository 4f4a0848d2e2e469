from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .core.constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_READ_RETRY_ATTEMPTS,
    DEFAULT_READ_RETRY_BACKOFF_SECONDS,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .integrity.mysql_integrity_repository import MySQLIntegrityRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .leaves.validator import LeaveBalanceValidator
from .loans.mysql_loan_repository import MySQLLoanRepository
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.policy import PayrollPolicy
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    policy: PayrollPolicy

    payroll_service: PayrollService
    leave_service: LeaveService


def build_container(
    *,
    db_config: Mapping[str, Any],
    policy_config: Optional[Mapping[str, Any]] = None,
    retry_attempts: int = DEFAULT_READ_RETRY_ATTEMPTS,
    retry_backoff: float = DEFAULT_READ_RETRY_BACKOFF_SECONDS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connect_timeout=int(db_config.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT_SECONDS)),
    )
    conn = DatabaseConnection.get_instance(config)
    policy = PayrollPolicy.from_settings(policy_config)

    employees_repo = MySQLEmployeeRepository(conn)
    loans_repo = MySQLLoanRepository(conn)
    integrity_repo = MySQLIntegrityRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)

    payroll_service = PayrollService(
        employees_repo,
        loans_repo,
        integrity_repo,
        payroll_repo,
        policy=policy,
        retry_attempts=retry_attempts,
        retry_backoff=retry_backoff,
    )
    leave_service = LeaveService(
        leaves_repo,
        employees_repo,
        validator=LeaveBalanceValidator(policy.default_annual_leave_allowance),
        retry_attempts=retry_attempts,
        retry_backoff=retry_backoff,
    )

    return Container(
        conn=conn,
        policy=policy,
        payroll_service=payroll_service,
        leave_service=leave_service,
    )
