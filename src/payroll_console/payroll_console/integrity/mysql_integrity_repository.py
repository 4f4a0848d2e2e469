from __future__ import annotations

from decimal import Decimal

from ..core.constants import DEFAULT_INTEGRITY_SCORE
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, parse_row
from ..database.row_schemas import IntegrityScoreRow
from .repository import IntegrityRepository


class MySQLIntegrityRepository(IntegrityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def fetch_integrity_score(self, employee_id: int) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id, score FROM integrity_scores WHERE employee_id=%s",
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return DEFAULT_INTEGRITY_SCORE
            return parse_row(IntegrityScoreRow, row).score

    def fetch_all_scores(self) -> dict[int, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id, score FROM integrity_scores")
            return {s.employee_id: s.score for s in (parse_row(IntegrityScoreRow, r) for r in fetchall(cur))}
