from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Type, TypeVar

import mysql.connector
import pydantic

from ..core.exceptions import MalformedRowError, TransientIOError
from .connection import DatabaseConnection

# MySQL error code for a UNIQUE/PRIMARY KEY collision.
ER_DUP_ENTRY = 1062

_TRANSIENT_ERRORS = (mysql.connector.errors.InterfaceError, mysql.connector.errors.OperationalError)

M = TypeVar("M", bound=pydantic.BaseModel)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except _TRANSIENT_ERRORS as e:
        raise TransientIOError(f"database unreachable: {e}") from e
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except _TRANSIENT_ERRORS as e:
        conn.rollback()
        raise TransientIOError(f"query failed: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(error: Exception) -> bool:
    return isinstance(error, mysql.connector.errors.IntegrityError) and getattr(error, "errno", None) == ER_DUP_ENTRY


def parse_row(schema: Type[M], row: Dict[str, Any]) -> M:
    """Validate a raw row at the I/O edge so bad data never reaches arithmetic."""
    try:
        return schema.model_validate(row)
    except pydantic.ValidationError as e:
        raise MalformedRowError(f"{schema.__name__}: {e.error_count()} invalid field(s): {e}") from e
