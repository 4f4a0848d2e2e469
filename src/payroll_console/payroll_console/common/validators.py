from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import MissingRequiredField


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MissingRequiredField(field_name)
    return value.strip()


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise MissingRequiredField(field_name, "must be an integer")
    if number <= 0:
        raise MissingRequiredField(field_name, "must be positive")
    return number


def to_decimal(value: Any, field_name: str) -> Decimal:
    """Coerce a form/JSON value to Decimal; None and '' read as zero."""
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise MissingRequiredField(field_name, "must be a number")
