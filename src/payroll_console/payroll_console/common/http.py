from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    BatchNotFound,
    DataIntegrityError,
    InsufficientBalance,
    OperationCancelled,
    TransientIOError,
    ValidationError,
)

log = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """Dataclasses/enums/Decimals/dates -> JSON-safe values. Money stays a string."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def ok(data=None, status=200, **meta):
    payload = {"success": True, "data": to_json(data)}
    if meta:
        payload["meta"] = to_json(meta)
    return jsonify(payload), status


def fail(message="Bad Request", status=400, code=None, detail=None):
    err = {"message": message}
    if code:
        err["code"] = code
    if detail:
        err["detail"] = detail
    return jsonify({"success": False, "error": err}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(InsufficientBalance)
    def _balance(e: InsufficientBalance):
        return fail(
            str(e),
            status=400,
            code="INSUFFICIENT_BALANCE",
            detail={"remaining_balance": e.remaining_balance, "requested_days": e.requested_days},
        )

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), status=400, code=type(e).__name__)

    @app.errorhandler(BatchNotFound)
    def _not_found(e: BatchNotFound):
        return fail(str(e), status=404, code="BATCH_NOT_FOUND")

    @app.errorhandler(DataIntegrityError)
    def _integrity(e: DataIntegrityError):
        return fail(str(e), status=409, code=type(e).__name__)

    @app.errorhandler(OperationCancelled)
    def _cancelled(e: OperationCancelled):
        return fail(f"Operation cancelled: {e}", status=409, code="CANCELLED")

    @app.errorhandler(TransientIOError)
    def _io(e: TransientIOError):
        log.error("backend unavailable: %s", e)
        return fail("Backend unavailable; changes were not saved", status=503, code="NOT_SAVED")

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)
