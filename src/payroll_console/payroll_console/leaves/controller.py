from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_required_date
from ..common.http import ok
from ..common.validators import require_positive_int
from ..container import Container
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import MissingRequiredField


def register(app: Flask, container: Container) -> None:
    def _body() -> dict:
        return request.get_json(silent=True) or {}

    def _leave_type(value) -> LeaveType:
        try:
            return LeaveType(value or LeaveType.ANNUAL.value)
        except ValueError:
            raise MissingRequiredField("leave_type", f"must be one of {', '.join(t.value for t in LeaveType)}")

    def _status(value):
        if not value:
            return None
        try:
            return RequestStatus(value.upper())
        except ValueError:
            raise MissingRequiredField("status", f"must be one of {', '.join(s.value for s in RequestStatus)}")

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_submit")
    def leave_submit():
        data = _body()
        request_id = container.leave_service.submit_leave(
            employee_id=require_positive_int(data.get("employee_id"), "employee_id"),
            leave_type=_leave_type(data.get("leave_type")),
            start_date=parse_required_date(data.get("start_date") or "", "start_date"),
            end_date=parse_required_date(data.get("end_date") or "", "end_date"),
            reason=data.get("reason", ""),
        )
        return ok({"request_id": request_id, "status": RequestStatus.PENDING}, status=201)

    @app.route("/api/leaves", methods=["GET"], endpoint="leave_list")
    def leave_list():
        employee_id = request.args.get("employee_id")
        leaves = container.leave_service.list_requests(
            employee_id=require_positive_int(employee_id, "employee_id") if employee_id else None,
            status=_status(request.args.get("status")),
        )
        return ok(leaves, count=len(leaves))

    @app.route("/api/leaves/balance/<int:employee_id>", methods=["GET"], endpoint="leave_balance")
    def leave_balance(employee_id: int):
        return ok(container.leave_service.balance(employee_id=employee_id))

    @app.route("/api/leaves/<int:request_id>/approve", methods=["POST"], endpoint="leave_approve")
    def leave_approve(request_id: int):
        data = _body()
        container.leave_service.approve_leave(
            manager_id=require_positive_int(data.get("manager_id"), "manager_id"),
            request_id=request_id,
            manager_note=data.get("note", ""),
        )
        return ok({"request_id": request_id, "status": RequestStatus.APPROVED})

    @app.route("/api/leaves/<int:request_id>/reject", methods=["POST"], endpoint="leave_reject")
    def leave_reject(request_id: int):
        data = _body()
        container.leave_service.reject_leave(
            manager_id=require_positive_int(data.get("manager_id"), "manager_id"),
            request_id=request_id,
            manager_note=data.get("note", ""),
        )
        return ok({"request_id": request_id, "status": RequestStatus.REJECTED})
