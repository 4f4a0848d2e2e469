from __future__ import annotations

from flask import Flask, request

from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/payroll/calculate", methods=["POST"], endpoint="payroll_calculate")
    def payroll_calculate():
        report = container.payroll_service.run_calculation(period_label=_body().get("period_label"))
        return ok(
            {
                "batch": report.batch,
                "period_label": report.batch.name,
                "requested_period_label": report.requested_label,
                "skipped": report.skipped,
                "flagged_employee_ids": [r.employee_id for r in report.flagged],
            }
        )

    @app.route("/api/payroll/preview/<int:employee_id>", methods=["GET"], endpoint="payroll_preview")
    def payroll_preview(employee_id: int):
        preview = container.payroll_service.preview_employee(
            employee_id=employee_id,
            period_label=request.args.get("period_label"),
        )
        return ok(
            {
                "employee_id": preview.employee.employee_id,
                "full_name": preview.employee.full_name,
                "period_label": preview.period_label,
                "integrity_score": preview.integrity_score,
                "active_loans": preview.loans,
                "line": preview.result.line,
                "error": str(preview.result.error) if preview.result.error else None,
            }
        )

    @app.route("/api/payroll/batches", methods=["GET"], endpoint="payroll_batches")
    def payroll_batches():
        return ok(container.payroll_service.list_batches())

    @app.route("/api/payroll/batches/<int:batch_id>", methods=["GET"], endpoint="payroll_batch")
    def payroll_batch(batch_id: int):
        return ok(container.payroll_service.get_batch(batch_id))

    @app.route("/api/payroll/batches/<int:batch_id>/records", methods=["GET"], endpoint="payroll_batch_records")
    def payroll_batch_records(batch_id: int):
        records = container.payroll_service.list_records(batch_id)
        return ok(records, count=len(records))

    @app.route("/api/payroll/batches/<int:batch_id>/finalize", methods=["POST"], endpoint="payroll_finalize")
    def payroll_finalize(batch_id: int):
        batch = container.payroll_service.finalize_batch(batch_id=batch_id, force=bool(_body().get("force", False)))
        return ok(batch)
