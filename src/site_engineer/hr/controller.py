from __future__ import annotations

from flask import Flask, request

from ..auth.guard import current_caller, login_required
from ..common.http import json_body, ok
from .model import ReportTable


def register(app: Flask, container) -> None:
    auth_required = login_required(container)

    def _json(table: ReportTable):
        return ok({"report": table.kind, "period": table.period, "rows": table.rows})

    def _csv(table: ReportTable):
        return app.response_class(
            container.hr_service.to_csv(table),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={table.filename}"},
        )

    def _build(kind: str) -> ReportTable:
        return container.hr_service.build(current_caller(), kind, request.args)

    @app.route("/hr/attendance-register", methods=["GET"], endpoint="hr_attendance_register")
    @auth_required
    def attendance_register():
        return _json(_build("attendance-register"))

    @app.route("/hr/attendance-register.csv", methods=["GET"], endpoint="hr_attendance_register_csv")
    @auth_required
    def attendance_register_csv():
        return _csv(_build("attendance-register"))

    @app.route("/hr/engineer-summary", methods=["GET"], endpoint="hr_engineer_summary")
    @auth_required
    def engineer_summary():
        return _json(_build("engineer-summary"))

    @app.route("/hr/engineer-summary.csv", methods=["GET"], endpoint="hr_engineer_summary_csv")
    @auth_required
    def engineer_summary_csv():
        return _csv(_build("engineer-summary"))

    @app.route("/hr/client-report", methods=["GET"], endpoint="hr_client_report")
    @auth_required
    def client_report():
        return _json(_build("client-report"))

    @app.route("/hr/client-report.csv", methods=["GET"], endpoint="hr_client_report_csv")
    @auth_required
    def client_report_csv():
        return _csv(_build("client-report"))

    @app.route("/hr/payroll", methods=["GET"], endpoint="hr_payroll")
    @auth_required
    def payroll():
        return _json(_build("payroll"))

    @app.route("/hr/payroll.csv", methods=["GET"], endpoint="hr_payroll_csv")
    @auth_required
    def payroll_csv():
        return _csv(_build("payroll"))

    @app.route("/hr/reports/send-email", methods=["POST"], endpoint="hr_send_report_email")
    @auth_required
    def send_report_email():
        body = json_body()
        queued = container.hr_service.send_email(
            current_caller(),
            str(body.get("report") or ""),
            body,
            body.get("recipients"),
        )
        return ok(queued, status=202)
