from __future__ import annotations

from flask import Flask, request

from ..auth.guard import current_caller, login_required
from ..common.http import json_body, ok
from .service import NewReport


def register(app: Flask, container) -> None:
    auth_required = login_required(container)

    @app.route("/reports", methods=["GET"], endpoint="list_reports")
    @auth_required
    def list_reports():
        return ok(
            container.report_service.list_reports(
                current_caller(),
                engineer_id=request.args.get("engineerId"),
                client_id=request.args.get("clientId"),
                day=request.args.get("date"),
            )
        )

    @app.route("/reports/<report_id>", methods=["GET"], endpoint="get_report")
    @auth_required
    def get_report(report_id: str):
        return ok(container.report_service.get_report(current_caller(), report_id))

    @app.route("/reports", methods=["POST"], endpoint="submit_report")
    @auth_required
    def submit_report():
        body = json_body()
        created = container.report_service.submit_report(
            current_caller(),
            NewReport(
                client_id=body.get("clientId", ""),
                work_done=body.get("workDone", ""),
                site_id=body.get("siteId"),
                issues=body.get("issues"),
                hours_worked=body.get("hoursWorked"),
                report_date=body.get("date"),
            ),
        )
        return ok(created, status=201)

    @app.route("/reports/<report_id>/send-email", methods=["POST"], endpoint="send_report_email")
    @auth_required
    def send_report_email(report_id: str):
        body = json_body()
        queued = container.report_service.send_report_email(
            current_caller(),
            report_id,
            body.get("recipients") or body.get("to"),
        )
        return ok(queued, status=202)
