from __future__ import annotations

from flask import Flask, request

from ..auth.guard import current_caller, login_required
from ..common.http import json_body, ok


def register(app: Flask, container) -> None:
    auth_required = login_required(container)

    @app.route("/leaves", methods=["GET"], endpoint="list_leaves")
    @auth_required
    def list_leaves():
        return ok(
            container.leave_service.list_leaves(
                current_caller(),
                engineer_id=request.args.get("engineerId"),
                status=request.args.get("status"),
            )
        )

    @app.route("/leaves", methods=["POST"], endpoint="request_leave")
    @auth_required
    def request_leave():
        body = json_body()
        created = container.leave_service.request_leave(
            current_caller(),
            start_date=body.get("startDate"),
            end_date=body.get("endDate"),
            reason=body.get("reason"),
        )
        return ok(created, status=201)

    @app.route("/leaves/<leave_id>/approve", methods=["POST"], endpoint="approve_leave")
    @auth_required
    def approve_leave(leave_id: str):
        body = json_body()
        return ok(
            container.leave_service.approve(
                current_caller(),
                leave_id,
                backup_engineer_id=body.get("backupEngineerId"),
            )
        )

    @app.route("/leaves/<leave_id>/reject", methods=["POST"], endpoint="reject_leave")
    @auth_required
    def reject_leave(leave_id: str):
        return ok(container.leave_service.reject(current_caller(), leave_id))
