from __future__ import annotations

from flask import Flask, request

from ..auth.guard import current_caller, login_required
from ..common.http import json_body, ok
from .service import NewAssignment


def register(app: Flask, container) -> None:
    auth_required = login_required(container)

    @app.route("/assignments", methods=["GET"], endpoint="list_assignments")
    @auth_required
    def list_assignments():
        return ok(
            container.assignment_service.list_assignments(
                current_caller(),
                engineer_id=request.args.get("engineerId"),
                client_id=request.args.get("clientId"),
                active_only=request.args.get("status") == "active" or request.args.get("active") in ("1", "true"),
            )
        )

    @app.route("/assignments", methods=["POST"], endpoint="create_assignment")
    @auth_required
    def create_assignment():
        body = json_body()
        created = container.assignment_service.create_assignment(
            current_caller(),
            NewAssignment(
                engineer_id=body.get("engineerId", ""),
                client_id=body.get("clientId", ""),
                site_id=body.get("siteId"),
                assigned_date=body.get("assignedDate"),
            ),
        )
        return ok(created, status=201)
