from __future__ import annotations

from flask import Flask, request

from ..auth.guard import current_caller, login_required
from ..common.http import json_body, ok


def register(app: Flask, container) -> None:
    auth_required = login_required(container)

    @app.route("/check-ins", methods=["GET"], endpoint="list_check_ins")
    @auth_required
    def list_check_ins():
        return ok(
            container.check_in_service.list_check_ins(
                current_caller(),
                engineer_id=request.args.get("engineerId"),
                day=request.args.get("date"),
            )
        )

    @app.route("/check-ins", methods=["POST"], endpoint="create_check_in")
    @auth_required
    def create_check_in():
        body = json_body()
        created = container.check_in_service.check_in(
            current_caller(),
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
            location_name=body.get("locationName"),
        )
        return ok(created, status=201)

    @app.route("/check-ins/<check_in_id>/checkout", methods=["POST", "PUT"], endpoint="check_out")
    @auth_required
    def check_out(check_in_id: str):
        return ok(container.check_in_service.check_out(current_caller(), check_in_id))
