from __future__ import annotations

from flask import Flask, request

from ..auth.guard import current_caller, login_required
from ..common.http import json_body, ok
from .service import NewSite


def register(app: Flask, container) -> None:
    auth_required = login_required(container)

    @app.route("/sites", methods=["GET"], endpoint="list_sites")
    @auth_required
    def list_sites():
        return ok(container.site_service.list_sites(current_caller(), client_id=request.args.get("clientId")))

    @app.route("/sites", methods=["POST"], endpoint="create_site")
    @auth_required
    def create_site():
        body = json_body()
        created = container.site_service.create_site(
            current_caller(),
            NewSite(
                client_id=body.get("clientId", ""),
                name=body.get("name", ""),
                location=body.get("location"),
                address=body.get("address"),
            ),
        )
        return ok(created, status=201)
