from __future__ import annotations

from flask import Flask

from ..auth.guard import current_caller, login_required
from ..common.http import json_body, ok
from .service import NewClient


def register(app: Flask, container) -> None:
    auth_required = login_required(container)

    @app.route("/clients", methods=["GET"], endpoint="list_clients")
    @auth_required
    def list_clients():
        return ok(container.client_service.list_clients(current_caller()))

    @app.route("/clients/<client_id>", methods=["GET"], endpoint="get_client")
    @auth_required
    def get_client(client_id: str):
        return ok(container.client_service.get_client(current_caller(), client_id))

    @app.route("/clients", methods=["POST"], endpoint="create_client")
    @auth_required
    def create_client():
        body = json_body()
        created = container.client_service.create_client(
            current_caller(),
            NewClient(
                name=body.get("name", ""),
                contact_person=body.get("contactPerson", ""),
                contact_email=body.get("email") or body.get("contactEmail") or "",
                contact_phone=body.get("phone") or body.get("contactPhone"),
                address=body.get("address"),
                user_id=body.get("userId"),
            ),
        )
        return ok(created, status=201)
