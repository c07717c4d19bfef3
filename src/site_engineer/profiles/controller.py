from __future__ import annotations

from flask import Flask, request

from ..auth.guard import current_caller, login_required
from ..common.http import json_body, ok
from .service import NewProfile


def _new_profile(body: dict, *, role: str) -> NewProfile:
    return NewProfile(
        email=body.get("email", ""),
        full_name=body.get("fullName") or body.get("name") or "",
        role=role,
        password=body.get("password", ""),
        phone=body.get("phone"),
        designation=body.get("designation"),
        client_id=body.get("clientId"),
        company_name=body.get("companyName"),
    )


def register(app: Flask, container) -> None:
    auth_required = login_required(container)

    @app.route("/profiles", methods=["GET"], endpoint="list_profiles")
    @auth_required
    def list_profiles():
        return ok(container.profile_service.list_profiles(current_caller(), role=request.args.get("role")))

    @app.route("/profiles", methods=["POST"], endpoint="create_profile")
    @auth_required
    def create_profile():
        body = json_body()
        created = container.profile_service.create_profile(
            current_caller(), _new_profile(body, role=body.get("role", ""))
        )
        return ok(created, status=201)

    @app.route("/profiles/<profile_id>", methods=["GET"], endpoint="get_profile")
    @auth_required
    def get_profile(profile_id: str):
        return ok(container.profile_service.get_profile(current_caller(), profile_id))

    @app.route("/profiles/<profile_id>", methods=["PATCH"], endpoint="update_profile")
    @auth_required
    def update_profile(profile_id: str):
        return ok(container.profile_service.update_profile(current_caller(), profile_id, json_body()))

    @app.route("/engineers", methods=["GET"], endpoint="list_engineers")
    @auth_required
    def list_engineers():
        return ok(container.profile_service.list_engineers(current_caller()))

    @app.route("/engineers", methods=["POST"], endpoint="create_engineer")
    @auth_required
    def create_engineer():
        created = container.profile_service.create_engineer(
            current_caller(), _new_profile(json_body(), role="engineer")
        )
        return ok(created, status=201)
