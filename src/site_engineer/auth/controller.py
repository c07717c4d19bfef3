from __future__ import annotations

from flask import Flask, session

from ..common.http import json_body, ok
from ..profiles.service import profile_view
from .guard import SESSION_KEY, current_caller, login_required, session_token


def register(app: Flask, container) -> None:
    auth_required = login_required(container)

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        new_session, profile = container.auth_service.login(body.get("email", ""), body.get("password", ""))
        session.clear()
        session[SESSION_KEY] = new_session.token
        session.permanent = True
        caller = container.auth_service.caller_for(profile)
        return ok(
            {
                "user": profile_view(profile, client_id=caller.client_id),
                "token": new_session.token,
                "expiresAt": new_session.expires_at.isoformat(),
            }
        )

    @app.route("/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        container.auth_service.logout(session_token())
        session.clear()
        return ok({"message": "Logged out"})

    @app.route("/auth/me", methods=["GET"], endpoint="auth_me")
    @auth_required
    def me():
        caller = current_caller()
        profile = container.auth_service.current_user(session_token())
        return ok(profile_view(profile, client_id=caller.client_id))

    @app.route("/auth/change-password", methods=["POST"], endpoint="auth_change_password")
    @auth_required
    def change_password():
        body = json_body()
        container.auth_service.change_password(
            current_caller(),
            body.get("currentPassword", ""),
            body.get("newPassword", ""),
        )
        return ok({"message": "Password updated"})
