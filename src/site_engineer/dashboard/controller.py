from __future__ import annotations

from flask import Flask

from ..auth.guard import current_caller, login_required
from ..common.http import ok


def register(app: Flask, container) -> None:
    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required(container)
    def dashboard():
        return ok(container.dashboard_service.summary(current_caller()))
