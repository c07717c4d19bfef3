from __future__ import annotations

from flask import Flask

from ..auth.guard import current_caller, login_required
from ..common.http import json_body, ok


def register(app: Flask, container) -> None:
    # Branding is public: the login page renders it before anyone signs in.
    @app.route("/company-profile", methods=["GET"], endpoint="get_company_profile")
    def get_company_profile():
        return ok(container.company_service.get_profile())

    @app.route("/company-profile", methods=["POST", "PUT"], endpoint="save_company_profile")
    @login_required(container)
    def save_company_profile():
        return ok(container.company_service.save_profile(current_caller(), json_body()))
