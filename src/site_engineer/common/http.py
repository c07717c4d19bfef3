from __future__ import annotations

from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import ValidationError


def ok(data: Any = None, status: int = 200):
    return jsonify(data), status


def fail(message: str = "Bad Request", status: int = 400, code: Optional[str] = None):
    body = {"message": message}
    if code:
        body["error"] = code
    return jsonify(body), status


def json_body() -> dict:
    """Return the request JSON object, or raise ValidationError."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
