from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request, session

from .model import Caller

SESSION_KEY = "sid"


def session_token() -> Optional[str]:
    """Bearer header first (API clients), then the signed session cookie."""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return session.get(SESSION_KEY)


def login_required(container):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.caller = container.auth_service.resolve_caller(session_token())
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_caller() -> Caller:
    return g.caller
