from __future__ import annotations

import logging

from flask import Flask
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InternalError,
    InvalidStateTransition,
    NotFound,
    ValidationError,
)
from .http import fail

log = logging.getLogger(__name__)

# Most specific first; isinstance() walks this in order.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFound, 404),
    (InvalidStateTransition, 409),
    (InternalError, 500),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        status = status_for(e)
        if status >= 500:
            log.error("Operation failed: %s", e, exc_info=e)
            return fail("Internal server error", status=500, code="InternalError")
        return fail(str(e) or type(e).__name__, status=status, code=type(e).__name__)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500, code=e.name.replace(" ", ""))

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        log.exception("Unhandled error")
        return fail("Internal server error", status=500, code="InternalError")
