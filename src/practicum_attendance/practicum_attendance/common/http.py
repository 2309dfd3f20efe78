from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Iterable, Optional

from flask import Flask, jsonify, session

from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first.
_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def status_for(exc: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def ok(data: Any, message: str, status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def fail(name: str, message: str, status: int):
    return jsonify({"success": False, "error": {"name": name, "message": message}}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        return fail(type(exc).__name__, str(exc), status_for(exc))

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        # HTTP errors raised by Flask itself keep their own response.
        code = getattr(exc, "code", None)
        if isinstance(code, int):
            return fail(type(exc).__name__, getattr(exc, "description", str(exc)), code)
        logger.exception("Unhandled error")
        return fail("InternalServerError", "Something went wrong, please try again later", 500)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("UnauthenticatedError", "Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(roles: Iterable[str]):
    allowed = {str(getattr(r, "value", r)) for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("UnauthenticatedError", "Please sign in to continue", 401)
            if session.get("role") not in allowed:
                return fail("AuthorizationError", "You are not allowed to perform this action", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user_id() -> Optional[str]:
    value = session.get("user_id")
    return None if value is None else str(value)
