from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    NotFoundError,
    OverlapError,
    StorageError,
    ValidationError,
)

ADMIN_ROLES = {Role.ADMIN.value, Role.SUPER_ADMIN.value}

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (OverlapError, 409),
    (StorageError, 500),
)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Unauthorized"}), 401
        if session.get("role") not in ADMIN_ROLES:
            return jsonify({"error": "Forbidden"}), 403
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def is_admin() -> bool:
    return session.get("role") in ADMIN_ROLES


def error_response(error: Exception):
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(error, kind):
            message = "Internal server error" if status == 500 else str(error)
            return jsonify({"error": message}), status
    raise error
