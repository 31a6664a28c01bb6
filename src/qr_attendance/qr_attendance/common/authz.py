"""Authorization predicate shared by every controller.

Login itself happens elsewhere; it is expected to put ``user_id`` and
``role`` into the Flask session.
"""

from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role


def current_user_id() -> int | None:
    value = session.get("user_id")
    return int(value) if value is not None else None


def is_admin() -> bool:
    return current_user_id() is not None and session.get("role") == Role.ADMIN.value


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user_id() is None:
            return jsonify({"success": False, "message": "Unauthenticated"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user_id() is None:
            return jsonify({"success": False, "message": "Unauthenticated"}), 401
        if not is_admin():
            return jsonify({"success": False, "message": "Unauthorized"}), 403
        return view(*args, **kwargs)

    return wrapper
