from __future__ import annotations

from typing import Sequence

from flask import Flask, jsonify, request

from ..common.authz import admin_required, current_user_id, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from .model import Schedule


def _schedule_rows(schedules: Sequence[Schedule]) -> list[dict]:
    return [
        {
            "day_of_week": s.day_of_week,
            "start_time": s.start_time.strftime("%H:%M"),
            "end_time": s.end_time.strftime("%H:%M"),
            "break_start": s.break_start.strftime("%H:%M") if s.break_start else None,
            "break_hours": s.break_hours,
            "is_overnight": s.is_overnight,
        }
        for s in schedules
    ]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/me/schedules", methods=["GET"], endpoint="api_my_schedules")
    @login_required
    def api_my_schedules():
        schedules = container.schedule_service.list_for_user(current_user_id())
        return jsonify({"success": True, "data": _schedule_rows(schedules)}), 200

    @app.route("/api/admin/users/<int:user_id>/schedules", methods=["GET", "PUT"], endpoint="api_admin_user_schedules")
    @admin_required
    def api_admin_user_schedules(user_id: int):
        if request.method == "PUT":
            data = request.get_json(silent=True) or {}
            entries = data.get("schedules")
            if not isinstance(entries, list):
                raise ValidationError("schedules must be a list")
            if container.users_repo.get_by_id(user_id) is None:
                raise ValidationError("User not found")

            schedules = container.schedule_service.replace_week(user_id=user_id, entries=entries)
            return jsonify({"success": True, "message": "Schedule saved", "data": _schedule_rows(schedules)}), 200

        schedules = container.schedule_service.list_for_user(user_id)
        return jsonify({"success": True, "data": _schedule_rows(schedules)}), 200
