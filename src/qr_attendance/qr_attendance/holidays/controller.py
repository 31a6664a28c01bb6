from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.authz import admin_required
from ..common.datetime_utils import parse_iso_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/holidays", methods=["GET"], endpoint="api_admin_holidays")
    @admin_required
    def api_admin_holidays():
        rows = [
            {
                "holiday_id": h.holiday_id,
                "name": h.name,
                "holiday_date": h.holiday_date.strftime("%Y-%m-%d"),
                "holiday_type": h.holiday_type.value,
                "is_recurring": h.is_recurring,
            }
            for h in container.holiday_calendar.list_all()
        ]
        return jsonify({"success": True, "data": rows}), 200

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="api_admin_holidays_create")
    @admin_required
    def api_admin_holidays_create():
        data = request.get_json(silent=True) or {}
        holiday_id = container.holiday_calendar.create(
            name=str(data.get("name") or ""),
            holiday_date=parse_iso_date(str(data.get("holiday_date") or "")),
            holiday_type=str(data.get("holiday_type") or "public"),
            is_recurring=bool(data.get("is_recurring")),
        )
        return jsonify({"success": True, "message": "Holiday added", "data": {"holiday_id": holiday_id}}), 201

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="api_admin_holidays_delete")
    @admin_required
    def api_admin_holidays_delete(holiday_id: int):
        container.holiday_calendar.delete(holiday_id)
        return jsonify({"success": True, "message": "Holiday deleted"}), 200
