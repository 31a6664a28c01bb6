from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.authz import admin_required
from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..container import Container
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, ScanResult

logger = logging.getLogger(__name__)


def _scan_response(result: ScanResult):
    return jsonify({"success": True, "message": result.message, "data": result.to_dict()}), 200


def _optional_time(value):
    if value is None or not str(value).strip():
        return None
    return parse_clock_time(str(value))


def _optional_text(value):
    return None if value is None else str(value)


def _record_row(record: AttendanceRecord) -> dict:
    return {
        "attendance_id": record.attendance_id,
        "user_id": record.user_id,
        "work_date": record.work_date.strftime("%Y-%m-%d"),
        "time_in": record.time_in.strftime("%Y-%m-%d %H:%M:%S") if record.time_in else None,
        "time_out": record.time_out.strftime("%Y-%m-%d %H:%M:%S") if record.time_out else None,
        "status": record.status.value,
        "notes": record.notes,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    @admin_required
    def api_attendance_scan():
        """Scanner endpoint: one QR payload in, check-in or check-out out."""
        data = request.get_json(silent=True) or {}
        token = str(data.get("qr_token") or "").strip()
        if not token:
            raise ValidationError("QR token is required")

        return _scan_response(container.scan_resolver.scan(token))

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="api_attendance_scan_image")
    @admin_required
    def api_attendance_scan_image():
        if "image" not in request.files:
            raise ValidationError("Missing image file")

        # pyzbar loads the native zbar library on import.
        from .qr_image import decode_qr_image

        token = decode_qr_image(request.files["image"].stream)
        return _scan_response(container.scan_resolver.scan(token))

    @app.route("/api/admin/attendances", methods=["POST"], endpoint="api_admin_attendances_create")
    @admin_required
    def api_admin_attendances_create():
        data = request.get_json(silent=True) or {}
        user_id = data.get("user_id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise ValidationError("user_id must be a number")

        record = container.correction_service.create(
            user_id=user_id,
            work_date=parse_iso_date(str(data.get("date") or "")),
            time_in=_optional_time(data.get("time_in")),
            time_out=_optional_time(data.get("time_out")),
            notes=_optional_text(data.get("notes")),
        )
        return jsonify({"success": True, "message": "Attendance recorded successfully", "data": _record_row(record)}), 201

    @app.route("/api/admin/attendances/<int:attendance_id>", methods=["PUT"], endpoint="api_admin_attendances_update")
    @admin_required
    def api_admin_attendances_update(attendance_id: int):
        data = request.get_json(silent=True) or {}
        changes = {key: _optional_time(data[key]) for key in ("time_in", "time_out") if key in data}

        record = container.correction_service.update(attendance_id, **changes)
        return jsonify({"success": True, "message": "Attendance updated successfully", "data": _record_row(record)}), 200

    @app.route(
        "/api/admin/attendances/<int:attendance_id>/notes",
        methods=["PUT"],
        endpoint="api_admin_attendances_update_notes",
    )
    @admin_required
    def api_admin_attendances_update_notes(attendance_id: int):
        data = request.get_json(silent=True) or {}
        record = container.correction_service.update_notes(attendance_id, _optional_text(data.get("notes")))
        return jsonify({"success": True, "message": "Notes updated successfully", "data": _record_row(record)}), 200
