from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.authz import admin_required, current_user_id, is_admin, login_required
from ..common.datetime_utils import now_local, parse_iso_date
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_report")
    @login_required
    def api_attendance_report():
        today = now_local(container.tz).date()
        start = parse_iso_date(request.args["start"]) if request.args.get("start") else today.replace(day=1)
        end = parse_iso_date(request.args["end"]) if request.args.get("end") else today

        # Regular users only ever see their own rows.
        user_id = current_user_id()
        if is_admin():
            user_id_s = request.args.get("user_id")
            if user_id_s and not user_id_s.isdigit():
                raise ValidationError("user_id must be a number")
            user_id = int(user_id_s) if user_id_s else None

        data = container.report_service.build_report(start=start, end=end, user_id=user_id)
        return jsonify({"success": True, "data": data.to_dict()}), 200

    @app.route("/api/me/attendance", methods=["GET"], endpoint="api_my_attendance")
    @login_required
    def api_my_attendance():
        limit = request.args.get("limit", type=int) or DEFAULT_HISTORY_LIMIT
        rows = container.report_service.history(current_user_id(), limit=min(max(limit, 1), 100))
        return jsonify({"success": True, "data": rows}), 200

    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="api_admin_dashboard")
    @admin_required
    def api_admin_dashboard():
        now = now_local(container.tz)
        report = container.reconciler.run(now=now)
        stats = container.report_service.dashboard_stats(now.date())
        return jsonify({"success": True, "data": {"stats": stats, "reconciliation": report.to_dict()}}), 200
