from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.authz import admin_required
from ..common.datetime_utils import parse_iso_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/attendance/reconcile", methods=["POST"], endpoint="api_admin_reconcile")
    @admin_required
    def api_admin_reconcile():
        date_s = request.args.get("date")
        work_date = parse_iso_date(date_s) if date_s else None

        report = container.reconciler.run(work_date)
        return jsonify({"success": report.ok, "data": report.to_dict()}), 200
