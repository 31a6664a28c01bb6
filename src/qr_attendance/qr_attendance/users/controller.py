from __future__ import annotations

import io

from flask import Flask, jsonify, send_file

from ..common.authz import admin_required, current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/users/<int:user_id>/qr-token", methods=["POST"], endpoint="api_admin_regenerate_qr")
    @admin_required
    def api_admin_regenerate_qr(user_id: int):
        token = container.qr_token_service.regenerate(user_id)
        return jsonify({"success": True, "message": "QR code regenerated", "data": {"qr_token": token}}), 200

    @app.route("/api/me/qr.png", methods=["GET"], endpoint="api_my_qr_image")
    @login_required
    def api_my_qr_image():
        """The QR code the user shows at the scanner."""
        png = container.qr_token_service.qr_png(current_user_id())
        return send_file(io.BytesIO(png), mimetype="image/png")
