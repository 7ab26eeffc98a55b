from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/forgot-password", methods=["POST"], endpoint="forgot_password")
    def forgot_password():
        data = json_body()
        message = container.password_reset_service.request_reset(email=data.get("email"), role=data.get("role"))
        return jsonify({"message": message})

    @app.route("/api/reset-password", methods=["POST"], endpoint="reset_password")
    def reset_password():
        data = json_body()
        message = container.password_reset_service.reset_password(
            token=data.get("token"), new_password=data.get("newPassword")
        )
        return jsonify({"message": message})
