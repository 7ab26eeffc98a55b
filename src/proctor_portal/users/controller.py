from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.serializers import (
    assigned_proctor_json,
    proctor_profile_json,
    student_profile_json,
    user_json,
)
from ..common.web import AccessGuard, current_identity, json_body
from ..container import Container
from ..core.exceptions import AuthenticationError, AuthorizationError
from .identity import StudentIdentity
from .model import User


def register(app: Flask, container: Container) -> None:
    guard = AccessGuard(container.auth_service)

    def _start_session(user: User) -> None:
        session.clear()
        session.permanent = True
        session["user_id"] = user.user_id
        session["role"] = user.role.value

    @app.route("/api/register", methods=["POST"], endpoint="register")
    def register_account():
        data = json_body()
        user = container.auth_service.register(
            email=data.get("email"),
            username=data.get("username"),
            password=data.get("password"),
            name=data.get("name"),
            role=data.get("role"),
            student_profile=data.get("studentProfile"),
            proctor_profile=data.get("proctorProfile"),
        )
        _start_session(user)
        return jsonify(user_json(user)), 201

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        try:
            user = container.auth_service.authenticate(
                email=data.get("email"),
                password=data.get("password"),
                role=data.get("role"),
            )
        except (AuthenticationError, AuthorizationError) as e:
            app.logger.info("login failed for %s: %s", data.get("email"), e.message)
            raise

        _start_session(user)
        app.logger.info("login ok user_id=%s role=%s", user.user_id, user.role.value)
        return jsonify(user_json(user))

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return "", 200

    @app.route("/api/user", methods=["GET"], endpoint="current_user")
    def current_user():
        user_id = session.get("user_id")
        if user_id is None:
            raise AuthenticationError("Not authenticated")
        user = container.auth_service.get_user(int(user_id))
        return jsonify(user_json(user))

    @app.route("/api/profile", methods=["GET"], endpoint="profile")
    @guard.login_required
    def profile():
        identity = current_identity()
        if isinstance(identity, StudentIdentity):
            student = identity.require_profile()
            assigned = container.profile_service.assigned_proctor(identity)
            return jsonify(
                {
                    "profile": student_profile_json(student),
                    "proctor": assigned_proctor_json(assigned.profile, assigned.user) if assigned else None,
                }
            )

        return jsonify({"profile": proctor_profile_json(identity.require_profile())})
