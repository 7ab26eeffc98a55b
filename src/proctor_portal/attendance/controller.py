from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import attendance_json, attendance_summary_json
from ..common.web import AccessGuard, current_identity
from ..container import Container
from ..users.identity import StudentIdentity


def register(app: Flask, container: Container) -> None:
    guard = AccessGuard(container.auth_service)

    @app.route("/api/student/attendance", methods=["GET"], endpoint="student_attendance")
    @guard.role_required(StudentIdentity)
    def student_attendance():
        result = container.attendance_service.for_student(current_identity())
        return jsonify(
            {
                "records": [attendance_json(e) for e in result.records],
                **attendance_summary_json(result.summary),
            }
        )
