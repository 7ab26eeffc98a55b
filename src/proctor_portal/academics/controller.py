from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import academic_json, subject_json
from ..common.web import AccessGuard, current_identity
from ..container import Container
from ..users.identity import ProctorIdentity, StudentIdentity


def register(app: Flask, container: Container) -> None:
    guard = AccessGuard(container.auth_service)

    @app.route("/api/student/academic", methods=["GET"], endpoint="student_academic")
    @guard.role_required(StudentIdentity)
    def student_academic():
        result = container.academic_service.for_student(current_identity())
        return jsonify({"records": [academic_json(r) for r in result.records], "cgpa": result.cgpa})

    @app.route("/api/proctor/academic", methods=["GET"], endpoint="proctor_academic")
    @guard.role_required(ProctorIdentity)
    def proctor_academic():
        subjects = container.academic_service.subject_report(current_identity())
        return jsonify({"subjects": [subject_json(s) for s in subjects]})
