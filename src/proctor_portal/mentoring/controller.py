from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import academic_json, attendance_json, student_summary_json, tally_json
from ..common.web import AccessGuard, current_identity
from ..container import Container
from ..users.identity import ProctorIdentity


def register(app: Flask, container: Container) -> None:
    guard = AccessGuard(container.auth_service)

    @app.route("/api/proctor/students", methods=["GET"], endpoint="proctor_students")
    @guard.role_required(ProctorIdentity)
    def proctor_students():
        overview = container.mentoring_service.list_mentees(current_identity())
        students = [
            {
                **student_summary_json(m.profile, m.user),
                "attendance": tally_json(m.attendance),
                "riskLevel": m.risk_level.value,
            }
            for m in overview.mentees
        ]
        return jsonify(
            {
                "students": students,
                "summary": {
                    "total": len(students),
                    "goodAttendance": overview.good_attendance,
                    "atRisk": overview.at_risk,
                },
            }
        )

    @app.route("/api/proctor/student/<int:student_profile_id>", methods=["GET"], endpoint="proctor_student_detail")
    @guard.role_required(ProctorIdentity)
    def proctor_student_detail(student_profile_id: int):
        detail = container.mentoring_service.mentee_detail(
            current_identity(), student_profile_id=int(student_profile_id)
        )
        return jsonify(
            {
                "student": student_summary_json(detail.profile, detail.user),
                "attendance": [attendance_json(e) for e in detail.attendance],
                "academics": [academic_json(r) for r in detail.academics],
            }
        )
