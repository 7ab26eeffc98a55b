"""JSON shapes for the API.

Keys are camelCase to match what the web client expects.
"""
from __future__ import annotations

from typing import Any, Optional

from ..academics.model import AcademicRecord, SubjectPerformance
from ..attendance.model import AttendanceEntry, AttendanceSummary, AttendanceTally
from ..queries.model import Query, QueryResponse
from ..users.model import ProctorProfile, StudentProfile, User
from .datetime_utils import isoformat


def user_json(user: User) -> dict[str, Any]:
    # Never includes the password hash.
    return {
        "id": user.user_id,
        "email": user.email,
        "username": user.username,
        "role": user.role.value,
        "name": user.name,
        "createdAt": isoformat(user.created_at),
    }


def user_ref_json(user: Optional[User], *, with_email: bool = True, with_role: bool = False) -> Optional[dict[str, Any]]:
    if user is None:
        return None
    data: dict[str, Any] = {"id": user.user_id, "name": user.name}
    if with_email:
        data["email"] = user.email
    if with_role:
        data["role"] = user.role.value
    return data


def student_profile_json(profile: StudentProfile) -> dict[str, Any]:
    return {
        "id": profile.profile_id,
        "userId": profile.user_id,
        "studentId": profile.student_id,
        "department": profile.department,
        "proctorId": profile.proctor_id,
        "semester": profile.semester,
        "cgpa": profile.cgpa,
    }


def proctor_profile_json(profile: ProctorProfile) -> dict[str, Any]:
    return {
        "id": profile.profile_id,
        "userId": profile.user_id,
        "facultyId": profile.faculty_id,
        "department": profile.department,
        "phone": profile.phone,
        "designation": profile.designation,
    }


def assigned_proctor_json(profile: ProctorProfile, user: User) -> dict[str, Any]:
    return {
        "id": profile.profile_id,
        "name": user.name,
        "email": user.email,
        "department": profile.department,
        "designation": profile.designation,
        "phone": profile.phone,
    }


def student_summary_json(profile: StudentProfile, user: User) -> dict[str, Any]:
    return {
        "id": profile.profile_id,
        "userId": user.user_id,
        "name": user.name,
        "email": user.email,
        "studentId": profile.student_id,
        "department": profile.department,
        "semester": profile.semester,
        "cgpa": profile.cgpa,
    }


def attendance_json(entry: AttendanceEntry) -> dict[str, Any]:
    return {
        "id": entry.attendance_id,
        "studentId": entry.student_profile_id,
        "courseId": entry.course_id,
        "courseName": entry.course_name,
        "date": isoformat(entry.class_date),
        "isPresent": bool(entry.is_present),
    }


def tally_json(tally: AttendanceTally) -> dict[str, Any]:
    return {"total": tally.total, "present": tally.present, "percentage": tally.percentage}


def attendance_summary_json(summary: AttendanceSummary) -> dict[str, Any]:
    return {
        "courseWise": {course: tally_json(t) for course, t in summary.course_wise.items()},
        "overall": tally_json(summary.overall),
    }


def academic_json(record: AcademicRecord) -> dict[str, Any]:
    return {
        "id": record.record_id,
        "studentId": record.student_profile_id,
        "courseId": record.course_id,
        "courseName": record.course_name,
        "semester": record.semester,
        "internalMarks": record.internal_marks,
        "quizMarks": record.quiz_marks,
        "projectMarks": record.project_marks,
        "semesterMarks": record.semester_marks,
        "cgpaContribution": record.cgpa_contribution,
    }


def subject_json(perf: SubjectPerformance) -> dict[str, Any]:
    return {"subject": perf.subject, "avgScore": perf.avg_score}


def query_json(query: Query) -> dict[str, Any]:
    return {
        "id": query.query_id,
        "studentId": query.student_user_id,
        "proctorId": query.proctor_user_id,
        "subject": query.subject,
        "description": query.description,
        "status": query.status.value,
        "createdAt": isoformat(query.created_at),
        "updatedAt": isoformat(query.updated_at),
    }


def response_json(response: QueryResponse) -> dict[str, Any]:
    return {
        "id": response.response_id,
        "queryId": response.query_id,
        "userId": response.user_id,
        "response": response.response,
        "createdAt": isoformat(response.created_at),
    }
