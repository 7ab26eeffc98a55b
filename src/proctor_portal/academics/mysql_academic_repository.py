from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AcademicRecord
from .repository import AcademicRepository


def _mark(value) -> Optional[float]:
    return float(value) if value is not None else None


class MySQLAcademicRepository(AcademicRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student(self, student_profile_id: int) -> Sequence[AcademicRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, student_profile_id, course_id, course_name, semester,
                       internal_marks, quiz_marks, project_marks, semester_marks, cgpa_contribution
                FROM academic_records
                WHERE student_profile_id=%s
                ORDER BY semester, course_id
                """,
                (int(student_profile_id),),
            )
            rows = fetchall(cur)
            return [
                AcademicRecord(
                    record_id=int(r["record_id"]),
                    student_profile_id=int(r["student_profile_id"]),
                    course_id=r["course_id"],
                    course_name=r["course_name"],
                    semester=int(r["semester"]),
                    internal_marks=_mark(r.get("internal_marks")),
                    quiz_marks=_mark(r.get("quiz_marks")),
                    project_marks=_mark(r.get("project_marks")),
                    semester_marks=_mark(r.get("semester_marks")),
                    cgpa_contribution=_mark(r.get("cgpa_contribution")),
                )
                for r in rows
            ]

    def create_record(
        self,
        *,
        student_profile_id: int,
        course_id: str,
        course_name: str,
        semester: int,
        internal_marks: Optional[float] = 0.0,
        quiz_marks: Optional[float] = 0.0,
        project_marks: Optional[float] = 0.0,
        semester_marks: Optional[float] = 0.0,
        cgpa_contribution: Optional[float] = 0.0,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO academic_records(
                    student_profile_id, course_id, course_name, semester,
                    internal_marks, quiz_marks, project_marks, semester_marks, cgpa_contribution
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(student_profile_id),
                    course_id,
                    course_name,
                    int(semester),
                    internal_marks,
                    quiz_marks,
                    project_marks,
                    semester_marks,
                    cgpa_contribution,
                ),
            )
            return int(cur.lastrowid)
