from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceEntry
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student(self, student_profile_id: int) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, student_profile_id, course_id, course_name, class_date, is_present
                FROM attendance
                WHERE student_profile_id=%s
                ORDER BY class_date, attendance_id
                """,
                (int(student_profile_id),),
            )
            rows = fetchall(cur)
            return [
                AttendanceEntry(
                    attendance_id=int(r["attendance_id"]),
                    student_profile_id=int(r["student_profile_id"]),
                    course_id=r["course_id"],
                    course_name=r["course_name"],
                    class_date=r["class_date"],
                    is_present=bool(r["is_present"]),
                )
                for r in rows
            ]

    def create_entry(
        self,
        *,
        student_profile_id: int,
        course_id: str,
        course_name: str,
        class_date: datetime,
        is_present: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(student_profile_id, course_id, course_name, class_date, is_present)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(student_profile_id), course_id, course_name, class_date, 1 if is_present else 0),
            )
            return int(cur.lastrowid)
