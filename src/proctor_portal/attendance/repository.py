from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import AttendanceEntry


class AttendanceRepository(Protocol):
    def list_for_student(self, student_profile_id: int) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def create_entry(
        self,
        *,
        student_profile_id: int,
        course_id: str,
        course_name: str,
        class_date: datetime,
        is_present: bool,
    ) -> int:
        raise NotImplementedError
