from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AcademicRecord


class AcademicRepository(Protocol):
    def list_for_student(self, student_profile_id: int) -> Sequence[AcademicRecord]:
        raise NotImplementedError

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
        raise NotImplementedError
