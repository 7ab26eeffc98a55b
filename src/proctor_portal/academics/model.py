from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AcademicRecord:
    """Domain entity: marks for one course in one semester (append-only)."""

    record_id: int
    student_profile_id: int
    course_id: str
    course_name: str
    semester: int
    internal_marks: Optional[float] = 0.0
    quiz_marks: Optional[float] = 0.0
    project_marks: Optional[float] = 0.0
    semester_marks: Optional[float] = 0.0
    cgpa_contribution: Optional[float] = 0.0

    @property
    def total_marks(self) -> float:
        # Missing marks count as 0.
        return (
            (self.internal_marks or 0.0)
            + (self.quiz_marks or 0.0)
            + (self.project_marks or 0.0)
            + (self.semester_marks or 0.0)
        )


@dataclass(frozen=True)
class SubjectPerformance:
    subject: str
    avg_score: float
