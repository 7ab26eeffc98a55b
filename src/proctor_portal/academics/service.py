from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from ..users.identity import ProctorIdentity, StudentIdentity
from ..users.repository import ProfileRepository
from .model import AcademicRecord, SubjectPerformance
from .repository import AcademicRepository


def subject_performance(records: Iterable[AcademicRecord]) -> list[SubjectPerformance]:
    """Average total marks per course name across every contributing record."""
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for r in records:
        totals[r.course_name] = totals.get(r.course_name, 0.0) + r.total_marks
        counts[r.course_name] = counts.get(r.course_name, 0) + 1

    return [
        SubjectPerformance(subject=subject, avg_score=round(total / counts[subject], 2))
        for subject, total in totals.items()
    ]


@dataclass(frozen=True)
class StudentAcademics:
    records: Sequence[AcademicRecord]
    cgpa: float


class AcademicService:
    def __init__(self, academics: AcademicRepository, profiles: ProfileRepository):
        self._academics = academics
        self._profiles = profiles

    def records_for_profile(self, student_profile_id: int) -> list[AcademicRecord]:
        return list(self._academics.list_for_student(int(student_profile_id)))

    def for_student(self, identity: StudentIdentity) -> StudentAcademics:
        profile = identity.require_profile()
        return StudentAcademics(records=self.records_for_profile(profile.profile_id), cgpa=profile.cgpa)

    def subject_report(self, identity: ProctorIdentity) -> list[SubjectPerformance]:
        proctor = identity.require_profile()
        records: list[AcademicRecord] = []
        for student in self._profiles.list_students_by_proctor(proctor.profile_id):
            records.extend(self._academics.list_for_student(student.profile_id))
        return subject_performance(records)
