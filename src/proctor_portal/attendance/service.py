from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from ..users.identity import StudentIdentity
from .model import AttendanceEntry, AttendanceSummary, AttendanceTally
from .repository import AttendanceRepository


def percentage(present: int, total: int) -> float:
    """Present/total as a percentage rounded to 2 decimals; 0 when total is 0."""
    if total <= 0:
        return 0.0
    return round(present / total * 100, 2)


def tally(entries: Iterable[AttendanceEntry]) -> AttendanceTally:
    total = 0
    present = 0
    for e in entries:
        total += 1
        if e.is_present:
            present += 1
    return AttendanceTally(total=total, present=present, percentage=percentage(present, total))


def summarize_attendance(entries: Sequence[AttendanceEntry]) -> AttendanceSummary:
    """Group entries by course name.

    The overall figure is computed over every entry (weighted by class
    count), not as an average of the per-course percentages.
    """
    by_course: dict[str, list[AttendanceEntry]] = {}
    for e in entries:
        by_course.setdefault(e.course_name, []).append(e)

    course_wise = {course: tally(rows) for course, rows in by_course.items()}
    return AttendanceSummary(course_wise=course_wise, overall=tally(entries))


@dataclass(frozen=True)
class StudentAttendance:
    records: Sequence[AttendanceEntry]
    summary: AttendanceSummary


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def for_student_profile(self, student_profile_id: int) -> StudentAttendance:
        records = list(self._attendance.list_for_student(int(student_profile_id)))
        return StudentAttendance(records=records, summary=summarize_attendance(records))

    def for_student(self, identity: StudentIdentity) -> StudentAttendance:
        return self.for_student_profile(identity.require_profile().profile_id)
