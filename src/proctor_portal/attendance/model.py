from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one class session for one student (append-only log)."""

    attendance_id: int
    student_profile_id: int
    course_id: str
    course_name: str
    class_date: datetime
    is_present: bool


@dataclass(frozen=True)
class AttendanceTally:
    total: int = 0
    present: int = 0
    percentage: float = 0.0


@dataclass(frozen=True)
class AttendanceSummary:
    """Read-model for dashboards: per-course tallies plus the overall tally."""

    course_wise: dict[str, AttendanceTally] = field(default_factory=dict)
    overall: AttendanceTally = field(default_factory=AttendanceTally)
