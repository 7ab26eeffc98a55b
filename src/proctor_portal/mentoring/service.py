from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..academics.model import AcademicRecord
from ..academics.repository import AcademicRepository
from ..attendance.model import AttendanceEntry, AttendanceTally
from ..attendance.repository import AttendanceRepository
from ..attendance.service import tally
from ..core.constants import (
    ATTENDANCE_GOOD_PERCENT,
    ATTENDANCE_HIGH_RISK_PERCENT,
    CGPA_AT_RISK,
    CGPA_HIGH_RISK,
    CGPA_MEDIUM_RISK,
)
from ..core.enums import RiskLevel
from ..core.exceptions import AuthorizationError, NotFoundError
from ..users.identity import ProctorIdentity
from ..users.model import StudentProfile, User
from ..users.repository import ProfileRepository, UserRepository


def risk_level(attendance_percent: float, cgpa: float) -> RiskLevel:
    if attendance_percent < ATTENDANCE_HIGH_RISK_PERCENT or cgpa < CGPA_HIGH_RISK:
        return RiskLevel.HIGH
    if attendance_percent < ATTENDANCE_GOOD_PERCENT or cgpa < CGPA_MEDIUM_RISK:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def is_at_risk(attendance_percent: float, cgpa: float) -> bool:
    return attendance_percent < ATTENDANCE_GOOD_PERCENT or cgpa < CGPA_AT_RISK


@dataclass(frozen=True)
class Mentee:
    profile: StudentProfile
    user: User
    attendance: AttendanceTally

    @property
    def risk_level(self) -> RiskLevel:
        return risk_level(self.attendance.percentage, self.profile.cgpa)


@dataclass(frozen=True)
class MenteeOverview:
    mentees: Sequence[Mentee]
    good_attendance: int
    at_risk: int


@dataclass(frozen=True)
class MenteeDetail:
    profile: StudentProfile
    user: User
    attendance: Sequence[AttendanceEntry]
    academics: Sequence[AcademicRecord]


class MentoringService:
    """Use cases: a proctor looking at the students assigned to them."""

    def __init__(
        self,
        users: UserRepository,
        profiles: ProfileRepository,
        attendance: AttendanceRepository,
        academics: AcademicRepository,
    ):
        self._users = users
        self._profiles = profiles
        self._attendance = attendance
        self._academics = academics

    def list_mentees(self, identity: ProctorIdentity) -> MenteeOverview:
        proctor = identity.require_profile()

        mentees: list[Mentee] = []
        for student in self._profiles.list_students_by_proctor(proctor.profile_id):
            user = self._users.get_by_id(student.user_id)
            if not user:
                continue
            mentees.append(
                Mentee(
                    profile=student,
                    user=user,
                    attendance=tally(self._attendance.list_for_student(student.profile_id)),
                )
            )

        return MenteeOverview(
            mentees=mentees,
            good_attendance=sum(1 for m in mentees if m.attendance.percentage >= ATTENDANCE_GOOD_PERCENT),
            at_risk=sum(1 for m in mentees if is_at_risk(m.attendance.percentage, m.profile.cgpa)),
        )

    def mentee_detail(self, identity: ProctorIdentity, *, student_profile_id: int) -> MenteeDetail:
        student = self._profiles.get_student_profile_by_id(int(student_profile_id))
        if not student:
            raise NotFoundError("Student not found")

        if identity.profile is None or student.proctor_id != identity.profile.profile_id:
            raise AuthorizationError("You are not the proctor for this student")

        user = self._users.get_by_id(student.user_id)
        if not user:
            raise NotFoundError("Student user not found")

        return MenteeDetail(
            profile=student,
            user=user,
            attendance=list(self._attendance.list_for_student(student.profile_id)),
            academics=list(self._academics.list_for_student(student.profile_id)),
        )
