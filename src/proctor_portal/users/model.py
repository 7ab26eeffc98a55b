from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account (student or proctor).

    Note: Plain data object, no DB access here.
    """

    user_id: int
    email: str
    username: str
    password_hash: str
    role: Role
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentProfile:
    profile_id: int
    user_id: int
    student_id: str
    department: str
    semester: int
    proctor_id: Optional[int] = None
    cgpa: float = 0.0


@dataclass(frozen=True)
class ProctorProfile:
    profile_id: int
    user_id: int
    faculty_id: str
    department: str
    designation: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class NewStudentProfile:
    student_id: str
    department: str
    semester: int
    proctor_id: Optional[int] = None


@dataclass(frozen=True)
class NewProctorProfile:
    faculty_id: str
    department: str
    designation: str
    phone: str = ""
