from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    FieldErrors,
    optional_int,
    require_choice,
    require_email,
    require_int,
    require_non_empty,
    require_password,
)
from ..core.constants import PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .identity import Identity, ProctorIdentity, StudentIdentity
from .model import NewProctorProfile, NewStudentProfile, ProctorProfile, User
from .repository import ProfileRepository, UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use cases: register, login and resolving the session user."""

    def __init__(self, users: UserRepository, profiles: ProfileRepository):
        self._users = users
        self._profiles = profiles

    @staticmethod
    def _student_profile(data: Any) -> NewStudentProfile:
        if not isinstance(data, Mapping):
            raise ValidationError("Student profile information is required")

        errors = FieldErrors()
        student_id = errors.check(require_non_empty, data.get("studentId"), "studentId")
        department = errors.check(require_non_empty, data.get("department"), "department")
        semester = errors.check(require_int, data.get("semester"), "semester", minimum=1)
        proctor_id = errors.check(optional_int, data.get("proctorId"), "proctorId")
        errors.raise_if_any("Missing required student profile information")

        return NewStudentProfile(
            student_id=student_id,
            department=department,
            semester=semester,
            proctor_id=proctor_id,
        )

    @staticmethod
    def _proctor_profile(data: Any) -> NewProctorProfile:
        if not isinstance(data, Mapping):
            raise ValidationError("Proctor profile information is required")

        errors = FieldErrors()
        faculty_id = errors.check(require_non_empty, data.get("facultyId"), "facultyId")
        department = errors.check(require_non_empty, data.get("department"), "department")
        designation = errors.check(require_non_empty, data.get("designation"), "designation")
        errors.raise_if_any("Missing required proctor profile information")

        phone = data.get("phone") or ""
        return NewProctorProfile(
            faculty_id=faculty_id,
            department=department,
            designation=designation,
            phone=str(phone).strip(),
        )

    def register(
        self,
        *,
        email: Any,
        username: Any,
        password: Any,
        name: Any,
        role: Any,
        student_profile: Any = None,
        proctor_profile: Any = None,
    ) -> User:
        errors = FieldErrors()
        email = errors.check(require_email, email, "email")
        username = errors.check(require_non_empty, username, "username")
        password = errors.check(require_password, password, "password", PASSWORD_MIN_LENGTH)
        name = errors.check(require_non_empty, name, "name")
        role = errors.check(require_choice, role, "role", Role)
        errors.raise_if_any("Missing required user information")

        # Profile data is checked before anything is written.
        if role == Role.STUDENT:
            new_profile = self._student_profile(student_profile)
            if new_profile.proctor_id is not None and not self._profiles.get_proctor_profile_by_id(
                new_profile.proctor_id
            ):
                raise ValidationError("Proctor not found", errors={"proctorId": "Unknown proctor"})
            if self._profiles.get_student_profile_by_code(new_profile.student_id):
                raise ValidationError("Student ID already exists", errors={"studentId": "Student ID already exists"})
        else:
            new_profile = self._proctor_profile(proctor_profile)
            if self._profiles.get_proctor_profile_by_code(new_profile.faculty_id):
                raise ValidationError("Faculty ID already exists", errors={"facultyId": "Faculty ID already exists"})

        if self._users.get_by_email(email):
            raise ValidationError("Email already in use", errors={"email": "Email already in use"})
        if self._users.get_by_username(username):
            raise ValidationError("Username already exists", errors={"username": "Username already exists"})

        password_hash = generate_password_hash(password)
        if role == Role.STUDENT:
            user = self._users.create_student(
                email=email, username=username, password_hash=password_hash, name=name, profile=new_profile
            )
        else:
            user = self._users.create_proctor(
                email=email, username=username, password_hash=password_hash, name=name, profile=new_profile
            )

        logger.info("registered %s account user_id=%s", user.role.value, user.user_id)
        return user

    def authenticate(self, *, email: Any, password: Any, role: Any) -> User:
        errors = FieldErrors()
        email = errors.check(require_email, email, "email")
        password = errors.check(require_password, password, "password", PASSWORD_MIN_LENGTH)
        role = errors.check(require_choice, role, "role", Role)
        errors.raise_if_any("Invalid login data")

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        if user.role != role:
            raise AuthorizationError(f"Authentication failed. You are not a {role.value}.")

        return user

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("Not authenticated")
        return user

    def resolve_identity(self, user_id: int) -> Identity:
        user = self.get_user(user_id)
        if user.role == Role.STUDENT:
            return StudentIdentity(user=user, profile=self._profiles.get_student_profile(user.user_id))
        if user.role == Role.PROCTOR:
            return ProctorIdentity(user=user, profile=self._profiles.get_proctor_profile(user.user_id))
        raise AuthenticationError("Invalid user role")


@dataclass(frozen=True)
class AssignedProctor:
    profile: ProctorProfile
    user: User


class ProfileService:
    """Use case: read profiles and the student -> proctor link."""

    def __init__(self, users: UserRepository, profiles: ProfileRepository):
        self._users = users
        self._profiles = profiles

    def assigned_proctor(self, identity: StudentIdentity) -> Optional[AssignedProctor]:
        profile = identity.require_profile()
        if profile.proctor_id is None:
            return None
        proctor_profile = self._profiles.get_proctor_profile_by_id(profile.proctor_id)
        if not proctor_profile:
            return None
        proctor_user = self._users.get_by_id(proctor_profile.user_id)
        if not proctor_user:
            return None
        return AssignedProctor(profile=proctor_profile, user=proctor_user)

    def require_assigned_proctor(self, identity: StudentIdentity) -> AssignedProctor:
        profile = identity.require_profile()
        if profile.proctor_id is None:
            raise ValidationError("No proctor assigned to student")
        assigned = self.assigned_proctor(identity)
        if assigned is None:
            raise NotFoundError("Proctor not found")
        return assigned

    def assign_proctor(self, *, student_id: str, faculty_id: str) -> None:
        """Maintenance operation: link a student to a proctor by their public ids."""
        student = self._profiles.get_student_profile_by_code(student_id)
        if student is None:
            raise NotFoundError(f"Student {student_id} not found")
        proctor = self._profiles.get_proctor_profile_by_code(faculty_id)
        if proctor is None:
            raise NotFoundError(f"Proctor {faculty_id} not found")
        self._profiles.assign_proctor(student.profile_id, proctor.profile_id)
        logger.info("assigned proctor %s to student %s", faculty_id, student_id)
