from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewProctorProfile, NewStudentProfile, ProctorProfile, StudentProfile, User


class UserRepository(Protocol):
    """Repository interface for users and their profiles.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def create_student(
        self,
        *,
        email: str,
        username: str,
        password_hash: str,
        name: str,
        profile: NewStudentProfile,
    ) -> User:
        """Insert the user row and its student profile in one transaction."""

        raise NotImplementedError

    def create_proctor(
        self,
        *,
        email: str,
        username: str,
        password_hash: str,
        name: str,
        profile: NewProctorProfile,
    ) -> User:
        raise NotImplementedError

    def update_password(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError


class ProfileRepository(Protocol):
    def get_student_profile(self, user_id: int) -> Optional[StudentProfile]:
        raise NotImplementedError

    def get_student_profile_by_id(self, profile_id: int) -> Optional[StudentProfile]:
        raise NotImplementedError

    def get_student_profile_by_code(self, student_id: str) -> Optional[StudentProfile]:
        raise NotImplementedError

    def get_proctor_profile(self, user_id: int) -> Optional[ProctorProfile]:
        raise NotImplementedError

    def get_proctor_profile_by_id(self, profile_id: int) -> Optional[ProctorProfile]:
        raise NotImplementedError

    def get_proctor_profile_by_code(self, faculty_id: str) -> Optional[ProctorProfile]:
        raise NotImplementedError

    def list_students_by_proctor(self, proctor_profile_id: int) -> Sequence[StudentProfile]:
        raise NotImplementedError

    def assign_proctor(self, student_profile_id: int, proctor_profile_id: Optional[int]) -> bool:
        raise NotImplementedError

    def update_cgpa(self, student_profile_id: int, cgpa: float) -> bool:
        raise NotImplementedError
