"""Resolved request identity.

Handlers receive one of two variants and branch with ``isinstance``; the
role string never leaves this module.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from ..core.enums import Role
from ..core.exceptions import NotFoundError
from .model import ProctorProfile, StudentProfile, User


@dataclass(frozen=True)
class StudentIdentity:
    role: ClassVar[Role] = Role.STUDENT

    user: User
    profile: Optional[StudentProfile]

    @property
    def user_id(self) -> int:
        return self.user.user_id

    def require_profile(self) -> StudentProfile:
        if self.profile is None:
            raise NotFoundError("Student profile not found")
        return self.profile


@dataclass(frozen=True)
class ProctorIdentity:
    role: ClassVar[Role] = Role.PROCTOR

    user: User
    profile: Optional[ProctorProfile]

    @property
    def user_id(self) -> int:
        return self.user.user_id

    def require_profile(self) -> ProctorProfile:
        if self.profile is None:
            raise NotFoundError("Proctor profile not found")
        return self.profile


Identity = Union[StudentIdentity, ProctorIdentity]
