from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import NewProctorProfile, NewStudentProfile, ProctorProfile, StudentProfile, User
from .repository import ProfileRepository, UserRepository

_USER_COLUMNS = "user_id, email, username, password_hash, role, name, created_at"
_STUDENT_COLUMNS = "profile_id, user_id, student_id, department, proctor_id, semester, cgpa"
_PROCTOR_COLUMNS = "profile_id, user_id, faculty_id, department, phone, designation"


@contextmanager
def _unique_account():
    """Turn a UNIQUE-key clash on users or profiles into a ValidationError."""
    try:
        yield
    except mysql.connector.IntegrityError as e:
        if e.errno != errorcode.ER_DUP_ENTRY:
            raise
        raise ValidationError("Account details already in use") from e


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        name=row["name"],
        created_at=row.get("created_at"),
    )


def _to_student(row: Dict[str, Any]) -> StudentProfile:
    return StudentProfile(
        profile_id=int(row["profile_id"]),
        user_id=int(row["user_id"]),
        student_id=row["student_id"],
        department=row["department"],
        semester=int(row["semester"]),
        proctor_id=int(row["proctor_id"]) if row.get("proctor_id") is not None else None,
        cgpa=as_float(row.get("cgpa")),
    )


def _to_proctor(row: Dict[str, Any]) -> ProctorProfile:
    return ProctorProfile(
        profile_id=int(row["profile_id"]),
        user_id=int(row["user_id"]),
        faculty_id=row["faculty_id"],
        department=row["department"],
        designation=row["designation"],
        phone=row.get("phone"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: Any) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("username", username)

    def _insert_user(self, cur, *, email: str, username: str, password_hash: str, role: Role, name: str) -> int:
        cur.execute(
            """
            INSERT INTO users(email, username, password_hash, role, name)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (email, username, password_hash, role.value, name),
        )
        return int(cur.lastrowid)

    def _reload(self, cur, user_id: int) -> User:
        cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
        return _to_user(fetchone(cur))

    def create_student(
        self,
        *,
        email: str,
        username: str,
        password_hash: str,
        name: str,
        profile: NewStudentProfile,
    ) -> User:
        with _unique_account(), db_cursor(self._conn_factory) as (_, cur):
            user_id = self._insert_user(
                cur, email=email, username=username, password_hash=password_hash, role=Role.STUDENT, name=name
            )
            cur.execute(
                """
                INSERT INTO student_profiles(user_id, student_id, department, proctor_id, semester, cgpa)
                VALUES(%s,%s,%s,%s,%s,0)
                """,
                (user_id, profile.student_id, profile.department, profile.proctor_id, int(profile.semester)),
            )
            return self._reload(cur, user_id)

    def create_proctor(
        self,
        *,
        email: str,
        username: str,
        password_hash: str,
        name: str,
        profile: NewProctorProfile,
    ) -> User:
        with _unique_account(), db_cursor(self._conn_factory) as (_, cur):
            user_id = self._insert_user(
                cur, email=email, username=username, password_hash=password_hash, role=Role.PROCTOR, name=name
            )
            cur.execute(
                """
                INSERT INTO proctor_profiles(user_id, faculty_id, department, phone, designation)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (user_id, profile.faculty_id, profile.department, profile.phone, profile.designation),
            )
            return self._reload(cur, user_id)

    def update_password(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_student_profile(self, user_id: int) -> Optional[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM student_profiles WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_student_profile_by_id(self, profile_id: int) -> Optional[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM student_profiles WHERE profile_id=%s", (int(profile_id),))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_student_profile_by_code(self, student_id: str) -> Optional[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM student_profiles WHERE student_id=%s", (student_id,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_proctor_profile(self, user_id: int) -> Optional[ProctorProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROCTOR_COLUMNS} FROM proctor_profiles WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_proctor(row) if row else None

    def get_proctor_profile_by_id(self, profile_id: int) -> Optional[ProctorProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROCTOR_COLUMNS} FROM proctor_profiles WHERE profile_id=%s", (int(profile_id),))
            row = fetchone(cur)
            return _to_proctor(row) if row else None

    def get_proctor_profile_by_code(self, faculty_id: str) -> Optional[ProctorProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROCTOR_COLUMNS} FROM proctor_profiles WHERE faculty_id=%s", (faculty_id,))
            row = fetchone(cur)
            return _to_proctor(row) if row else None

    def list_students_by_proctor(self, proctor_profile_id: int) -> Sequence[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STUDENT_COLUMNS}
                FROM student_profiles
                WHERE proctor_id=%s
                ORDER BY student_id
                """,
                (int(proctor_profile_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def assign_proctor(self, student_profile_id: int, proctor_profile_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE student_profiles SET proctor_id=%s WHERE profile_id=%s",
                (proctor_profile_id, int(student_profile_id)),
            )
            return cur.rowcount > 0

    def update_cgpa(self, student_profile_id: int, cgpa: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE student_profiles SET cgpa=%s WHERE profile_id=%s",
                (float(cgpa), int(student_profile_id)),
            )
            return cur.rowcount > 0
