from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .academics.mysql_academic_repository import MySQLAcademicRepository
from .academics.repository import AcademicRepository
from .academics.service import AcademicService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, now_local
from .core.constants import DEFAULT_RESET_TOKEN_TTL_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .mentoring.service import MentoringService
from .passwords.mailer import FlaskMailResetNotifier, ResetNotifier
from .passwords.mysql_reset_token_repository import MySQLResetTokenRepository
from .passwords.repository import ResetTokenRepository
from .passwords.service import PasswordResetService
from .queries.mysql_query_repository import MySQLQueryRepository
from .queries.repository import QueryRepository
from .queries.service import QueryService
from .users.mysql_user_repository import MySQLProfileRepository, MySQLUserRepository
from .users.repository import ProfileRepository, UserRepository
from .users.service import AuthService, ProfileService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    profiles_repo: ProfileRepository
    attendance_repo: AttendanceRepository
    academics_repo: AcademicRepository
    queries_repo: QueryRepository
    reset_tokens_repo: ResetTokenRepository

    auth_service: AuthService
    profile_service: ProfileService
    attendance_service: AttendanceService
    academic_service: AcademicService
    mentoring_service: MentoringService
    query_service: QueryService
    password_reset_service: PasswordResetService


def wire_container(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    profiles_repo: ProfileRepository,
    attendance_repo: AttendanceRepository,
    academics_repo: AcademicRepository,
    queries_repo: QueryRepository,
    reset_tokens_repo: ResetTokenRepository,
    notifier: ResetNotifier,
    client_url: str,
    reset_ttl_minutes: int = DEFAULT_RESET_TOKEN_TTL_MINUTES,
    clock: Clock = now_local,
) -> Container:
    """Build the services on top of already-constructed repositories."""
    auth_service = AuthService(users_repo, profiles_repo)
    profile_service = ProfileService(users_repo, profiles_repo)
    attendance_service = AttendanceService(attendance_repo)
    academic_service = AcademicService(academics_repo, profiles_repo)
    mentoring_service = MentoringService(users_repo, profiles_repo, attendance_repo, academics_repo)
    query_service = QueryService(queries_repo, users_repo, profile_service, clock=clock)
    password_reset_service = PasswordResetService(
        users_repo,
        reset_tokens_repo,
        notifier,
        client_url=client_url,
        ttl_minutes=reset_ttl_minutes,
        clock=clock,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        profiles_repo=profiles_repo,
        attendance_repo=attendance_repo,
        academics_repo=academics_repo,
        queries_repo=queries_repo,
        reset_tokens_repo=reset_tokens_repo,
        auth_service=auth_service,
        profile_service=profile_service,
        attendance_service=attendance_service,
        academic_service=academic_service,
        mentoring_service=mentoring_service,
        query_service=query_service,
        password_reset_service=password_reset_service,
    )


def build_container(
    *,
    db_config: dict,
    client_url: str,
    reset_ttl_minutes: int = DEFAULT_RESET_TOKEN_TTL_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire_container(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        profiles_repo=MySQLProfileRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        academics_repo=MySQLAcademicRepository(conn),
        queries_repo=MySQLQueryRepository(conn),
        reset_tokens_repo=MySQLResetTokenRepository(conn),
        notifier=FlaskMailResetNotifier(),
        client_url=client_url,
        reset_ttl_minutes=reset_ttl_minutes,
    )
