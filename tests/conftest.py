from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from proctor_portal import create_app
from proctor_portal.academics.model import AcademicRecord
from proctor_portal.attendance.model import AttendanceEntry
from proctor_portal.container import wire_container
from proctor_portal.core.enums import QueryStatus, Role
from proctor_portal.core.exceptions import ValidationError
from proctor_portal.passwords.model import PasswordResetToken
from proctor_portal.queries.model import Query, QueryResponse
from proctor_portal.users.model import ProctorProfile, StudentProfile, User


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class Tables:
    """Shared in-memory rows; each fake repository reads and writes here."""

    def __init__(self):
        self._next_id: dict[str, int] = {}
        self.users: dict[int, User] = {}
        self.students: dict[int, StudentProfile] = {}
        self.proctors: dict[int, ProctorProfile] = {}
        self.attendance: dict[int, AttendanceEntry] = {}
        self.academics: dict[int, AcademicRecord] = {}
        self.queries: dict[int, Query] = {}
        self.responses: dict[int, QueryResponse] = {}
        self.tokens: dict[int, PasswordResetToken] = {}

    def next_id(self, table: str) -> int:
        value = self._next_id.get(table, 0) + 1
        self._next_id[table] = value
        return value


class FakeUsersRepo:
    def __init__(self, tables: Tables):
        self.t = tables

    def get_by_id(self, user_id):
        return self.t.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.t.users.values() if u.email == email), None)

    def get_by_username(self, username):
        return next((u for u in self.t.users.values() if u.username == username), None)

    def _require_unique(self, *, email, username, profile):
        # Mirrors the UNIQUE columns in database/schema.sql.
        taken = self.get_by_email(email) or self.get_by_username(username)
        code = getattr(profile, "student_id", None)
        if code is not None and any(p.student_id == code for p in self.t.students.values()):
            taken = True
        code = getattr(profile, "faculty_id", None)
        if code is not None and any(p.faculty_id == code for p in self.t.proctors.values()):
            taken = True
        if taken:
            raise ValidationError("Account details already in use")

    def _insert(self, *, email, username, password_hash, name, role):
        uid = self.t.next_id("users")
        user = User(
            user_id=uid,
            email=email,
            username=username,
            password_hash=password_hash,
            role=role,
            name=name,
            created_at=datetime(2025, 1, 1, 8, 0, 0),
        )
        self.t.users[uid] = user
        return user

    def create_student(self, *, email, username, password_hash, name, profile):
        self._require_unique(email=email, username=username, profile=profile)
        user = self._insert(email=email, username=username, password_hash=password_hash, name=name, role=Role.STUDENT)
        pid = self.t.next_id("students")
        self.t.students[pid] = StudentProfile(
            profile_id=pid,
            user_id=user.user_id,
            student_id=profile.student_id,
            department=profile.department,
            semester=profile.semester,
            proctor_id=profile.proctor_id,
        )
        return user

    def create_proctor(self, *, email, username, password_hash, name, profile):
        self._require_unique(email=email, username=username, profile=profile)
        user = self._insert(email=email, username=username, password_hash=password_hash, name=name, role=Role.PROCTOR)
        pid = self.t.next_id("proctors")
        self.t.proctors[pid] = ProctorProfile(
            profile_id=pid,
            user_id=user.user_id,
            faculty_id=profile.faculty_id,
            department=profile.department,
            designation=profile.designation,
            phone=profile.phone,
        )
        return user

    def update_password(self, user_id, password_hash):
        user = self.t.users.get(int(user_id))
        if not user:
            return False
        self.t.users[user.user_id] = replace(user, password_hash=password_hash)
        return True


class FakeProfilesRepo:
    def __init__(self, tables: Tables):
        self.t = tables

    def get_student_profile(self, user_id):
        return next((p for p in self.t.students.values() if p.user_id == int(user_id)), None)

    def get_student_profile_by_id(self, profile_id):
        return self.t.students.get(int(profile_id))

    def get_student_profile_by_code(self, student_id):
        return next((p for p in self.t.students.values() if p.student_id == student_id), None)

    def get_proctor_profile(self, user_id):
        return next((p for p in self.t.proctors.values() if p.user_id == int(user_id)), None)

    def get_proctor_profile_by_id(self, profile_id):
        return self.t.proctors.get(int(profile_id))

    def get_proctor_profile_by_code(self, faculty_id):
        return next((p for p in self.t.proctors.values() if p.faculty_id == faculty_id), None)

    def list_students_by_proctor(self, proctor_profile_id):
        return [p for p in self.t.students.values() if p.proctor_id == int(proctor_profile_id)]

    def assign_proctor(self, student_profile_id, proctor_profile_id):
        profile = self.t.students.get(int(student_profile_id))
        if not profile:
            return False
        self.t.students[profile.profile_id] = replace(profile, proctor_id=proctor_profile_id)
        return True

    def update_cgpa(self, student_profile_id, cgpa):
        profile = self.t.students.get(int(student_profile_id))
        if not profile:
            return False
        self.t.students[profile.profile_id] = replace(profile, cgpa=float(cgpa))
        return True


class FakeAttendanceRepo:
    def __init__(self, tables: Tables):
        self.t = tables

    def list_for_student(self, student_profile_id):
        rows = [e for e in self.t.attendance.values() if e.student_profile_id == int(student_profile_id)]
        return sorted(rows, key=lambda e: (e.class_date, e.attendance_id))

    def create_entry(self, *, student_profile_id, course_id, course_name, class_date, is_present):
        aid = self.t.next_id("attendance")
        self.t.attendance[aid] = AttendanceEntry(
            attendance_id=aid,
            student_profile_id=int(student_profile_id),
            course_id=course_id,
            course_name=course_name,
            class_date=class_date,
            is_present=bool(is_present),
        )
        return aid


class FakeAcademicsRepo:
    def __init__(self, tables: Tables):
        self.t = tables

    def list_for_student(self, student_profile_id):
        return [r for r in self.t.academics.values() if r.student_profile_id == int(student_profile_id)]

    def create_record(
        self,
        *,
        student_profile_id,
        course_id,
        course_name,
        semester,
        internal_marks=0.0,
        quiz_marks=0.0,
        project_marks=0.0,
        semester_marks=0.0,
        cgpa_contribution=0.0,
    ):
        rid = self.t.next_id("academics")
        self.t.academics[rid] = AcademicRecord(
            record_id=rid,
            student_profile_id=int(student_profile_id),
            course_id=course_id,
            course_name=course_name,
            semester=int(semester),
            internal_marks=internal_marks,
            quiz_marks=quiz_marks,
            project_marks=project_marks,
            semester_marks=semester_marks,
            cgpa_contribution=cgpa_contribution,
        )
        return rid


class FakeQueriesRepo:
    def __init__(self, tables: Tables):
        self.t = tables

    def create_query(self, *, student_user_id, proctor_user_id, subject, description, created_at):
        qid = self.t.next_id("queries")
        query = Query(
            query_id=qid,
            student_user_id=int(student_user_id),
            proctor_user_id=int(proctor_user_id),
            subject=subject,
            description=description,
            status=QueryStatus.PENDING,
            created_at=created_at,
            updated_at=created_at,
        )
        self.t.queries[qid] = query
        return query

    def get_by_id(self, query_id):
        return self.t.queries.get(int(query_id))

    def _newest_first(self, rows):
        return sorted(rows, key=lambda q: (q.created_at, q.query_id), reverse=True)

    def list_for_student(self, student_user_id):
        return self._newest_first(q for q in self.t.queries.values() if q.student_user_id == int(student_user_id))

    def list_for_proctor(self, proctor_user_id):
        return self._newest_first(q for q in self.t.queries.values() if q.proctor_user_id == int(proctor_user_id))

    def update_status(self, query_id, *, status, updated_at):
        query = self.t.queries.get(int(query_id))
        if not query:
            return None
        updated = replace(query, status=status, updated_at=updated_at)
        self.t.queries[query.query_id] = updated
        return updated

    def create_response(self, *, query_id, user_id, response, created_at):
        rid = self.t.next_id("responses")
        row = QueryResponse(
            response_id=rid,
            query_id=int(query_id),
            user_id=int(user_id),
            response=response,
            created_at=created_at,
        )
        self.t.responses[rid] = row
        return row

    def list_responses(self, query_id):
        rows = [r for r in self.t.responses.values() if r.query_id == int(query_id)]
        return sorted(rows, key=lambda r: (r.created_at, r.response_id))


class FakeResetTokensRepo:
    def __init__(self, tables: Tables):
        self.t = tables

    def create_token(self, *, user_id, token, expires_at, created_at):
        tid = self.t.next_id("tokens")
        self.t.tokens[tid] = PasswordResetToken(
            token_id=tid,
            user_id=int(user_id),
            token=token,
            expires_at=expires_at,
            created_at=created_at,
        )
        return tid

    def get_by_token(self, token):
        return next((t for t in self.t.tokens.values() if t.token == token), None)

    def mark_used(self, token_id, *, used_at):
        row = self.t.tokens.get(int(token_id))
        if not row or row.used_at is not None:
            return False
        self.t.tokens[row.token_id] = replace(row, used_at=used_at)
        return True

    def delete_expired_or_used(self, now):
        stale = [tid for tid, t in self.t.tokens.items() if t.expires_at <= now or t.used_at is not None]
        for tid in stale:
            del self.t.tokens[tid]
        return len(stale)


class RecordingNotifier:
    def __init__(self):
        self.sent: list[dict] = []

    def send_reset_link(self, *, email, name, link):
        self.sent.append({"email": email, "name": name, "link": link})


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 1, 9, 0, 0))


@pytest.fixture
def tables():
    return Tables()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def container(tables, clock, notifier):
    return wire_container(
        conn=None,
        users_repo=FakeUsersRepo(tables),
        profiles_repo=FakeProfilesRepo(tables),
        attendance_repo=FakeAttendanceRepo(tables),
        academics_repo=FakeAcademicsRepo(tables),
        queries_repo=FakeQueriesRepo(tables),
        reset_tokens_repo=FakeResetTokensRepo(tables),
        notifier=notifier,
        client_url="http://portal.test",
        reset_ttl_minutes=60,
        clock=clock,
    )


@pytest.fixture
def make_proctor(container):
    def _make(username="proctor", faculty_id="F2001", password="secret123"):
        return container.auth_service.register(
            email=f"{username}@example.com",
            username=username,
            password=password,
            name=f"Proctor {username}",
            role="proctor",
            proctor_profile={"facultyId": faculty_id, "department": "CSE", "designation": "Professor"},
        )

    return _make


@pytest.fixture
def make_student(container):
    def _make(username="student", student_id="S1001", proctor=None, password="secret123"):
        proctor_id = None
        if proctor is not None:
            proctor_id = container.profiles_repo.get_proctor_profile(proctor.user_id).profile_id
        return container.auth_service.register(
            email=f"{username}@example.com",
            username=username,
            password=password,
            name=f"Student {username}",
            role="student",
            student_profile={"studentId": student_id, "department": "CSE", "semester": 3, "proctorId": proctor_id},
        )

    return _make


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()
