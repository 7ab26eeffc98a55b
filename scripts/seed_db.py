"""Demo data: one proctor, one student assigned to them, and a few weeks of
attendance plus academic records. Safe to run more than once.
"""
from __future__ import annotations

import importlib
import sys
from datetime import datetime, timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv

from proctor_portal.container import Container, build_container
from proctor_portal.core.enums import Role
from proctor_portal.settings import get_settings_module
from proctor_portal.users.model import User

DEMO_PASSWORD = "password123"

COURSES = [
    ("CS101", "Introduction to Computer Science"),
    ("CS102", "Data Structures"),
    ("CS103", "Algorithms"),
    ("MTH101", "Calculus I"),
]

# (internal, quiz, project, semester, cgpa contribution)
MARKS = {
    "CS101": (18, 8, 17, 42, 8.5),
    "CS102": (16, 7, 15, 38, 7.6),
    "CS103": (14, 6, 16, 35, 7.1),
    "MTH101": (12, 5, 13, 30, 6.0),
}


def _ensure_user(container: Container, **kwargs) -> User:
    existing = container.users_repo.get_by_email(kwargs["email"])
    if existing:
        return existing
    return container.auth_service.register(**kwargs)


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), client_url=settings.CLIENT_URL)

    proctor = _ensure_user(
        container,
        email="proctor@example.com",
        username="proctor",
        password=DEMO_PASSWORD,
        name="Dr. Meera Rao",
        role=Role.PROCTOR.value,
        proctor_profile={
            "facultyId": "F2001",
            "department": "Computer Science",
            "designation": "Associate Professor",
            "phone": "555-0100",
        },
    )
    student = _ensure_user(
        container,
        email="student@example.com",
        username="student",
        password=DEMO_PASSWORD,
        name="Arjun Kumar",
        role=Role.STUDENT.value,
        student_profile={"studentId": "S1001", "department": "Computer Science", "semester": 3},
    )

    container.profile_service.assign_proctor(student_id="S1001", faculty_id="F2001")
    profile = container.profiles_repo.get_student_profile(student.user_id)

    if not container.attendance_repo.list_for_student(profile.profile_id):
        start = datetime.now().replace(hour=9, minute=0, second=0, microsecond=0) - timedelta(days=28)
        for day in range(20):
            class_date = start + timedelta(days=day)
            for idx, (course_id, course_name) in enumerate(COURSES):
                container.attendance_repo.create_entry(
                    student_profile_id=profile.profile_id,
                    course_id=course_id,
                    course_name=course_name,
                    class_date=class_date + timedelta(hours=idx),
                    # Roughly 80% attendance, lower for the last course.
                    is_present=(day + idx) % (4 if idx < 3 else 3) != 0,
                )

    if not container.academics_repo.list_for_student(profile.profile_id):
        contributions = []
        for course_id, course_name in COURSES:
            internal, quiz, project, semester, cgpa = MARKS[course_id]
            container.academics_repo.create_record(
                student_profile_id=profile.profile_id,
                course_id=course_id,
                course_name=course_name,
                semester=profile.semester,
                internal_marks=internal,
                quiz_marks=quiz,
                project_marks=project,
                semester_marks=semester,
                cgpa_contribution=cgpa,
            )
            contributions.append(cgpa)
        container.profiles_repo.update_cgpa(profile.profile_id, round(sum(contributions) / len(contributions), 2))

    print(f"OK: Seeded demo accounts -> {proctor.email}, {student.email} (password: {DEMO_PASSWORD})")


if __name__ == "__main__":
    main()
