from __future__ import annotations

from proctor_portal.academics.model import AcademicRecord
from proctor_portal.academics.service import subject_performance


def _record(rid, course, internal, quiz, project, semester):
    return AcademicRecord(
        record_id=rid,
        student_profile_id=rid,
        course_id=course[:5],
        course_name=course,
        semester=3,
        internal_marks=internal,
        quiz_marks=quiz,
        project_marks=project,
        semester_marks=semester,
    )


def test_total_marks_treats_missing_as_zero():
    assert _record(1, "Algorithms", 10, None, 5, None).total_marks == 15


def test_average_per_subject():
    records = [
        _record(1, "Data Structures", 20, 10, 20, 50),
        _record(2, "Data Structures", 10, 5, 10, 26),
        _record(3, "Calculus I", 15, 5, 0, 40),
    ]

    report = {p.subject: p.avg_score for p in subject_performance(records)}

    assert report == {"Data Structures": 75.5, "Calculus I": 60.0}


def test_rounding_to_two_decimals():
    records = [_record(i, "Algorithms", 10, 0, 0, 0) for i in range(2)] + [_record(3, "Algorithms", 11, 0, 0, 0)]
    (perf,) = subject_performance(records)
    assert perf.avg_score == 10.33


def test_subject_report_covers_only_assigned_students(container, make_proctor, make_student):
    proctor = make_proctor()
    mine = make_student(username="mine", student_id="S1", proctor=proctor)
    other = make_student(username="other", student_id="S2")

    for user, marks in ((mine, 80), (other, 10)):
        profile = container.profiles_repo.get_student_profile(user.user_id)
        container.academics_repo.create_record(
            student_profile_id=profile.profile_id,
            course_id="CS103",
            course_name="Algorithms",
            semester=3,
            semester_marks=marks,
        )

    identity = container.auth_service.resolve_identity(proctor.user_id)
    report = container.academic_service.subject_report(identity)

    assert [(p.subject, p.avg_score) for p in report] == [("Algorithms", 80.0)]
