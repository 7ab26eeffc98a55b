from __future__ import annotations

import pytest

from proctor_portal.core.enums import QueryStatus
from proctor_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError


@pytest.fixture
def parties(container, make_proctor, make_student):
    proctor = make_proctor()
    student = make_student(proctor=proctor)
    outsider = make_student(username="outsider", student_id="S9", proctor=make_proctor(username="p2", faculty_id="F9"))
    resolve = container.auth_service.resolve_identity
    return resolve(student.user_id), resolve(proctor.user_id), resolve(outsider.user_id)


def _raise(container, student):
    return container.query_service.create(
        student, subject="Attendance shortage", description="I missed classes due to illness last week."
    )


def test_create_is_always_pending_and_routed_to_assigned_proctor(container, parties, clock):
    student, proctor, _ = parties

    query = _raise(container, student)

    assert query.status == QueryStatus.PENDING
    assert query.student_user_id == student.user_id
    assert query.proctor_user_id == proctor.user_id
    assert query.created_at == clock()


def test_create_validates_before_proctor_lookup(container, make_student):
    lonely = container.auth_service.resolve_identity(make_student(username="lonely", student_id="S5").user_id)

    with pytest.raises(ValidationError) as e:
        container.query_service.create(lonely, subject="Hi", description="short")
    assert e.value.message == "Invalid query data"
    assert set(e.value.errors) == {"subject", "description"}

    with pytest.raises(ValidationError, match="No proctor assigned to student"):
        container.query_service.create(lonely, subject="Help", description="Need help with my timetable.")


def test_subject_length_limit(container, parties):
    student, _, _ = parties
    description = "I missed classes due to illness last week."

    query = container.query_service.create(student, subject="x" * 255, description=description)
    assert len(query.subject) == 255

    with pytest.raises(ValidationError) as e:
        container.query_service.create(student, subject="x" * 256, description=description)
    assert e.value.message == "Invalid query data"
    assert e.value.errors == {"subject": "subject must be at most 255 characters"}


def test_lifecycle_scenario(container, parties, clock):
    student, proctor, _ = parties
    query = _raise(container, student)

    clock.advance(minutes=5)
    container.query_service.proctor_respond(proctor, query_id=query.query_id, text="Please submit a medical note.")
    assert container.queries_repo.get_by_id(query.query_id).status == QueryStatus.IN_PROGRESS

    clock.advance(minutes=5)
    updated = container.query_service.update_status(proctor, query_id=query.query_id, status="resolved")
    assert updated.status == QueryStatus.RESOLVED
    assert updated.updated_at == clock()


def test_generic_respond_leaves_status_alone(container, parties):
    student, proctor, _ = parties
    query = _raise(container, student)

    container.query_service.respond(proctor, query_id=query.query_id, text="Looking into it")
    container.query_service.respond(student, query_id=query.query_id, text="Thanks")

    assert container.queries_repo.get_by_id(query.query_id).status == QueryStatus.PENDING


def test_proctor_respond_only_moves_pending(container, parties):
    student, proctor, _ = parties
    query = _raise(container, student)
    container.query_service.update_status(proctor, query_id=query.query_id, status="resolved")

    container.query_service.proctor_respond(proctor, query_id=query.query_id, text="One more note")

    assert container.queries_repo.get_by_id(query.query_id).status == QueryStatus.RESOLVED


def test_non_party_is_rejected_everywhere(container, parties):
    student, proctor, outsider = parties
    query = _raise(container, student)
    other_proctor = container.auth_service.resolve_identity(
        container.profiles_repo.get_proctor_profile_by_code("F9").user_id
    )

    with pytest.raises(AuthorizationError, match="You do not have permission to view this query"):
        container.query_service.get_detail(outsider, query_id=query.query_id)
    with pytest.raises(AuthorizationError, match="You do not have permission to respond to this query"):
        container.query_service.respond(outsider, query_id=query.query_id, text="hello")
    with pytest.raises(AuthorizationError, match="You cannot respond to this query"):
        container.query_service.proctor_respond(other_proctor, query_id=query.query_id, text="hello")
    with pytest.raises(AuthorizationError, match="You cannot update this query"):
        container.query_service.update_status(other_proctor, query_id=query.query_id, status="closed")


def test_missing_query_is_not_found_before_permission(container, parties):
    _, _, outsider = parties
    with pytest.raises(NotFoundError, match="Query not found"):
        container.query_service.get_detail(outsider, query_id=404)
    with pytest.raises(NotFoundError):
        container.query_service.respond(outsider, query_id=404, text="hello")


def test_response_text_checked_first(container, parties):
    _, proctor, _ = parties
    with pytest.raises(ValidationError, match="Invalid response data"):
        container.query_service.proctor_respond(proctor, query_id=404, text="   ")


def test_closed_query_accepts_no_responses_but_can_reopen(container, parties):
    student, proctor, _ = parties
    query = _raise(container, student)
    container.query_service.update_status(proctor, query_id=query.query_id, status="closed")

    with pytest.raises(ValidationError, match="Query is closed"):
        container.query_service.respond(student, query_id=query.query_id, text="Still there?")
    with pytest.raises(ValidationError, match="Query is closed"):
        container.query_service.proctor_respond(proctor, query_id=query.query_id, text="Reopening")

    reopened = container.query_service.update_status(proctor, query_id=query.query_id, status="in_progress")
    assert reopened.status == QueryStatus.IN_PROGRESS


def test_invalid_status(container, parties):
    student, proctor, _ = parties
    query = _raise(container, student)
    with pytest.raises(ValidationError, match="Invalid status"):
        container.query_service.update_status(proctor, query_id=query.query_id, status="archived")


def test_detail_lists_responses_oldest_first_with_authors(container, parties, clock):
    student, proctor, _ = parties
    query = _raise(container, student)
    container.query_service.respond(student, query_id=query.query_id, text="first")
    clock.advance(minutes=1)
    container.query_service.respond(proctor, query_id=query.query_id, text="second")

    detail = container.query_service.get_detail(student, query_id=query.query_id)

    assert [r.response.response for r in detail.responses] == ["first", "second"]
    assert [r.author.user_id for r in detail.responses] == [student.user_id, proctor.user_id]
    assert detail.proctor.user_id == proctor.user_id


def test_lists_are_newest_first(container, parties, clock):
    student, proctor, _ = parties
    first = _raise(container, student)
    clock.advance(hours=1)
    second = _raise(container, student)

    assert [q.query_id for q in container.query_service.list_for_student(student)] == [
        second.query_id,
        first.query_id,
    ]
    rows = container.query_service.list_for_proctor(proctor)
    assert [r.query.query_id for r in rows] == [second.query_id, first.query_id]
    assert rows[0].student.user_id == student.user_id
