from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..common.datetime_utils import Clock, now_local
from ..common.validators import FieldErrors, require_choice, require_max_length, require_min_length, require_non_empty
from ..core.constants import QUERY_DESCRIPTION_MIN_LENGTH, QUERY_SUBJECT_MAX_LENGTH, QUERY_SUBJECT_MIN_LENGTH
from ..core.enums import QueryStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.identity import Identity, ProctorIdentity, StudentIdentity
from ..users.model import User
from ..users.repository import UserRepository
from ..users.service import ProfileService
from .model import Query, QueryResponse
from .repository import QueryRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryWithStudent:
    query: Query
    student: Optional[User]


@dataclass(frozen=True)
class ResponseWithAuthor:
    response: QueryResponse
    author: Optional[User]


@dataclass(frozen=True)
class QueryDetail:
    query: Query
    student: Optional[User]
    proctor: Optional[User]
    responses: Sequence[ResponseWithAuthor]


class QueryService:
    """Query lifecycle: pending -> in_progress -> resolved -> closed.

    Lookup happens before the party check, so a missing query is reported as
    NotFoundError even to callers who could not have seen it.
    """

    def __init__(
        self,
        queries: QueryRepository,
        users: UserRepository,
        profiles: ProfileService,
        *,
        clock: Clock = now_local,
    ):
        self._queries = queries
        self._users = users
        self._profiles = profiles
        self._clock = clock

    @staticmethod
    def _response_text(text: Any) -> str:
        try:
            return require_non_empty(text, "response")
        except ValidationError as e:
            raise ValidationError("Invalid response data", errors=e.errors)

    def _get(self, query_id: int) -> Query:
        query = self._queries.get_by_id(int(query_id))
        if not query:
            raise NotFoundError("Query not found")
        return query

    def _append_response(self, query: Query, *, user_id: int, text: str) -> QueryResponse:
        if query.status == QueryStatus.CLOSED:
            raise ValidationError("Query is closed")
        return self._queries.create_response(
            query_id=query.query_id,
            user_id=user_id,
            response=text,
            created_at=self._clock(),
        )

    def create(self, identity: StudentIdentity, *, subject: Any, description: Any) -> Query:
        errors = FieldErrors()
        subject = errors.check(require_min_length, subject, "subject", QUERY_SUBJECT_MIN_LENGTH)
        if subject is not None:
            subject = errors.check(require_max_length, subject, "subject", QUERY_SUBJECT_MAX_LENGTH)
        description = errors.check(require_min_length, description, "description", QUERY_DESCRIPTION_MIN_LENGTH)
        errors.raise_if_any("Invalid query data")

        proctor = self._profiles.require_assigned_proctor(identity)

        query = self._queries.create_query(
            student_user_id=identity.user_id,
            proctor_user_id=proctor.user.user_id,
            subject=subject,
            description=description,
            created_at=self._clock(),
        )
        logger.info("query %s created by user %s for proctor %s", query.query_id, identity.user_id, proctor.user.user_id)
        return query

    def list_for_student(self, identity: StudentIdentity) -> list[Query]:
        return list(self._queries.list_for_student(identity.user_id))

    def list_for_proctor(self, identity: ProctorIdentity) -> list[QueryWithStudent]:
        return [
            QueryWithStudent(query=q, student=self._users.get_by_id(q.student_user_id))
            for q in self._queries.list_for_proctor(identity.user_id)
        ]

    def get_detail(self, identity: Identity, *, query_id: int) -> QueryDetail:
        query = self._get(query_id)
        if not query.involves(identity.user_id):
            raise AuthorizationError("You do not have permission to view this query")

        authors: dict[int, Optional[User]] = {}

        def author(user_id: int) -> Optional[User]:
            if user_id not in authors:
                authors[user_id] = self._users.get_by_id(user_id)
            return authors[user_id]

        return QueryDetail(
            query=query,
            student=author(query.student_user_id),
            proctor=author(query.proctor_user_id),
            responses=[
                ResponseWithAuthor(response=r, author=author(r.user_id))
                for r in self._queries.list_responses(query.query_id)
            ],
        )

    def respond(self, identity: Identity, *, query_id: int, text: Any) -> QueryResponse:
        """Either party appends a response. The status is left unchanged."""
        text = self._response_text(text)
        query = self._get(query_id)
        if not query.involves(identity.user_id):
            raise AuthorizationError("You do not have permission to respond to this query")
        return self._append_response(query, user_id=identity.user_id, text=text)

    def proctor_respond(self, identity: ProctorIdentity, *, query_id: int, text: Any) -> QueryResponse:
        """The assigned proctor responds; a pending query moves to in_progress."""
        text = self._response_text(text)
        query = self._get(query_id)
        if query.proctor_user_id != identity.user_id:
            raise AuthorizationError("You cannot respond to this query")

        response = self._append_response(query, user_id=identity.user_id, text=text)
        if query.status == QueryStatus.PENDING:
            self._queries.update_status(query.query_id, status=QueryStatus.IN_PROGRESS, updated_at=self._clock())
            logger.info("query %s moved to in_progress on first proctor response", query.query_id)
        return response

    def update_status(self, identity: ProctorIdentity, *, query_id: int, status: Any) -> Query:
        """Set any of the four statuses. Re-opening a closed query is allowed."""
        errors = FieldErrors()
        new_status = errors.check(require_choice, status, "status", QueryStatus)
        errors.raise_if_any("Invalid status")

        query = self._get(query_id)
        if query.proctor_user_id != identity.user_id:
            raise AuthorizationError("You cannot update this query")

        updated = self._queries.update_status(query.query_id, status=new_status, updated_at=self._clock())
        if not updated:
            raise NotFoundError("Query not found")
        logger.info("query %s status %s -> %s", query.query_id, query.status.value, new_status.value)
        return updated
