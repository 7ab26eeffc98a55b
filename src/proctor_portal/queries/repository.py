from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import QueryStatus
from .model import Query, QueryResponse


class QueryRepository(Protocol):
    def create_query(
        self,
        *,
        student_user_id: int,
        proctor_user_id: int,
        subject: str,
        description: str,
        created_at: datetime,
    ) -> Query:
        """Insert a query; the stored status is always ``pending``."""

        raise NotImplementedError

    def get_by_id(self, query_id: int) -> Optional[Query]:
        raise NotImplementedError

    def list_for_student(self, student_user_id: int) -> Sequence[Query]:
        """Newest first."""

        raise NotImplementedError

    def list_for_proctor(self, proctor_user_id: int) -> Sequence[Query]:
        """Newest first."""

        raise NotImplementedError

    def update_status(self, query_id: int, *, status: QueryStatus, updated_at: datetime) -> Optional[Query]:
        raise NotImplementedError

    # Responses
    def create_response(self, *, query_id: int, user_id: int, response: str, created_at: datetime) -> QueryResponse:
        raise NotImplementedError

    def list_responses(self, query_id: int) -> Sequence[QueryResponse]:
        """Oldest first."""

        raise NotImplementedError
