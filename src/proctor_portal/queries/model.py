from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import QueryStatus


@dataclass(frozen=True)
class Query:
    """Domain entity: a ticket a student raises with their proctor.

    ``student_user_id`` and ``proctor_user_id`` are the only two parties that
    may read or respond to it.
    """

    query_id: int
    student_user_id: int
    proctor_user_id: int
    subject: str
    description: str
    status: QueryStatus
    created_at: datetime
    updated_at: datetime

    def involves(self, user_id: int) -> bool:
        return user_id in (self.student_user_id, self.proctor_user_id)


@dataclass(frozen=True)
class QueryResponse:
    response_id: int
    query_id: int
    user_id: int
    response: str
    created_at: datetime

