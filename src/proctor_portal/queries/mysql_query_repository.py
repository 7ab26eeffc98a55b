from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import QueryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Query, QueryResponse
from .repository import QueryRepository

_QUERY_COLUMNS = (
    "query_id, student_user_id, proctor_user_id, subject, description, status, created_at, updated_at"
)
_RESPONSE_COLUMNS = "response_id, query_id, user_id, response, created_at"


def _to_query(r: Dict[str, Any]) -> Query:
    return Query(
        query_id=int(r["query_id"]),
        student_user_id=int(r["student_user_id"]),
        proctor_user_id=int(r["proctor_user_id"]),
        subject=r["subject"],
        description=r["description"],
        status=QueryStatus(r["status"]),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
    )


def _to_response(r: Dict[str, Any]) -> QueryResponse:
    return QueryResponse(
        response_id=int(r["response_id"]),
        query_id=int(r["query_id"]),
        user_id=int(r["user_id"]),
        response=r["response"],
        created_at=r["created_at"],
    )


class MySQLQueryRepository(QueryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_query(
        self,
        *,
        student_user_id: int,
        proctor_user_id: int,
        subject: str,
        description: str,
        created_at: datetime,
    ) -> Query:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO queries(student_user_id, proctor_user_id, subject, description, status, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(student_user_id),
                    int(proctor_user_id),
                    subject,
                    description,
                    QueryStatus.PENDING.value,
                    created_at,
                    created_at,
                ),
            )
            query_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_QUERY_COLUMNS} FROM queries WHERE query_id=%s", (query_id,))
            return _to_query(fetchone(cur))

    def get_by_id(self, query_id: int) -> Optional[Query]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_QUERY_COLUMNS} FROM queries WHERE query_id=%s", (int(query_id),))
            row = fetchone(cur)
            return _to_query(row) if row else None

    def _list_by(self, column: str, user_id: int) -> Sequence[Query]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_QUERY_COLUMNS}
                FROM queries
                WHERE {column}=%s
                ORDER BY created_at DESC, query_id DESC
                """,
                (int(user_id),),
            )
            return [_to_query(r) for r in fetchall(cur)]

    def list_for_student(self, student_user_id: int) -> Sequence[Query]:
        return self._list_by("student_user_id", student_user_id)

    def list_for_proctor(self, proctor_user_id: int) -> Sequence[Query]:
        return self._list_by("proctor_user_id", proctor_user_id)

    def update_status(self, query_id: int, *, status: QueryStatus, updated_at: datetime) -> Optional[Query]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE queries SET status=%s, updated_at=%s WHERE query_id=%s",
                (status.value, updated_at, int(query_id)),
            )
            cur.execute(f"SELECT {_QUERY_COLUMNS} FROM queries WHERE query_id=%s", (int(query_id),))
            row = fetchone(cur)
            return _to_query(row) if row else None

    def create_response(self, *, query_id: int, user_id: int, response: str, created_at: datetime) -> QueryResponse:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO query_responses(query_id, user_id, response, created_at)
                VALUES(%s,%s,%s,%s)
                """,
                (int(query_id), int(user_id), response, created_at),
            )
            response_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_RESPONSE_COLUMNS} FROM query_responses WHERE response_id=%s", (response_id,))
            return _to_response(fetchone(cur))

    def list_responses(self, query_id: int) -> Sequence[QueryResponse]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RESPONSE_COLUMNS}
                FROM query_responses
                WHERE query_id=%s
                ORDER BY created_at ASC, response_id ASC
                """,
                (int(query_id),),
            )
            return [_to_response(r) for r in fetchall(cur)]
