from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import PasswordResetToken
from .repository import ResetTokenRepository


def _to_token(r: Dict[str, Any]) -> PasswordResetToken:
    return PasswordResetToken(
        token_id=int(r["token_id"]),
        user_id=int(r["user_id"]),
        token=r["token"],
        expires_at=r["expires_at"],
        created_at=r["created_at"],
        used_at=r.get("used_at"),
    )


class MySQLResetTokenRepository(ResetTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_token(self, *, user_id: int, token: str, expires_at: datetime, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO password_reset_tokens(user_id, token, expires_at, created_at)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), token, expires_at, created_at),
            )
            return int(cur.lastrowid)

    def get_by_token(self, token: str) -> Optional[PasswordResetToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT token_id, user_id, token, expires_at, created_at, used_at
                FROM password_reset_tokens
                WHERE token=%s
                """,
                (token,),
            )
            row = fetchone(cur)
            return _to_token(row) if row else None

    def mark_used(self, token_id: int, *, used_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE password_reset_tokens SET used_at=%s WHERE token_id=%s AND used_at IS NULL",
                (used_at, int(token_id)),
            )
            return cur.rowcount > 0

    def delete_expired_or_used(self, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM password_reset_tokens WHERE expires_at <= %s OR used_at IS NOT NULL",
                (now,),
            )
            return int(cur.rowcount or 0)
