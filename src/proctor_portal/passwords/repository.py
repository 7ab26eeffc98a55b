from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import PasswordResetToken


class ResetTokenRepository(Protocol):
    def create_token(self, *, user_id: int, token: str, expires_at: datetime, created_at: datetime) -> int:
        raise NotImplementedError

    def get_by_token(self, token: str) -> Optional[PasswordResetToken]:
        raise NotImplementedError

    def mark_used(self, token_id: int, *, used_at: datetime) -> bool:
        raise NotImplementedError

    def delete_expired_or_used(self, now: datetime) -> int:
        """Returns the number of rows removed."""

        raise NotImplementedError
