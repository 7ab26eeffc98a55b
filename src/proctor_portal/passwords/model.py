from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PasswordResetToken:
    token_id: int
    user_id: int
    token: str
    expires_at: datetime
    created_at: datetime
    used_at: Optional[datetime] = None

    def is_redeemable(self, now: datetime) -> bool:
        return self.used_at is None and self.expires_at > now
