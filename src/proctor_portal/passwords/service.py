from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Any
from urllib.parse import urlencode

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import Clock, now_local
from ..common.validators import FieldErrors, require_choice, require_email, require_non_empty, require_password
from ..core.constants import DEFAULT_RESET_TOKEN_TTL_MINUTES, PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..users.repository import UserRepository
from .mailer import ResetNotifier
from .repository import ResetTokenRepository

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If an account exists with that email, you will receive a password reset link"
PASSWORD_RESET_MESSAGE = "Password has been reset successfully"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class PasswordResetService:
    """Forgot-password flow: issue a single-use token, then redeem it."""

    def __init__(
        self,
        users: UserRepository,
        tokens: ResetTokenRepository,
        notifier: ResetNotifier,
        *,
        client_url: str,
        ttl_minutes: int = DEFAULT_RESET_TOKEN_TTL_MINUTES,
        clock: Clock = now_local,
    ):
        self._users = users
        self._tokens = tokens
        self._notifier = notifier
        self._client_url = client_url.rstrip("/")
        self._ttl = timedelta(minutes=int(ttl_minutes))
        self._clock = clock

    def reset_link(self, token: str) -> str:
        return f"{self._client_url}/reset-password?{urlencode({'token': token})}"

    def request_reset(self, *, email: Any, role: Any) -> str:
        """Always returns the same message so callers cannot probe for accounts."""
        errors = FieldErrors()
        email = errors.check(require_email, email, "email")
        role = errors.check(require_choice, role, "role", Role)
        errors.raise_if_any("Invalid request data")

        now = self._clock()
        self._tokens.delete_expired_or_used(now)

        user = self._users.get_by_email(email)
        if not user or user.role != role:
            logger.info("password reset requested for unknown %s account", role.value)
            return RESET_REQUESTED_MESSAGE

        token = secrets.token_hex(32)
        self._tokens.create_token(user_id=user.user_id, token=token, expires_at=now + self._ttl, created_at=now)
        self._notifier.send_reset_link(email=user.email, name=user.name, link=self.reset_link(token))

        logger.info("password reset token issued for user_id=%s", user.user_id)
        return RESET_REQUESTED_MESSAGE

    def reset_password(self, *, token: Any, new_password: Any) -> str:
        errors = FieldErrors()
        token = errors.check(require_non_empty, token, "token")
        new_password = errors.check(require_password, new_password, "newPassword", PASSWORD_MIN_LENGTH)
        errors.raise_if_any("Invalid request data")

        now = self._clock()
        record = self._tokens.get_by_token(token)
        if not record or not record.is_redeemable(now):
            raise ValidationError(INVALID_TOKEN_MESSAGE)

        if not self._users.update_password(record.user_id, generate_password_hash(new_password)):
            raise ValidationError(INVALID_TOKEN_MESSAGE)
        self._tokens.mark_used(record.token_id, used_at=now)

        logger.info("password reset completed for user_id=%s", record.user_id)
        return PASSWORD_RESET_MESSAGE
