from __future__ import annotations

import pytest

from proctor_portal.core.exceptions import ValidationError
from proctor_portal.passwords.service import RESET_REQUESTED_MESSAGE


def _issue(container, notifier, email="student@example.com", role="student"):
    container.password_reset_service.request_reset(email=email, role=role)
    return notifier.sent[-1]["link"].split("token=", 1)[1]


def test_request_reset_mails_link(container, make_student, notifier, tables, clock):
    make_student()

    message = container.password_reset_service.request_reset(email="student@example.com", role="student")

    assert message == RESET_REQUESTED_MESSAGE
    assert len(notifier.sent) == 1
    sent = notifier.sent[0]
    assert sent["email"] == "student@example.com"
    assert sent["link"].startswith("http://portal.test/reset-password?token=")
    (token,) = tables.tokens.values()
    assert len(token.token) == 64
    assert token.expires_at == clock().replace(hour=10)


def test_unknown_account_or_wrong_role_is_neutral(container, make_student, notifier):
    make_student()

    assert container.password_reset_service.request_reset(email="ghost@example.com", role="student") == RESET_REQUESTED_MESSAGE
    assert container.password_reset_service.request_reset(email="student@example.com", role="proctor") == RESET_REQUESTED_MESSAGE
    assert notifier.sent == []


def test_reset_changes_password_once(container, make_student, notifier):
    make_student()
    token = _issue(container, notifier)

    container.password_reset_service.reset_password(token=token, new_password="brand-new")

    user = container.auth_service.authenticate(email="student@example.com", password="brand-new", role="student")
    assert user.username == "student"
    with pytest.raises(ValidationError, match="Invalid or expired token"):
        container.password_reset_service.reset_password(token=token, new_password="another1")


def test_expired_token_is_rejected(container, make_student, notifier, clock):
    make_student()
    token = _issue(container, notifier)

    clock.advance(hours=2)

    with pytest.raises(ValidationError, match="Invalid or expired token"):
        container.password_reset_service.reset_password(token=token, new_password="brand-new")


def test_unknown_token_and_short_password(container):
    with pytest.raises(ValidationError, match="Invalid or expired token"):
        container.password_reset_service.reset_password(token="nope", new_password="brand-new")
    with pytest.raises(ValidationError) as e:
        container.password_reset_service.reset_password(token="nope", new_password="123")
    assert "newPassword" in e.value.errors


def test_stale_tokens_are_purged_on_next_request(container, make_student, notifier, tables, clock):
    make_student()
    old = _issue(container, notifier)
    clock.advance(hours=2)

    fresh = _issue(container, notifier)

    assert [t.token for t in tables.tokens.values()] == [fresh]
    assert old != fresh
