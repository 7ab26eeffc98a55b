from __future__ import annotations

from typing import Optional, Protocol

from flask_mail import Mail, Message

mail = Mail()


class ResetNotifier(Protocol):
    def send_reset_link(self, *, email: str, name: str, link: str) -> None:
        raise NotImplementedError


class FlaskMailResetNotifier(ResetNotifier):
    """Sends the reset link through the app's Flask-Mail extension.

    Must be called inside an application context.
    """

    def __init__(self, mailer: Mail = mail, *, sender: Optional[str] = None):
        self._mail = mailer
        self._sender = sender

    def send_reset_link(self, *, email: str, name: str, link: str) -> None:
        msg = Message("Password Reset Request", sender=self._sender, recipients=[email])
        msg.body = (
            f"Hello {name},\n\n"
            "We received a request to reset your Proctor Portal password.\n"
            f"Use the link below within the next hour:\n\n{link}\n\n"
            "If you did not ask for this, you can ignore this email."
        )
        self._mail.send(msg)
