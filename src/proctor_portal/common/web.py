from __future__ import annotations

from functools import wraps
from typing import Any, Type

from flask import Flask, current_app, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, ValidationError
from ..users.identity import Identity
from ..users.service import AuthService


def json_body() -> dict[str, Any]:
    """Request body as a dict; anything else (missing, malformed, a list) is an empty dict."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


class AccessGuard:
    """View decorators that resolve the session user into ``g.identity``."""

    def __init__(self, auth: AuthService):
        self._auth = auth

    def _load_identity(self) -> Identity:
        user_id = session.get("user_id")
        if user_id is None:
            raise AuthenticationError("Unauthorized")
        try:
            identity = self._auth.resolve_identity(int(user_id))
        except AuthenticationError:
            # Session points at a user that no longer exists.
            session.clear()
            raise AuthenticationError("Unauthorized")
        g.identity = identity
        return identity

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            self._load_identity()
            return view(*args, **kwargs)

        return wrapper

    def role_required(self, variant: Type[Identity]):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                identity = self._load_identity()
                if not isinstance(identity, variant):
                    raise AuthorizationError("Access forbidden")
                return view(*args, **kwargs)

            return wrapper

        return decorator


def current_identity() -> Identity:
    return g.identity


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        body: dict[str, Any] = {"message": e.message}
        if isinstance(e, ValidationError) and e.errors:
            body["errors"] = e.errors
        return jsonify(body), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        # Routing redirects (e.g. trailing slash) pass through untouched.
        if e.code is None or e.code < 400:
            return e
        return jsonify({"message": e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        body: dict[str, Any] = {"message": "Internal server error"}
        if current_app.config.get("DEBUG"):
            body["error"] = str(e)
        return jsonify(body), 500
