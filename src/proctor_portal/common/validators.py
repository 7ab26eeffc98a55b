from __future__ import annotations

import re
from enum import Enum
from typing import Any, Callable, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)
T = TypeVar("T")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _fail(field_name: str, message: str) -> ValidationError:
    return ValidationError(message, errors={field_name: message})


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _fail(field_name, f"{field_name} is required")
    return value.strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value.strip()) < min_len:
        raise _fail(field_name, f"{field_name} must be at least {min_len} characters")
    return value.strip()


def require_max_length(value: Any, field_name: str, max_len: int) -> str:
    if not isinstance(value, str) or len(value.strip()) > max_len:
        raise _fail(field_name, f"{field_name} must be at most {max_len} characters")
    return value.strip()


def require_password(value: Any, field_name: str, min_len: int) -> str:
    # Passwords are not stripped.
    if not isinstance(value, str) or len(value) < min_len:
        raise _fail(field_name, f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Any, field_name: str = "email") -> str:
    if not isinstance(value, str) or not _EMAIL_RE.match(value.strip()):
        raise _fail(field_name, "Please enter a valid email")
    return value.strip().lower()


def require_int(value: Any, field_name: str, *, minimum: Optional[int] = None) -> int:
    if isinstance(value, bool):
        raise _fail(field_name, f"{field_name} must be a number")
    if isinstance(value, float) and not value.is_integer():
        raise _fail(field_name, f"{field_name} must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise _fail(field_name, f"{field_name} must be a number")
    if minimum is not None and number < minimum:
        raise _fail(field_name, f"{field_name} must be at least {minimum}")
    return number


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_int(value, field_name)


def require_choice(value: Any, field_name: str, choices: Type[E]) -> E:
    try:
        return choices(value)
    except ValueError:
        allowed = ", ".join(c.value for c in choices)
        raise _fail(field_name, f"{field_name} must be one of: {allowed}")


class FieldErrors:
    """Run several field checks and report every failure at once."""

    def __init__(self) -> None:
        self.errors: dict[str, str] = {}

    def check(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Optional[T]:
        try:
            return fn(*args, **kwargs)
        except ValidationError as e:
            self.errors.update(e.errors or {"_": e.message})
            return None

    def raise_if_any(self, message: str) -> None:
        if self.errors:
            raise ValidationError(message, errors=dict(self.errors))
