from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    STUDENT = "student"
    PROCTOR = "proctor"


class QueryStatus(str, Enum):
    """Lifecycle of a student query. CLOSED is terminal for responses."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class RiskLevel(str, Enum):
    """Derived classification shown to proctors; never persisted."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
