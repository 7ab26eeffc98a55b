from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Union

Clock = Callable[[], datetime]


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can pass a fixed clock instead.
    """
    return datetime.now()


def isoformat(value: Optional[Union[date, datetime]]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()
