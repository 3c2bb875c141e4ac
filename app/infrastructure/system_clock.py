"""
Clock adapter backed by the system time.
"""

from datetime import date, datetime, tzinfo
from typing import Optional

from app.domain.ports import Clock


class SystemClock(Clock):
    """Current date in the given timezone (local time when None)."""

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self._tz = tz

    def today(self) -> date:
        return datetime.now(self._tz).date()
