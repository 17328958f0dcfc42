"""
Clock port

Business hours and pricing windows are wall-clock values in one fixed local
offset (UTC+6:30 by default, SLOT_LOCAL_UTC_OFFSET_MINUTES). Services never
read the offset or the current time directly; they receive a Clock so tests
and other deployments can pin both.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone as dt_timezone, tzinfo
from typing import Callable, Optional

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore


class Clock:
    """Current time plus the fixed local offset used for schedules."""

    def __init__(
        self,
        utc_offset_minutes: Optional[int] = None,
        now_func: Optional[Callable[[], datetime]] = None,
    ):
        if utc_offset_minutes is None:
            utc_offset_minutes = settings.SLOT_LOCAL_UTC_OFFSET_MINUTES
        self.utc_offset_minutes = int(utc_offset_minutes)
        self._now_func = now_func or timezone.now

    @property
    def tz(self) -> tzinfo:
        return dt_timezone(timedelta(minutes=self.utc_offset_minutes))

    def now(self) -> datetime:
        """Current instant, timezone-aware."""
        return self._now_func()

    def to_local(self, instant: datetime) -> datetime:
        return instant.astimezone(self.tz)

    def today(self) -> date:
        """Current calendar date in the local offset."""
        return self.to_local(self.now()).date()

    def local_midnight(self, day: date) -> datetime:
        """Instant at which the local calendar day starts."""
        return datetime(day.year, day.month, day.day, tzinfo=self.tz)

    def __repr__(self):
        return f"Clock(utc_offset_minutes={self.utc_offset_minutes})"


def get_clock() -> Clock:
    """Clock configured from settings."""
    return Clock()
