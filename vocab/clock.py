"""
Clock abstraction and calendar-day helpers.

All scheduling is anchored to local midnight, so every "today" question goes
through a Clock. Production code uses SystemClock; tests inject a FixedClock
and move it forward to simulate day rollover.
"""

from __future__ import annotations

import logging
import os
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


DAY = timedelta(days=1)

LOCALTIME_PATH = "/etc/localtime"


def system_timezone() -> tzinfo:
    """
    The machine's local zone as a DST-aware tzinfo.

    Tries the TZ environment variable, then /etc/localtime. A fixed offset
    taken from the current instant is the last resort; it is only right
    until the next DST change.
    """
    name = os.getenv("TZ", "").lstrip(":")
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            logger.warning("Ignoring unknown TZ=%r: %s", name, e)
    try:
        with open(LOCALTIME_PATH, "rb") as f:
            return ZoneInfo.from_file(f, key="localtime")
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s, falling back to a fixed UTC offset: %s", LOCALTIME_PATH, e)
    return datetime.now().astimezone().tzinfo


class Clock:
    """Source of the current instant in a given timezone."""

    tz: Optional[tzinfo] = None

    def now(self) -> datetime:
        raise NotImplementedError

    def to_local(self, moment: datetime) -> datetime:
        """Express an aware datetime in this clock's timezone."""
        return moment.astimezone(self.tz)

    def today_start(self) -> datetime:
        """Local midnight of the current day."""
        return start_of_day(self.now())

    def today(self) -> date:
        return self.now().date()

    def local_day(self, moment: datetime) -> date:
        """Calendar day of an instant, as seen in this clock's timezone."""
        return self.to_local(moment).date()

    def midnight_of(self, day: date) -> datetime:
        return self._combine(day, time(0, 0))

    def noon_of(self, day: date) -> datetime:
        return self._combine(day, time(12, 0))

    def _combine(self, day: date, at: time) -> datetime:
        tz = self.tz if self.tz is not None else self.now().tzinfo
        return datetime.combine(day, at, tzinfo=tz)


class SystemClock(Clock):
    """Wall clock in a fixed IANA zone, or the system local zone when tz is None."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz if tz is not None else system_timezone()

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock(Clock):
    """Manually driven clock for tests and simulations."""

    def __init__(self, now: datetime):
        if now.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._now = now
        self.tz = now.tzinfo

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, days: float = 0, hours: float = 0) -> None:
        self._now = self._now + timedelta(days=days, hours=hours)


def start_of_day(moment: datetime) -> datetime:
    """Truncate an aware datetime to midnight of its own calendar day."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def add_days(day_start: datetime, days: int) -> datetime:
    """Wall-clock day arithmetic: midnight stays midnight across DST."""
    return day_start + timedelta(days=days)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Calendar-day distance between two midnights (end - start)."""
    return (end.date() - start.date()).days


class RolloverTracker:
    """
    Read-only detector for local day changes.

    The UI polls `check()` on every refresh; a True result means due/overdue
    buckets must be re-derived. No record is touched.
    """

    def __init__(self, clock: Clock):
        self._clock = clock
        self._last_day = clock.today()

    @property
    def last_day(self) -> date:
        return self._last_day

    def check(self) -> bool:
        today = self._clock.today()
        if today != self._last_day:
            self._last_day = today
            return True
        return False
