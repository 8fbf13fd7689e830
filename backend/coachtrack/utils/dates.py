from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterator, Optional

import pytz

from coachtrack.config import APP_TIMEZONE


class Weekday(str, Enum):
    """Day a line item is scheduled on. Values are the stored day names."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        # date.weekday(): Monday == 0, matches declaration order
        return list(cls)[day.weekday()]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Weekday"]:
        """Match free-text day names ignoring case and surrounding whitespace."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        cleaned = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == cleaned:
                return member
        return None

    @classmethod
    def _missing_(cls, value):
        # Lets pydantic accept "monday", " MONDAY " etc.
        if isinstance(value, str):
            return cls.parse(value)
        return None


def get_timezone():
    try:
        return pytz.timezone(APP_TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def local_now() -> datetime:
    """Current wall-clock time in APP_TIMEZONE (naive, as stored in the DB)."""
    return datetime.now(pytz.UTC).astimezone(get_timezone()).replace(tzinfo=None)


def local_today() -> date:
    return local_now().date()


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def iter_days(from_date: date, to_date: date) -> Iterator[date]:
    """Inclusive range, oldest first."""
    current = from_date
    while current <= to_date:
        yield current
        current += timedelta(days=1)
