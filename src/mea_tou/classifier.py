"""Decide whether a billing day is all off-peak or split by time of day."""

import re
from datetime import date, datetime

from .errors import InvalidDateError
from .models import DayType, TariffCalendar

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: str | date) -> date:
    """Parse a YYYY-MM-DD string to a date.

    Dates pass through unchanged and datetimes are reduced to their own
    calendar fields, so no timezone conversion can move the day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise InvalidDateError(f"Expected a YYYY-MM-DD date, got {value!r}")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise InvalidDateError(f"Invalid date {value!r}: {e}")


def is_weekend(day: date, calendar: TariffCalendar) -> bool:
    return day.weekday() in calendar.weekend_days


def classify_day(value: str | date, calendar: TariffCalendar) -> DayType:
    """Classify a day as all off-peak (weekend or holiday) or weekday split."""
    day = parse_date(value)
    if is_weekend(day, calendar) or calendar.is_holiday(day):
        return DayType.ALL_OFF_PEAK
    return DayType.WEEKDAY_SPLIT
