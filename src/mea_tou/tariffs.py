"""Tariff calendar loading and time-of-day helpers."""

import os
import re
from datetime import date, datetime
from pathlib import Path

import yaml

from .errors import InvalidCalendarError
from .models import MINUTES_PER_DAY, TariffCalendar

CONFIG_ENV_VAR = "MEA_TOU_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "mea_tou.yaml"

WEEKDAY_NAMES = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

# Official Thai national holidays for 2568 (2025)
THAI_HOLIDAYS_2025 = {
    date(2025, 1, 1): "New Year's Day",
    date(2025, 2, 12): "Makha Bucha Day",
    date(2025, 4, 6): "Chakri Memorial Day",
    date(2025, 4, 13): "Songkran Festival",
    date(2025, 4, 14): "Songkran Festival",
    date(2025, 4, 15): "Songkran Festival",
    date(2025, 5, 1): "National Labour Day",
    date(2025, 5, 4): "Coronation Day",
    date(2025, 5, 11): "Visakha Bucha Day",
    date(2025, 6, 3): "Queen's Birthday",
    date(2025, 7, 10): "Asarnha Bucha Day",
    date(2025, 7, 11): "Buddhist Lent Day",
    date(2025, 7, 28): "King's Birthday",
    date(2025, 8, 12): "Queen Mother's Birthday / Mother's Day",
    date(2025, 10, 13): "King Bhumibol Memorial Day",
    date(2025, 10, 23): "King Chulalongkorn Memorial Day",
    date(2025, 12, 5): "King Bhumibol's Birthday / Father's Day",
    date(2025, 12, 10): "Constitution Day",
    date(2025, 12, 31): "New Year's Eve",
}

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time(time_str: str, allow_end_of_day: bool = False) -> int:
    """Parse an HH:MM string to minutes since midnight.

    "24:00" is accepted as the end-of-day boundary when allow_end_of_day
    is set. Raises ValueError for anything else out of range.
    """
    if not isinstance(time_str, str):
        raise ValueError(f"Expected HH:MM string, got {time_str!r}")
    match = _TIME_RE.match(time_str.strip())
    if not match:
        raise ValueError(f"Expected HH:MM, got {time_str!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if allow_end_of_day and hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time out of range: {time_str!r}")
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as HH:MM."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_in_range(minutes: int, start: int, end: int) -> bool:
    """Check if a time of day falls within the half-open range [start, end)."""
    return start <= minutes < end


def default_calendar() -> TariffCalendar:
    """The MEA TOU calendar: 09:00-22:00 on-peak Monday to Friday."""
    return TariffCalendar(holidays={2025: frozenset(THAI_HOLIDAYS_2025)})


def get_config_path() -> Path | None:
    """Find the calendar config file, or None if there isn't one."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    candidates = [
        Path.cwd() / "config" / "mea_tou.yaml",
        DEFAULT_CONFIG_PATH,
        Path.home() / ".config" / "mea-tou" / "mea_tou.yaml",
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


def _read_yaml(path: Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidCalendarError(f"Could not parse {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidCalendarError(f"Expected a mapping at the top of {path}")
    return data


def _parse_boundary(value) -> int:
    # YAML 1.1 reads unquoted 22:00 as the sexagesimal integer 1320,
    # which is already minutes since midnight.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return parse_time(value)
    except ValueError as e:
        raise InvalidCalendarError(f"Invalid on-peak boundary: {e}")


def _parse_holiday(entry, year: int) -> tuple[date, str]:
    name = ""
    if isinstance(entry, dict):
        name = entry.get("name", "")
        entry = entry.get("date")

    if isinstance(entry, datetime):
        day = entry.date()
    elif isinstance(entry, date):
        day = entry
    else:
        try:
            day = date.fromisoformat(str(entry))
        except ValueError:
            raise InvalidCalendarError(f"Invalid holiday date {entry!r} for {year}")

    if day.year != year:
        raise InvalidCalendarError(f"Holiday {day.isoformat()} is listed under {year}")
    return day, name


def _parse_holidays(data: dict) -> dict[int, dict[date, str]]:
    holidays: dict[int, dict[date, str]] = {}
    by_year = data.get("holidays") or {}
    if not isinstance(by_year, dict):
        raise InvalidCalendarError("holidays must be a mapping of year to a list of dates")

    for year, entries in by_year.items():
        try:
            year = int(year)
        except (TypeError, ValueError):
            raise InvalidCalendarError(f"Invalid holiday year: {year!r}")

        entries = entries or []
        if not isinstance(entries, list):
            raise InvalidCalendarError(f"Holidays for {year} must be a list of dates")

        holidays[year] = {}
        for entry in entries:
            day, name = _parse_holiday(entry, year)
            holidays[year][day] = name
    return holidays


def _parse_weekend(data: dict) -> frozenset[int]:
    if "weekend" not in data:
        return frozenset({5, 6})

    days = set()
    for day in data["weekend"] or []:
        if isinstance(day, str) and day.lower() in WEEKDAY_NAMES:
            days.add(WEEKDAY_NAMES[day.lower()])
        else:
            raise InvalidCalendarError(f"Unknown weekend day: {day!r}")
    return frozenset(days)


def load_calendar_from_yaml(config_path: Path | None = None) -> TariffCalendar:
    """Load a tariff calendar from a YAML config file.

    Keys left out fall back to the MEA defaults. With no config file at all
    the built-in calendar is returned.
    """
    path = config_path or get_config_path()
    if path is None:
        return default_calendar()

    data = _read_yaml(path)
    on_peak = data.get("on_peak") or {}
    if not isinstance(on_peak, dict):
        raise InvalidCalendarError("on_peak must be a mapping with start and end")
    defaults = TariffCalendar()

    interval = data.get("interval_minutes", defaults.interval_minutes)
    if not isinstance(interval, int) or isinstance(interval, bool):
        raise InvalidCalendarError(f"interval_minutes must be an integer, got {interval!r}")

    if "holidays" in data:
        holidays = {
            year: frozenset(days) for year, days in _parse_holidays(data).items()
        }
    else:
        holidays = default_calendar().holidays

    return TariffCalendar(
        on_peak_start=_parse_boundary(on_peak.get("start", "09:00")),
        on_peak_end=_parse_boundary(on_peak.get("end", "22:00")),
        holidays=holidays,
        weekend_days=_parse_weekend(data),
        interval_minutes=interval,
        name=data.get("name", defaults.name),
    )


def holiday_names(config_path: Path | None = None) -> dict[date, str]:
    """Get holiday names by date, for display."""
    path = config_path or get_config_path()
    if path is None:
        return dict(THAI_HOLIDAYS_2025)

    data = _read_yaml(path)
    if "holidays" not in data:
        return dict(THAI_HOLIDAYS_2025)

    names = {}
    for days in _parse_holidays(data).values():
        names.update(days)
    return names
