"""Data models for tariff calendars, interval readings and daily aggregates."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from .errors import InvalidCalendarError

MINUTES_PER_DAY = 24 * 60


class DayType(Enum):
    """How a calendar day is billed."""

    ALL_OFF_PEAK = "all_off_peak"  # weekend or holiday
    WEEKDAY_SPLIT = "weekday_split"  # time of day decides the bucket


@dataclass(frozen=True)
class TariffCalendar:
    """A time-of-use tariff calendar.

    The on-peak window is the half-open range [on_peak_start, on_peak_end)
    in minutes since midnight. Holidays are filed by year so that a new
    year's list can be dropped in without touching the rest.
    """

    on_peak_start: int = 9 * 60
    on_peak_end: int = 22 * 60
    holidays: dict[int, frozenset[date]] = field(default_factory=dict)
    weekend_days: frozenset[int] = frozenset({5, 6})  # Monday=0 ... Sunday=6
    interval_minutes: int = 15
    name: str = "MEA TOU"

    def __post_init__(self):
        if not (0 <= self.on_peak_start < self.on_peak_end < MINUTES_PER_DAY):
            raise InvalidCalendarError(
                f"On-peak window must satisfy 0 <= start < end < {MINUTES_PER_DAY}, "
                f"got {self.on_peak_start}-{self.on_peak_end}"
            )
        if not (0 < self.interval_minutes <= MINUTES_PER_DAY):
            raise InvalidCalendarError(f"Invalid interval length: {self.interval_minutes} minutes")

        weekend = frozenset(self.weekend_days)
        if any(day not in range(7) for day in weekend):
            raise InvalidCalendarError(f"Weekend days must be 0-6, got {sorted(weekend)}")

        holidays = {}
        for year, days in self.holidays.items():
            days = frozenset(days)
            for day in days:
                if not isinstance(day, date) or day.year != year:
                    raise InvalidCalendarError(f"Holiday {day!r} is not a date in {year}")
            holidays[year] = days

        # Copies so later changes to the caller's containers don't leak in
        object.__setattr__(self, "weekend_days", weekend)
        object.__setattr__(self, "holidays", holidays)

    def holidays_for(self, year: int) -> frozenset[date]:
        return self.holidays.get(year, frozenset())

    def is_holiday(self, day: date) -> bool:
        return day in self.holidays_for(day.year)

    def covers_year(self, year: int) -> bool:
        """Whether holiday data has been supplied for a year."""
        return year in self.holidays

    @property
    def kwh_divisor(self) -> float:
        """Divisor turning a sum of per-interval watt readings into kWh.

        1000 W per kW times the number of intervals per hour, so 4000 for
        15-minute readings.
        """
        return 1000 * 60 / self.interval_minutes


@dataclass
class IntervalReading:
    """A single interval power sample."""

    time: str  # HH:MM format
    consumption_power: int  # watts
    grid_power: int | None = None  # watts, positive = import, negative = export


@dataclass
class SolarBreakdown:
    """Grid and solar split of a day's consumption."""

    total: float  # drawn from the grid after solar offset
    on_peak: float
    off_peak: float
    to_grid: float  # exported
    from_solar: float  # produced and used on site
    total_production: float


@dataclass
class DayAggregate:
    """On-peak and off-peak totals for one day."""

    date: str | None
    tou_date: bool  # True when the whole day is off-peak
    unit: str
    total: float
    on_peak: float
    off_peak: float
    solar: SolarBreakdown | None = None

    def to_dict(self) -> dict:
        result = {
            "date": self.date,
            "tou_date": self.tou_date,
            "consumption": {
                "total": self.total,
                "off_peak": self.off_peak,
                "on_peak": self.on_peak,
            },
        }
        if self.solar is not None:
            result["consumption_solar"] = {
                "total": self.solar.total,
                "off_peak": self.solar.off_peak,
                "on_peak": self.solar.on_peak,
                "to_grid": self.solar.to_grid,
                "from_solar": self.solar.from_solar,
                "total_production": self.solar.total_production,
            }
        result["unit"] = self.unit
        return result
