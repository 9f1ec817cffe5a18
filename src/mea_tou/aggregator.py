"""Bucket interval readings into on-peak and off-peak daily totals.

Readings are average power per interval in watts. Summing them and
dividing by the calendar's kWh divisor gives energy for the day. In solar
mode the signed grid power of each reading is split into import (what was
still drawn from the grid after the solar offset) and export.
"""

import math
from collections.abc import Iterable, Mapping
from datetime import date

from .classifier import classify_day, parse_date
from .errors import InvalidReadingError
from .models import DayAggregate, DayType, IntervalReading, SolarBreakdown, TariffCalendar
from .tariffs import default_calendar, parse_time, time_in_range

TIME_KEYS = ("time", "date")
CONSUMPTION_KEY = "consumption_power"
GRID_KEYS = ("grid_p_power", "grid_power")


def to_watts(value, index: int, field: str) -> int:
    """Coerce a power field to integer watts, truncating like an integer parse."""
    if isinstance(value, bool) or value is None:
        raise InvalidReadingError(index, f"{field} is not a number: {value!r}")
    if isinstance(value, int):
        return value

    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            raise InvalidReadingError(index, f"{field} is not a number: {value!r}")

    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidReadingError(index, f"{field} is not finite: {value!r}")
        return int(value)

    raise InvalidReadingError(index, f"{field} is not a number: {value!r}")


def _first_present(reading: Mapping, keys: tuple[str, ...]):
    for key in keys:
        if key in reading:
            return reading[key]
    return None


def parse_reading(reading: IntervalReading | Mapping, index: int) -> tuple[int, int, int | None]:
    """Parse one reading to (minutes since midnight, consumption W, grid W or None)."""
    if isinstance(reading, IntervalReading):
        time_str = reading.time
        consumption = reading.consumption_power
        grid = reading.grid_power
    elif isinstance(reading, Mapping):
        time_str = _first_present(reading, TIME_KEYS)
        consumption = reading.get(CONSUMPTION_KEY)
        grid = _first_present(reading, GRID_KEYS)
    else:
        raise InvalidReadingError(index, f"expected a mapping, got {type(reading).__name__}")

    try:
        minutes = parse_time(time_str, allow_end_of_day=True)
    except ValueError as e:
        raise InvalidReadingError(index, str(e))

    consumption = to_watts(consumption, index, CONSUMPTION_KEY)
    if grid is not None and grid != "":
        grid = to_watts(grid, index, "grid_power")
    else:
        grid = None

    return minutes, consumption, grid


def is_on_peak(minutes: int, day_type: DayType, calendar: TariffCalendar) -> bool:
    """Whether a reading at a time of day falls in the on-peak bucket."""
    if day_type == DayType.ALL_OFF_PEAK:
        return False
    return time_in_range(minutes, calendar.on_peak_start, calendar.on_peak_end)


def aggregate(
    day_type: DayType,
    calendar: TariffCalendar,
    readings: Iterable[IntervalReading | Mapping],
    solar_mode: bool = False,
    apply_unit_conversion: bool | None = None,
    day: str | date | None = None,
) -> DayAggregate:
    """Sum a day's readings into on-peak and off-peak totals.

    Args:
        day_type: Result of classify_day for the readings' date
        calendar: Tariff calendar supplying the on-peak window and interval
        readings: Ordered IntervalReading objects or mappings with
            "date"/"time", "consumption_power" and optionally "grid_p_power"
        solar_mode: Also split grid import, export and self-consumption
        apply_unit_conversion: Report kWh instead of summed watts. Defaults
            to solar_mode.
        day: Date echoed into the result

    Returns:
        DayAggregate. Any malformed reading raises InvalidReadingError and
        no partial totals are returned.
    """
    if apply_unit_conversion is None:
        apply_unit_conversion = solar_mode

    on_peak = off_peak = total = 0
    solar_on_peak = solar_off_peak = solar_total = to_grid = 0

    for index, reading in enumerate(readings):
        minutes, consumption, grid = parse_reading(reading, index)
        peak = is_on_peak(minutes, day_type, calendar)

        total += consumption
        if peak:
            on_peak += consumption
        else:
            off_peak += consumption

        if not solar_mode or grid is None:
            continue

        grid_import = max(0, grid)
        solar_total += grid_import
        to_grid += max(0, -grid)
        if peak:
            solar_on_peak += grid_import
        else:
            solar_off_peak += grid_import

    unit = "kWh" if apply_unit_conversion else "W"

    def convert(watts):
        return watts / calendar.kwh_divisor if apply_unit_conversion else watts

    solar = None
    if solar_mode:
        from_solar = total - solar_total
        solar = SolarBreakdown(
            total=convert(solar_total),
            on_peak=convert(solar_on_peak),
            off_peak=convert(solar_off_peak),
            to_grid=convert(to_grid),
            from_solar=convert(from_solar),
            total_production=convert(from_solar + to_grid),
        )

    return DayAggregate(
        date=parse_date(day).isoformat() if day is not None else None,
        tou_date=day_type == DayType.ALL_OFF_PEAK,
        unit=unit,
        total=convert(total),
        on_peak=convert(on_peak),
        off_peak=convert(off_peak),
        solar=solar,
    )


def calculate_day(
    day: str | date,
    readings: Iterable[IntervalReading | Mapping],
    calendar: TariffCalendar | None = None,
    solar_mode: bool = False,
    apply_unit_conversion: bool | None = None,
) -> DayAggregate:
    """Classify a day and aggregate its readings."""
    calendar = calendar or default_calendar()
    day_type = classify_day(day, calendar)
    return aggregate(
        day_type,
        calendar,
        readings,
        solar_mode=solar_mode,
        apply_unit_conversion=apply_unit_conversion,
        day=day,
    )
