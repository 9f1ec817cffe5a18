"""Format a day's TOU totals for display."""

from ..models import DayAggregate


def _fmt(value: float, unit: str) -> str:
    if unit == "kWh":
        return f"{value:.2f} kWh"
    return f"{value:g} W"


def on_peak_percent(aggregate: DayAggregate) -> float:
    """Share of the day's consumption billed at the on-peak rate."""
    if aggregate.total <= 0:
        return 0
    return round(aggregate.on_peak / aggregate.total * 100, 1)


def format_day_aggregate_text(aggregate: DayAggregate) -> str:
    """Format a day aggregate as human-readable text."""
    unit = aggregate.unit
    day_type = "all day off-peak (weekend/holiday)" if aggregate.tou_date else "weekday TOU split"
    lines = [
        f"TOU Summary for {aggregate.date or 'unknown date'}",
        f"- Day type: {day_type}",
        f"- Total consumption: {_fmt(aggregate.total, unit)}",
        f"- On-peak: {_fmt(aggregate.on_peak, unit)} ({on_peak_percent(aggregate)}%)",
        f"- Off-peak: {_fmt(aggregate.off_peak, unit)}",
    ]

    solar = aggregate.solar
    if solar is not None:
        lines.extend([
            "",
            "Solar:",
            f"  - Bought from grid: {_fmt(solar.total, unit)}",
            f"    (on-peak {_fmt(solar.on_peak, unit)}, off-peak {_fmt(solar.off_peak, unit)})",
            f"  - Sold to grid: {_fmt(solar.to_grid, unit)}",
            f"  - Self-consumed: {_fmt(solar.from_solar, unit)}",
            f"  - Production: {_fmt(solar.total_production, unit)}",
        ])

    return "\n".join(lines)
