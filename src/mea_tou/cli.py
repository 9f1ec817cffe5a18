"""Command-line interface for the MEA TOU calculator."""

import json
from dataclasses import replace
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .aggregator import aggregate
from .classifier import classify_day, parse_date
from .collectors import hoymiles
from .errors import TouError
from .models import DayType
from .reports.daily import format_day_aggregate_text
from .tariffs import format_minutes, holiday_names, load_calendar_from_yaml

console = Console()


def _load_calendar(ctx):
    try:
        return load_calendar_from_yaml(ctx.obj["config_path"])
    except TouError as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)


def _warn_if_uncovered(calendar, day):
    if not calendar.covers_year(day.year):
        console.print(
            f"[yellow]No holiday data for {day.year}; only weekends are off-peak days[/yellow]"
        )


@click.group()
@click.option("--config", "config_path", type=click.Path(exists=True), help="Path to mea_tou.yaml")
@click.pass_context
def cli(ctx, config_path):
    """MEA time-of-use calculator - split daily consumption into on-peak and off-peak."""
    load_dotenv()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None


@cli.command()
@click.argument("date")
@click.pass_context
def classify(ctx, date):
    """Show whether DATE (YYYY-MM-DD) is billed all off-peak."""
    calendar = _load_calendar(ctx)
    try:
        day = parse_date(date)
        day_type = classify_day(day, calendar)
    except TouError as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)

    _warn_if_uncovered(calendar, day)

    if day_type == DayType.WEEKDAY_SPLIT:
        window = f"{format_minutes(calendar.on_peak_start)}-{format_minutes(calendar.on_peak_end)}"
        console.print(f"[cyan]{day.isoformat()}[/cyan]: weekday, on-peak {window}")
    elif calendar.is_holiday(day):
        name = holiday_names(ctx.obj["config_path"]).get(day) or "holiday"
        console.print(f"[cyan]{day.isoformat()}[/cyan]: all day off-peak ({name})")
    else:
        console.print(f"[cyan]{day.isoformat()}[/cyan]: all day off-peak (weekend)")


@cli.command("aggregate")
@click.option("--date", "date_str", required=True, help="Date of the readings (YYYY-MM-DD)")
@click.option(
    "--file", "file_path", type=click.Path(exists=True), required=True,
    help="Hoymiles export (JSON or CSV)",
)
@click.option("--solar", is_flag=True, help="Split grid import, export and self-consumption")
@click.option(
    "--unit", type=click.Choice(["kwh", "w"], case_sensitive=False),
    help="Report kWh or summed watts (default: kWh with --solar, W without)",
)
@click.option("--interval", type=int, help="Reading interval in minutes (default from config)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def aggregate_cmd(ctx, date_str, file_path, solar, unit, interval, as_json):
    """Split a day's readings into on-peak and off-peak totals."""
    calendar = _load_calendar(ctx)
    as_kwh = unit.lower() == "kwh" if unit else None
    try:
        if interval is not None:
            calendar = replace(calendar, interval_minutes=interval)
        day = parse_date(date_str)
        readings = hoymiles.load_readings(Path(file_path))
        result = aggregate(
            classify_day(day, calendar),
            calendar,
            readings,
            solar_mode=solar,
            apply_unit_conversion=as_kwh,
            day=day,
        )
    except TouError as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)

    if as_json:
        console.print(json.dumps(result.to_dict(), indent=2))
        return

    _warn_if_uncovered(calendar, day)
    console.print(format_day_aggregate_text(result))


@cli.command()
@click.option("--year", type=int, help="Only show holidays in this year")
@click.pass_context
def holidays(ctx, year):
    """List the configured holidays."""
    calendar = _load_calendar(ctx)
    names = holiday_names(ctx.obj["config_path"])

    years = [year] if year else sorted(calendar.holidays)
    days = sorted(d for y in years for d in calendar.holidays_for(y))

    if not days:
        console.print("[yellow]No holidays configured[/yellow]")
        return

    table = Table(title=f"{calendar.name} Holidays")
    table.add_column("Date", style="cyan")
    table.add_column("Day")
    table.add_column("Name")

    for day in days:
        table.add_row(day.isoformat(), day.strftime("%A"), names.get(day, ""))

    console.print(table)


if __name__ == "__main__":
    cli()
