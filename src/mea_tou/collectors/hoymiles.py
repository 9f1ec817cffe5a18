"""Hoymiles inverter export reader.

Reads the per-day power export of a Hoymiles S-Miles installation and
returns the raw interval readings for the aggregator. The export wraps
the readings as {"data": [{"data_list": [...]}]}, each entry having:
  - date: time of day (HH:MM)
  - consumption_power: household load in watts
  - grid_p_power: grid power in watts (positive = buying, negative = selling)

CSV exports use the same column names, with "time" accepted for "date".
"""

import csv
import json
from pathlib import Path

from ..errors import TouError


class PayloadError(TouError, ValueError):
    """The export file doesn't have the expected shape."""
    pass


def extract_data_list(payload) -> list[dict]:
    """Pull the list of readings out of an export payload.

    Accepts the full export, a single {"data_list": [...]} station entry,
    or a bare list of readings.
    """
    if isinstance(payload, dict) and "data" in payload:
        data = payload["data"]
        if not isinstance(data, list) or not data:
            raise PayloadError("Export has no station data")
        payload = data[0]

    if isinstance(payload, dict):
        if "data_list" not in payload:
            raise PayloadError("Export entry has no data_list")
        payload = payload["data_list"]

    if not isinstance(payload, list):
        raise PayloadError(f"Expected a list of readings, got {type(payload).__name__}")
    return payload


def load_json(json_path: Path) -> list[dict]:
    """Read readings from a JSON export file."""
    with open(json_path) as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise PayloadError(f"Invalid JSON in {json_path}: {e}")
    return extract_data_list(payload)


def load_csv(csv_path: Path) -> list[dict]:
    """Read readings from a CSV export file.

    Empty grid_p_power cells are dropped so the reading counts as having no
    grid measurement.
    """
    readings = []
    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames or "consumption_power" not in reader.fieldnames:
            raise PayloadError(f"{csv_path} has no consumption_power column")

        for row in reader:
            reading = {k: v for k, v in row.items() if k is not None and v not in (None, "")}
            readings.append(reading)
    return readings


def load_readings(path: Path) -> list[dict]:
    """Read readings from a JSON or CSV export, chosen by file extension."""
    if path.suffix.lower() == ".csv":
        return load_csv(path)
    return load_json(path)
