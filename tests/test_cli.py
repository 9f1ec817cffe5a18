"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner
from mea_tou.cli import cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("MEA_TOU_CONFIG", raising=False)
    return CliRunner()


@pytest.fixture
def readings_file(tmp_path):
    path = tmp_path / "readings.json"
    path.write_text(json.dumps({
        "data": [{
            "data_list": [
                {"date": "09:30", "consumption_power": "1000", "grid_p_power": "-1000"},
                {"date": "23:00", "consumption_power": "2000", "grid_p_power": "2000"},
            ]
        }]
    }))
    return path


def test_classify_weekday(runner):
    result = runner.invoke(cli, ["classify", "2025-06-02"])
    assert result.exit_code == 0
    assert "weekday, on-peak 09:00-22:00" in result.output


def test_classify_holiday(runner):
    result = runner.invoke(cli, ["classify", "2025-04-14"])
    assert result.exit_code == 0
    assert "Songkran Festival" in result.output


def test_classify_weekend(runner):
    result = runner.invoke(cli, ["classify", "2025-06-07"])
    assert result.exit_code == 0
    assert "(weekend)" in result.output


def test_classify_uncovered_year_warns(runner):
    result = runner.invoke(cli, ["classify", "2026-06-02"])
    assert result.exit_code == 0
    assert "No holiday data for 2026" in result.output


def test_classify_invalid_date(runner):
    result = runner.invoke(cli, ["classify", "2025-02-30"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_aggregate_json(runner, readings_file):
    result = runner.invoke(
        cli, ["aggregate", "--date", "2025-04-13", "--file", str(readings_file), "--solar", "--json"]
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["tou_date"] is True
    assert data["unit"] == "kWh"
    assert data["consumption"] == {"total": 0.75, "off_peak": 0.75, "on_peak": 0.0}
    assert data["consumption_solar"]["to_grid"] == 0.25
    assert data["consumption_solar"]["from_solar"] == 0.25
    assert data["consumption_solar"]["total_production"] == 0.5


def test_aggregate_raw_watts(runner, readings_file):
    result = runner.invoke(
        cli, ["aggregate", "--date", "2025-06-02", "--file", str(readings_file), "--json"]
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["unit"] == "W"
    assert data["consumption"] == {"total": 3000, "off_peak": 2000, "on_peak": 1000}
    assert "consumption_solar" not in data


def test_aggregate_interval_override(runner, readings_file):
    result = runner.invoke(
        cli,
        ["aggregate", "--date", "2025-06-02", "--file", str(readings_file), "--unit", "kwh", "--interval", "30", "--json"],
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["consumption"]["total"] == 1.5


def test_aggregate_text(runner, readings_file):
    result = runner.invoke(
        cli, ["aggregate", "--date", "2025-06-02", "--file", str(readings_file), "--solar"]
    )
    assert result.exit_code == 0
    assert "TOU Summary for 2025-06-02" in result.output
    assert "Sold to grid: 0.25 kWh" in result.output


def test_aggregate_bad_reading(runner, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"date": "09:00", "consumption_power": "1"}, {"date": "99:00", "consumption_power": "1"}]))
    result = runner.invoke(cli, ["aggregate", "--date", "2025-06-02", "--file", str(path)])
    assert result.exit_code == 1
    assert "index 1" in result.output


def test_holidays(runner):
    result = runner.invoke(cli, ["holidays", "--year", "2025"])
    assert result.exit_code == 0
    assert "2025-04-13" in result.output
    assert "Constitution Day" in result.output


def test_holidays_empty_year(runner):
    result = runner.invoke(cli, ["holidays", "--year", "2030"])
    assert result.exit_code == 0
    assert "No holidays configured" in result.output


def test_custom_config(runner, tmp_path):
    config = tmp_path / "tou.yaml"
    config.write_text("holidays:\n  2026:\n    - {date: 2026-06-02, name: Test Day}\n")
    result = runner.invoke(cli, ["--config", str(config), "classify", "2026-06-02"])
    assert result.exit_code == 0
    assert "Test Day" in result.output


def test_malformed_holidays_config(runner, tmp_path):
    config = tmp_path / "tou.yaml"
    config.write_text("holidays:\n  2025: 2025-01-01\n")
    result = runner.invoke(cli, ["--config", str(config), "classify", "2025-06-02"])
    assert result.exit_code == 1
    assert "must be a list" in result.output
