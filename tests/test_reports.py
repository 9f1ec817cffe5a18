from mea_tou.aggregator import calculate_day
from mea_tou.reports.daily import format_day_aggregate_text, on_peak_percent


def test_format_plain_day():
    """Plain mode reports summed watts and no solar section."""
    readings = [{"date": "10:00", "consumption_power": 300}, {"date": "23:00", "consumption_power": 100}]
    result = calculate_day("2025-06-02", readings)
    text = format_day_aggregate_text(result)
    assert "Day type: weekday TOU split" in text
    assert "On-peak: 300 W (75.0%)" in text
    assert "Solar:" not in text

def test_format_solar_day():
    readings = [{"date": "12:00", "consumption_power": 2000, "grid_p_power": -2000}]
    result = calculate_day("2025-06-07", readings, solar_mode=True)
    text = format_day_aggregate_text(result)
    assert "all day off-peak" in text
    assert "Self-consumed: 0.50 kWh" in text
    assert "Production: 1.00 kWh" in text

def test_on_peak_percent_empty_day():
    assert on_peak_percent(calculate_day("2025-06-02", [])) == 0
