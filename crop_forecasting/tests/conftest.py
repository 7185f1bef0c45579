"""Shared fixtures for the crop forecasting test suite."""
from datetime import date, timedelta

import pytest

from crop_forecasting.schema import DailyForecast, FarmingConditions, WeatherReport


def build_forecast(days, start=date(2024, 6, 15)):
    """(max, min, precip) triples -> tuple of consecutive DailyForecast."""
    return tuple(
        DailyForecast(
            date=(start + timedelta(days=i)).isoformat(),
            max_temp_c=hi,
            min_temp_c=lo,
            precipitation_mm=rain,
            humidity_percent=60,
        )
        for i, (hi, lo, rain) in enumerate(days)
    )


@pytest.fixture
def make_forecast():
    return build_forecast


@pytest.fixture
def mild_week():
    """Seven days averaging 20°C with 2mm rain each (14mm total)."""
    return build_forecast([(25, 15, 2)] * 7)


@pytest.fixture
def rice_conditions():
    return FarmingConditions.from_raw("rice", "clay", "monsoon", 28, 1200)


@pytest.fixture
def weather_report(mild_week):
    return WeatherReport(
        location="Pune",
        latitude=18.5204,
        longitude=73.8567,
        temperature_c=22.0,
        humidity_percent=60.0,
        rainfall_mm=2.0,
        forecast=mild_week,
    )
