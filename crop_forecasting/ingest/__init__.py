"""Ingest package initialization."""
from .weather_api import (
    fetch_weather,
    fetch_forecast,
    geocode,
    reverse_geocode,
    generate_synthetic_forecast,
    forecast_to_frame,
    summarize_forecast,
)

__all__ = [
    "fetch_weather",
    "fetch_forecast",
    "geocode",
    "reverse_geocode",
    "generate_synthetic_forecast",
    "forecast_to_frame",
    "summarize_forecast",
]
