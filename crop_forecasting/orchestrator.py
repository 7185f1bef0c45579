"""
Smart Crop Forecasting Orchestrator

Ties the weather collaborator and the three rule engines together:
1. Obtain weather for the chosen location (optional)
2. Analyse the forecast for a planting window
3. Recommend genetic traits for the farming conditions
4. Rank crops for the soil / temperature / rainfall / season
5. Attach the dashboard's placeholder metrics

Usage:
    from crop_forecasting.orchestrator import run_prediction
    from crop_forecasting.schema import FarmingConditions

    conditions = FarmingConditions.from_raw("rice", "clay", "monsoon", 28, 1200)
    result = run_prediction(conditions, latitude=18.52, longitude=73.86)
    print(result.planting_window.reason)
"""
import logging
from typing import Iterable, Optional, Tuple

from .config import MOCK_METRICS
from .ingest import weather_api
from .recommend import analyze_planting_window, recommend_crops, recommend_traits
from .recommend.crops import DEFAULT_TOP_N
from .recommend.traits import DEFAULT_VARIANT
from .schema import (
    FarmingConditions,
    InvalidInputError,
    PredictionResult,
    Trait,
    WeatherReport,
)

log = logging.getLogger(__name__)


def parse_selected_traits(values: Optional[Iterable]) -> Tuple[Trait, ...]:
    """Trait names (camelCase values or Trait members) -> unique Trait tuple."""
    selected = []
    for value in values or ():
        try:
            trait = value if isinstance(value, Trait) else Trait(str(value).strip())
        except ValueError:
            raise InvalidInputError(f"Unknown genetic trait: {value!r}") from None
        if trait not in selected:
            selected.append(trait)
    return tuple(selected)


def conditions_from_weather(
    weather: WeatherReport,
    crop_type: str,
    soil_type: str,
    season: str,
) -> FarmingConditions:
    """
    Pre-fill temperature (forecast mean) and rainfall (forecast total) from live weather.

    The rainfall is a one-week total, so against the seasonal trait thresholds
    it almost always reads as low rainfall.
    """
    summary = weather_api.summarize_forecast(weather.forecast)
    return FarmingConditions.from_raw(
        crop_type=crop_type,
        soil_type=soil_type,
        season=season,
        temperature_c=summary["avg_temp_c"],
        rainfall_mm=summary["total_precipitation_mm"],
    )


def run_prediction(
    conditions: FarmingConditions,
    selected_traits: Iterable = (),
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    place: Optional[str] = None,
    weather: Optional[WeatherReport] = None,
    fetch_weather: bool = True,
    weather_source: Optional[str] = None,
    trait_variant: str = DEFAULT_VARIANT,
    top_n: int = DEFAULT_TOP_N,
) -> PredictionResult:
    """
    Run the full prediction pipeline for one form submission.

    Weather is taken from ``weather`` when given, otherwise fetched when a
    location is provided and ``fetch_weather`` is set. Weather errors are
    not caught here; the caller decides how to show them.
    """
    has_location = (latitude is not None and longitude is not None) or bool(place)
    if weather is None and fetch_weather and has_location:
        weather = weather_api.fetch_weather(
            lat=latitude, lon=longitude, place=place, source=weather_source
        )

    planting_window = None
    if weather is not None:
        planting_window = analyze_planting_window(weather.forecast)
        log.info(f"Planting window for {weather.location}: {planting_window.reason}")

    traits = recommend_traits(conditions, trait_variant)
    crops = recommend_crops(
        conditions.soil_type,
        conditions.temperature_c,
        conditions.rainfall_mm,
        conditions.season,
        top_n=top_n,
    )
    log.info(
        f"Prediction for {conditions.crop_type or 'unknown crop'}: "
        f"{len(traits)} traits, top crop {crops[0].crop_id if crops else 'none'}"
    )

    return PredictionResult(
        conditions=conditions,
        recommended_traits=traits,
        crop_matches=crops,
        selected_traits=parse_selected_traits(selected_traits),
        weather=weather,
        planting_window=planting_window,
        metrics=MOCK_METRICS,
    )
