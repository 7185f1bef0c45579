"""
Weather API Ingestion Module
Smart Crop Forecasting

Open-Meteo integration with:
- Current conditions + daily forecast for a coordinate pair
- Forward geocoding (place name -> coordinates) via Open-Meteo
- Reverse geocoding (coordinates -> place name) via Nominatim
- Deterministic synthetic forecast for offline use
- Normalized pandas DataFrame output
"""
import logging
import math
from datetime import date, timedelta
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd
import requests

from ..config import (
    NOMINATIM_REVERSE_URL,
    OPEN_METEO_FORECAST_URL,
    OPEN_METEO_GEOCODING_URL,
    UNKNOWN_LOCATION,
    WEATHER,
)
from ..schema import (
    DailyForecast,
    ForecastSet,
    InvalidInputError,
    LocationNotFoundError,
    WeatherReport,
    WeatherServiceError,
)

log = logging.getLogger(__name__)

SOURCE_OPEN_METEO = "open-meteo"
SOURCE_SYNTHETIC = "synthetic"

DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,precipitation_sum,relative_humidity_2m_mean"
CURRENT_FIELDS = "temperature_2m,relative_humidity_2m"


def whole(value) -> float:
    """Round half up to a whole number, the way the dashboard displays readings."""
    return float(math.floor(float(value) + 0.5))


# ═══════════════════════════════════════════════════════════════════════════════
# HTTP
# ═══════════════════════════════════════════════════════════════════════════════

def validate_coordinates(lat: float, lon: float) -> Tuple[float, float]:
    try:
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid coordinates: {lat!r}, {lon!r}") from None
    if not -90 <= lat <= 90:
        raise InvalidInputError(f"Latitude {lat} outside -90..90")
    if not -180 <= lon <= 180:
        raise InvalidInputError(f"Longitude {lon} outside -180..180")
    return lat, lon


def _get_json(url: str, params: dict, headers: Optional[dict] = None) -> Any:
    """Single GET request. No retries; any failure raises WeatherServiceError."""
    try:
        response = requests.get(url, params=params, headers=headers, timeout=WEATHER.timeout_s)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.Timeout as e:
        raise WeatherServiceError(f"Weather service timed out: {e}") from e
    except requests.exceptions.RequestException as e:
        raise WeatherServiceError(f"Failed to fetch weather data: {e}") from e
    except ValueError as e:
        raise WeatherServiceError(f"Weather service returned invalid JSON: {e}") from e


# ═══════════════════════════════════════════════════════════════════════════════
# OPEN-METEO
# ═══════════════════════════════════════════════════════════════════════════════

def parse_forecast(data: Dict[str, Any]) -> Tuple[Dict[str, float], ForecastSet]:
    """Turn an Open-Meteo payload into (current conditions, daily forecast)."""
    try:
        daily = data["daily"]
        current = data.get("current") or {}
        forecast = tuple(
            DailyForecast(
                date=day,
                max_temp_c=whole(daily["temperature_2m_max"][i]),
                min_temp_c=whole(daily["temperature_2m_min"][i]),
                precipitation_mm=whole(daily["precipitation_sum"][i] or 0),
                humidity_percent=whole(daily["relative_humidity_2m_mean"][i] or 0),
            )
            for i, day in enumerate(daily["time"])
        )
    except (KeyError, IndexError, TypeError) as e:
        raise WeatherServiceError(f"Unexpected forecast payload: {e!r}") from e
    except InvalidInputError as e:
        raise WeatherServiceError(f"Forecast failed validation: {e}") from e

    if not forecast:
        raise WeatherServiceError("Weather service returned an empty forecast")

    first = forecast[0]
    now = {
        "temperature_c": whole(current.get("temperature_2m", first.avg_temp_c)),
        "humidity_percent": whole(current.get("relative_humidity_2m", first.humidity_percent)),
        "rainfall_mm": first.precipitation_mm,
    }
    return now, forecast


def fetch_forecast(lat: float, lon: float, days: Optional[int] = None) -> Tuple[Dict[str, float], ForecastSet]:
    """Fetch current conditions and a daily forecast from Open-Meteo."""
    lat, lon = validate_coordinates(lat, lon)
    params = {
        "latitude": lat,
        "longitude": lon,
        "current": CURRENT_FIELDS,
        "daily": DAILY_FIELDS,
        "timezone": "auto",
        "forecast_days": days or WEATHER.forecast_days,
    }
    log.info(f"Fetching {params['forecast_days']}-day forecast for ({lat:.4f}, {lon:.4f})")
    return parse_forecast(_get_json(OPEN_METEO_FORECAST_URL, params))


def geocode(place: str) -> Tuple[float, float, str]:
    """Resolve a place name to (lat, lon, display name)."""
    place = (place or "").strip()
    if not place:
        raise InvalidInputError("Place name is empty")
    data = _get_json(OPEN_METEO_GEOCODING_URL, {"name": place, "count": 1, "language": "en", "format": "json"})
    results = (data or {}).get("results") or []
    if not results:
        raise LocationNotFoundError(f"No coordinates found for '{place}'")
    hit = results[0]
    name = ", ".join(p for p in (hit.get("name"), hit.get("admin1"), hit.get("country")) if p)
    return float(hit["latitude"]), float(hit["longitude"]), name or place


def reverse_geocode(lat: float, lon: float) -> str:
    """Best-effort place name for a coordinate pair; never raises."""
    params = {"lat": lat, "lon": lon, "format": "json", "accept-language": "en"}
    try:
        data = _get_json(NOMINATIM_REVERSE_URL, params, headers={"User-Agent": WEATHER.user_agent})
    except WeatherServiceError as e:
        log.warning(f"Geocoding error: {e}")
        return UNKNOWN_LOCATION

    address = (data or {}).get("address") or {}
    for key in ("city", "town", "village", "state"):
        if address.get(key):
            return address[key]
    display_name = (data or {}).get("display_name")
    if display_name:
        return display_name.split(",")[0].strip()
    return UNKNOWN_LOCATION


# ═══════════════════════════════════════════════════════════════════════════════
# SYNTHETIC
# ═══════════════════════════════════════════════════════════════════════════════

def generate_synthetic_forecast(
    lat: float,
    lon: float,
    days: int = 7,
    start: Optional[date] = None,
) -> ForecastSet:
    """Deterministic forecast for offline use, seeded from the coordinates."""
    lat, lon = validate_coordinates(lat, lon)
    start = start or date.today()
    rng = np.random.default_rng(int(abs(lat) * 100 + abs(lon) * 10) % 10_000)

    # Cooler away from the equator, seasonal swing by hemisphere
    base_temp = 30 - abs(lat) * 0.4
    seasonal = 8 * np.sin(2 * np.pi * (start.timetuple().tm_yday - 100) / 365)
    if lat < 0:
        seasonal = -seasonal
    is_monsoon = lat > 0 and 6 <= start.month <= 9

    forecast = []
    for i in range(days):
        mean = base_temp + seasonal + rng.normal(0, 1.5)
        spread = rng.uniform(3, 7)
        precip = rng.exponential(12 if is_monsoon else 2) if rng.random() < 0.5 else 0.0
        humidity = rng.uniform(70, 95) if is_monsoon else rng.uniform(35, 75)
        forecast.append(DailyForecast(
            date=(start + timedelta(days=i)).isoformat(),
            max_temp_c=whole(mean + spread),
            min_temp_c=whole(mean - spread),
            precipitation_mm=whole(precip),
            humidity_percent=whole(humidity),
        ))
    return tuple(forecast)


# ═══════════════════════════════════════════════════════════════════════════════
# UNIFIED INTERFACE
# ═══════════════════════════════════════════════════════════════════════════════

def fetch_weather(
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    place: Optional[str] = None,
    source: Optional[str] = None,
    days: Optional[int] = None,
) -> WeatherReport:
    """
    Current weather, daily forecast and place name for a location.

    Args:
        lat, lon: coordinates (take precedence over ``place``)
        place: place name to geocode when no coordinates are given
        source: "open-meteo" or "synthetic" (defaults to synthetic when
                CROP_FORECAST_OFFLINE is set)
        days: forecast length (default from config, 7)

    Raises:
        InvalidInputError: no location, or coordinates out of range
        LocationNotFoundError: place name did not resolve
        WeatherServiceError: the forecast request failed
    """
    source = source or (SOURCE_SYNTHETIC if WEATHER.offline else SOURCE_OPEN_METEO)
    if source not in (SOURCE_OPEN_METEO, SOURCE_SYNTHETIC):
        raise InvalidInputError(f"Unknown weather source: {source!r}")

    name = None
    if lat is None or lon is None:
        if not place:
            raise InvalidInputError("Provide coordinates or a place name")
        if source == SOURCE_SYNTHETIC:
            raise InvalidInputError("Place names need geocoding; pass coordinates in offline mode")
        lat, lon, name = geocode(place)
    lat, lon = validate_coordinates(lat, lon)
    days = days or WEATHER.forecast_days

    if source == SOURCE_SYNTHETIC:
        forecast = generate_synthetic_forecast(lat, lon, days)
        first = forecast[0]
        now = {
            "temperature_c": whole(first.avg_temp_c),
            "humidity_percent": first.humidity_percent,
            "rainfall_mm": first.precipitation_mm,
        }
        name = name or f"{lat:.2f}, {lon:.2f}"
    else:
        now, forecast = fetch_forecast(lat, lon, days)
        name = name or reverse_geocode(lat, lon)

    return WeatherReport(
        location=name,
        latitude=lat,
        longitude=lon,
        temperature_c=whole(now["temperature_c"]),
        humidity_percent=whole(now["humidity_percent"]),
        rainfall_mm=whole(now["rainfall_mm"]),
        forecast=forecast,
        source=source,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════════

def forecast_to_frame(forecast: ForecastSet) -> pd.DataFrame:
    """Forecast as a DataFrame indexed by date, with a mean temperature column."""
    df = pd.DataFrame([day.to_dict() for day in forecast])
    if df.empty:
        return df
    df["avg_temp_c"] = (df["max_temp_c"] + df["min_temp_c"]) / 2
    df["date"] = pd.to_datetime(df["date"])
    return df.set_index("date")


def summarize_forecast(forecast: ForecastSet) -> Dict[str, float]:
    """Summary statistics over the forecast period."""
    df = forecast_to_frame(forecast)
    if df.empty:
        raise InvalidInputError("Cannot summarize an empty forecast")
    return {
        "total_precipitation_mm": round(float(df["precipitation_mm"].sum()), 1),
        "avg_temp_c": round(float(df["avg_temp_c"].mean()), 1),
        "max_temp_c": float(df["max_temp_c"].max()),
        "min_temp_c": float(df["min_temp_c"].min()),
        "avg_humidity_pct": round(float(df["humidity_percent"].mean()), 1),
        "rain_days": int((df["precipitation_mm"] > 0.1).sum()),
    }
