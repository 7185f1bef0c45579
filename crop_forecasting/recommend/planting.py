"""Planting window analysis over a short daily forecast."""
import logging
from typing import Iterable, List

from ..schema import DailyForecast, InvalidInputError, PlantingWindowVerdict

log = logging.getLogger(__name__)

FREEZING_C = 0
HEAT_WAVE_C = 35
HEAVY_RAIN_MM = 50
DRY_WEEK_MM = 5
BEST_DAY_TEMP_C = (10, 30)
BEST_DAY_MAX_RAIN_MM = 10
IDEAL_AVG_TEMP_C = (15, 25)
IDEAL_RAINFALL_MM = (10, 40)
MAX_BEST_DAYS = 3
GOOD_WINDOW_DAYS = 3

REASON_FROST = "Freezing temperatures expected. Wait for warmer conditions to avoid frost damage."
REASON_HEAT = "Extreme heat expected. Delay planting or ensure adequate irrigation systems are ready."
REASON_HEAVY_RAIN = "Heavy rainfall expected. Wait for drier conditions to prevent seed rot and soil compaction."
REASON_DRY = "Dry conditions ahead. Good for planting, but prepare irrigation immediately after sowing."
REASON_EXCELLENT = "Excellent conditions! Moderate temperatures and adequate rainfall create ideal planting conditions."
REASON_GOOD_WINDOW = "Good planting window. {count} favorable days ahead with moderate conditions."
REASON_ACCEPTABLE = "Conditions are acceptable for planting with proper soil preparation and care."


def _validate(forecast: Iterable[DailyForecast]) -> List[DailyForecast]:
    if forecast is None:
        raise InvalidInputError("Forecast is required")
    days = list(forecast)
    if not days:
        raise InvalidInputError("Forecast is empty; at least one day is required")
    for day in days:
        if not isinstance(day, DailyForecast):
            raise InvalidInputError(f"Forecast entries must be DailyForecast, got {type(day).__name__}")
    dates = [day.date for day in days]
    if any(later <= earlier for earlier, later in zip(dates, dates[1:])):
        raise InvalidInputError("Forecast dates must be unique and in chronological order")
    return days


def find_best_days(forecast: Iterable[DailyForecast], limit: int = MAX_BEST_DAYS) -> List[str]:
    """Dates with a moderate average temperature and little rain, in order."""
    low, high = BEST_DAY_TEMP_C
    best = [
        day.date for day in forecast
        if low <= day.avg_temp_c <= high and day.precipitation_mm < BEST_DAY_MAX_RAIN_MM
    ]
    return best[:limit]


def analyze_planting_window(forecast: Iterable[DailyForecast]) -> PlantingWindowVerdict:
    """
    Classify a daily forecast into a planting recommendation.

    Branches are checked in priority order and the first match wins:
    frost, heat wave, heavy rain, dry week, ideal week, good window, fallback.

    Raises:
        InvalidInputError: empty forecast, foreign entries, or unordered dates.
    """
    days = _validate(forecast)

    has_freezing_day = any(day.min_temp_c < FREEZING_C for day in days)
    has_heat_wave = any(day.max_temp_c > HEAT_WAVE_C for day in days)
    has_heavy_rain = any(day.precipitation_mm > HEAVY_RAIN_MM for day in days)
    total_rainfall = sum(day.precipitation_mm for day in days)
    avg_temp = sum(day.avg_temp_c for day in days) / len(days)

    # Counted over the full forecast; only the first few are reported.
    favorable = find_best_days(days, limit=len(days))
    best_days = tuple(favorable[:MAX_BEST_DAYS])

    if has_freezing_day:
        recommended, reason = False, REASON_FROST
    elif has_heat_wave:
        recommended, reason = False, REASON_HEAT
    elif has_heavy_rain:
        recommended, reason = False, REASON_HEAVY_RAIN
    elif total_rainfall < DRY_WEEK_MM:
        recommended, reason = True, REASON_DRY
    elif (IDEAL_AVG_TEMP_C[0] <= avg_temp <= IDEAL_AVG_TEMP_C[1]
          and IDEAL_RAINFALL_MM[0] <= total_rainfall <= IDEAL_RAINFALL_MM[1]):
        recommended, reason = True, REASON_EXCELLENT
    elif len(favorable) >= GOOD_WINDOW_DAYS:
        recommended, reason = True, REASON_GOOD_WINDOW.format(count=len(favorable))
    else:
        recommended, reason = True, REASON_ACCEPTABLE

    log.debug(
        "Planting window: %d days, rain=%.1fmm, avg=%.1f°C -> %s",
        len(days), total_rainfall, avg_temp, "recommended" if recommended else "not recommended",
    )
    return PlantingWindowVerdict(recommended=recommended, reason=reason, best_days=best_days)


class PlantingWindowAnalyzer:
    def analyze(self, forecast: Iterable[DailyForecast]) -> PlantingWindowVerdict:
        return analyze_planting_window(forecast)
