"""
Domain Schema
Smart Crop Forecasting

Immutable records passed between the weather collaborator, the three rule
engines and the presentation layer. Every record is rebuilt from scratch on
each form submission; nothing here carries state across calls.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .config import MOCK_METRICS, MockMetrics


# ═══════════════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

class CropForecastError(Exception):
    """Base class for every error raised by this package."""


class InvalidInputError(CropForecastError, ValueError):
    """Input outside the declared domain (empty forecast, bad numbers, ...)."""


class WeatherServiceError(CropForecastError):
    """The weather provider could not be reached or returned garbage."""


class LocationNotFoundError(WeatherServiceError):
    """A place name did not resolve to coordinates."""


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════════

class Trait(str, Enum):
    PEST_RESISTANCE = "pestResistance"
    HIGH_YIELD = "highYield"
    DROUGHT_TOLERANCE = "droughtTolerance"
    DISEASE_RESISTANCE = "diseaseResistance"
    FAST_GROWTH = "fastGrowth"
    CLIMATE_ADAPTABILITY = "climateAdaptability"

    @property
    def label(self) -> str:
        """Human label, e.g. ``pestResistance`` -> ``Pest Resistance``."""
        return trait_label(self.value)


class SoilType(str, Enum):
    CLAY = "clay"
    SANDY = "sandy"
    LOAMY = "loamy"
    SILTY = "silty"
    BLACK = "black"
    RED = "red"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"
    MONSOON = "monsoon"
    KHARIF = "kharif"
    RABI = "rabi"
    ZAID = "zaid"


def trait_label(name: str) -> str:
    spaced = re.sub(r"([A-Z])", r" \1", name).strip()
    return spaced[:1].upper() + spaced[1:]


def _normalize(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return str(value or "").strip().lower()


def _to_float(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from None
    if number != number:  # NaN
        raise InvalidInputError(f"{name} must be a number, got NaN")
    return number


def _iso_day(value: Any) -> str:
    """Normalise a forecast day to ``YYYY-MM-DD`` so dates order as strings."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value)).isoformat()
    except ValueError:
        raise InvalidInputError(f"Invalid forecast date: {value!r}") from None


# ═══════════════════════════════════════════════════════════════════════════════
# INPUTS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FarmingConditions:
    """One snapshot of the dashboard form."""
    crop_type: str
    soil_type: str
    season: str
    temperature_c: float
    rainfall_mm: float

    @classmethod
    def from_raw(
        cls,
        crop_type: Any,
        soil_type: Any,
        season: Any,
        temperature_c: Any,
        rainfall_mm: Any,
    ) -> "FarmingConditions":
        """Build from loosely typed form values (strings, enums, numbers)."""
        return cls(
            crop_type=_normalize(crop_type),
            soil_type=_normalize(soil_type),
            season=_normalize(season),
            temperature_c=_to_float("temperature", temperature_c),
            rainfall_mm=_to_float("rainfall", rainfall_mm),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "crop_type": self.crop_type,
            "soil_type": self.soil_type,
            "season": self.season,
            "temperature_c": self.temperature_c,
            "rainfall_mm": self.rainfall_mm,
        }


@dataclass(frozen=True)
class DailyForecast:
    """A single forecast day. Validated on construction."""
    date: str
    max_temp_c: float
    min_temp_c: float
    precipitation_mm: float = 0.0
    humidity_percent: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "date", _iso_day(self.date))
        for name in ("max_temp_c", "min_temp_c", "precipitation_mm", "humidity_percent"):
            object.__setattr__(self, name, _to_float(name, getattr(self, name)))
        if self.min_temp_c > self.max_temp_c:
            raise InvalidInputError(
                f"{self.date}: min temperature {self.min_temp_c} exceeds max {self.max_temp_c}"
            )
        if self.precipitation_mm < 0:
            raise InvalidInputError(f"{self.date}: negative precipitation {self.precipitation_mm}")
        if not 0 <= self.humidity_percent <= 100:
            raise InvalidInputError(f"{self.date}: humidity {self.humidity_percent} outside 0-100")

    @property
    def avg_temp_c(self) -> float:
        return (self.max_temp_c + self.min_temp_c) / 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "max_temp_c": self.max_temp_c,
            "min_temp_c": self.min_temp_c,
            "precipitation_mm": self.precipitation_mm,
            "humidity_percent": self.humidity_percent,
        }


ForecastSet = Tuple[DailyForecast, ...]


# ═══════════════════════════════════════════════════════════════════════════════
# OUTPUTS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TraitSuggestion:
    trait: Trait
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return {"trait": self.trait.value, "label": self.trait.label, "reason": self.reason}


@dataclass(frozen=True)
class PlantingWindowVerdict:
    recommended: bool
    reason: str
    best_days: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommended": self.recommended,
            "reason": self.reason,
            "best_days": list(self.best_days),
        }


@dataclass(frozen=True)
class CropMatch:
    crop_id: str
    name: str
    reasons: Tuple[str, ...]
    score: int

    @property
    def reason(self) -> str:
        return ", ".join(self.reasons)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "crop_id": self.crop_id,
            "name": self.name,
            "reason": self.reason,
            "reasons": list(self.reasons),
            "score": self.score,
        }


@dataclass(frozen=True)
class WeatherReport:
    """Current conditions plus the daily forecast for one location."""
    location: str
    latitude: float
    longitude: float
    temperature_c: float
    humidity_percent: float
    rainfall_mm: float
    forecast: ForecastSet
    source: str = "open-meteo"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "temperature_c": self.temperature_c,
            "humidity_percent": self.humidity_percent,
            "rainfall_mm": self.rainfall_mm,
            "forecast": [day.to_dict() for day in self.forecast],
            "source": self.source,
        }


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PredictionResult:
    """Everything the Results page and the PDF report display."""
    conditions: FarmingConditions
    recommended_traits: Tuple[TraitSuggestion, ...]
    crop_matches: Tuple[CropMatch, ...]
    selected_traits: Tuple[Trait, ...] = ()
    weather: Optional[WeatherReport] = None
    planting_window: Optional[PlantingWindowVerdict] = None
    metrics: MockMetrics = MOCK_METRICS
    generated_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conditions": self.conditions.to_dict(),
            "selected_traits": [t.value for t in self.selected_traits],
            "recommended_traits": [s.to_dict() for s in self.recommended_traits],
            "crop_matches": [m.to_dict() for m in self.crop_matches],
            "weather": self.weather.to_dict() if self.weather else None,
            "planting_window": self.planting_window.to_dict() if self.planting_window else None,
            "metrics": self.metrics.to_dict(),
            "generated_at": self.generated_at.isoformat(timespec="seconds"),
        }
