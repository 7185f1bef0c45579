"""
Smart Crop Forecasting - Configuration
Catalogs, weather endpoints, runtime settings and dashboard placeholders
"""
import os
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

# ─────────────────────────────────────────────────────────────────────────────
# CATALOGS
# ─────────────────────────────────────────────────────────────────────────────

# Crop identifiers offered by the dashboard form (id -> display name)
CROPS: Dict[str, str] = {
    "wheat": "Wheat",
    "rice": "Rice",
    "corn": "Corn",
    "soybean": "Soybean",
    "cotton": "Cotton",
    "barley": "Barley",
    "tomato": "Tomato",
    "potato": "Potato",
    "sugarcane": "Sugarcane",
    "millet": "Millet",
    "sorghum": "Sorghum",
    "groundnut": "Groundnut",
    "chickpea": "Chickpea",
    "mustard": "Mustard",
    "sunflower": "Sunflower",
    "onion": "Onion",
}

SOIL_TYPES: List[str] = ["clay", "sandy", "loamy", "silty", "black", "red"]

SEASONS: List[str] = [
    "spring", "summer", "autumn", "winter",
    "monsoon", "kharif", "rabi", "zaid",
]

TRAITS: List[str] = [
    "pestResistance", "highYield", "droughtTolerance",
    "diseaseResistance", "fastGrowth", "climateAdaptability",
]

# ─────────────────────────────────────────────────────────────────────────────
# WEATHER ENDPOINTS
# ─────────────────────────────────────────────────────────────────────────────

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
OPEN_METEO_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"

UNKNOWN_LOCATION = "Unknown Location"

# Pune, Maharashtra
DEFAULT_LOCATION: Tuple[float, float] = (18.5204, 73.8567)


@dataclass
class WeatherConfig:
    forecast_days: int = int(os.getenv("CROP_FORECAST_DAYS", "7"))
    timeout_s: float = float(os.getenv("REQUEST_TIMEOUT_S", "15"))
    user_agent: str = os.getenv("CROP_FORECAST_USER_AGENT", "Smart-Crop-Forecasting-App")
    offline: bool = os.getenv("CROP_FORECAST_OFFLINE", "0").lower() in ("1", "true", "yes")

WEATHER = WeatherConfig()

# ─────────────────────────────────────────────────────────────────────────────
# API CONFIG
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class APIConfig:
    host: str = os.getenv("CROP_FORECAST_HOST", "0.0.0.0")
    port: int = int(os.getenv("CROP_FORECAST_PORT", "8000"))
    reload: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

API_CONFIG = APIConfig()

# ─────────────────────────────────────────────────────────────────────────────
# REPORT CONFIG
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ReportConfig:
    title: str = "Smart Crop Forecasting Report"
    footer: str = "Smart Crop Forecasting System"
    margin_mm: float = 15.0
    text_reserve_mm: float = 20.0
    filename_prefix: str = "Crop_Forecast_Report"

REPORT = ReportConfig()

# ─────────────────────────────────────────────────────────────────────────────
# LOGGING
# ─────────────────────────────────────────────────────────────────────────────

LOG_LEVEL = os.getenv("CROP_FORECAST_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# ─────────────────────────────────────────────────────────────────────────────
# DASHBOARD PLACEHOLDERS
# ─────────────────────────────────────────────────────────────────────────────

# The dashboard shows a short "analysing" pause before results appear.
PREDICTION_DELAY_SECONDS = 2.0


@dataclass(frozen=True)
class MockMetrics:
    """Fixed headline figures shown on the dashboard and in reports.

    None of these are computed. No model is trained and no genetic
    algorithm is run; they are display constants only.
    """
    accuracy_pct: float = 94.5
    ga_generations: int = 1247
    yield_improvement_pct: float = 23.4

    def to_dict(self) -> Dict[str, float]:
        return {
            "accuracy_pct": self.accuracy_pct,
            "ga_generations": self.ga_generations,
            "yield_improvement_pct": self.yield_improvement_pct,
            "mock": True,
        }

MOCK_METRICS = MockMetrics()
