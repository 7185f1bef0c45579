"""
Rule-based crop recommender.

Every crop in the catalog starts at a base score of 50 and collects bonuses
for each part of its agronomic profile the conditions satisfy (soil, the
temperature band, the rainfall band and the season). Crops with no matching
rule are left out entirely; the rest are ranked by score.
"""
import logging
from typing import Dict, List, Optional, Tuple

from ..schema import CropMatch, InvalidInputError

log = logging.getLogger(__name__)

BASE_SCORE = 50
MAX_SCORE = 100
DEFAULT_TOP_N = 5

# Agronomic profiles. Catalog order is the tie-break order.
# temp: inclusive °C band; rain: mm band, None = open-ended.
# An open-ended band needs a value strictly above its lower bound.
CROP_PROFILES: Dict[str, Dict] = {
    "rice": {
        "name": "Rice",
        "soils": ("clay", "loamy"), "soil_bonus": 20,
        "rain": (150, None), "rain_bonus": 20,
        "temp": (20, 35), "temp_bonus": 15,
        "seasons": ("monsoon", "kharif"), "season_bonus": 15,
    },
    "wheat": {
        "name": "Wheat",
        "soils": ("loamy", "clay", "black"), "soil_bonus": 20,
        "rain": (50, 100), "rain_bonus": 15,
        "temp": (10, 25), "temp_bonus": 20,
        "seasons": ("winter", "rabi"), "season_bonus": 20,
    },
    "corn": {
        "name": "Corn (Maize)",
        "soils": ("loamy", "silty"), "soil_bonus": 20,
        "rain": (50, 150), "rain_bonus": 15,
        "temp": (18, 32), "temp_bonus": 15,
        "seasons": ("summer", "kharif", "spring"), "season_bonus": 15,
    },
    "cotton": {
        "name": "Cotton",
        "soils": ("black", "loamy"), "soil_bonus": 25,
        "rain": (50, 120), "rain_bonus": 15,
        "temp": (21, 35), "temp_bonus": 15,
        "seasons": ("summer", "kharif"), "season_bonus": 15,
    },
    "sugarcane": {
        "name": "Sugarcane",
        "soils": ("loamy", "clay", "black"), "soil_bonus": 15,
        "rain": (100, None), "rain_bonus": 20,
        "temp": (20, 38), "temp_bonus": 15,
        "seasons": ("spring", "monsoon", "kharif"), "season_bonus": 10,
    },
    "soybean": {
        "name": "Soybean",
        "soils": ("loamy", "black"), "soil_bonus": 20,
        "rain": (60, 150), "rain_bonus": 15,
        "temp": (20, 30), "temp_bonus": 15,
        "seasons": ("monsoon", "kharif"), "season_bonus": 15,
    },
    "potato": {
        "name": "Potato",
        "soils": ("sandy", "loamy"), "soil_bonus": 20,
        "rain": (40, 100), "rain_bonus": 10,
        "temp": (15, 25), "temp_bonus": 20,
        "seasons": ("winter", "rabi", "autumn"), "season_bonus": 15,
    },
    "tomato": {
        "name": "Tomato",
        "soils": ("loamy", "red", "sandy"), "soil_bonus": 15,
        "rain": (40, 120), "rain_bonus": 10,
        "temp": (18, 30), "temp_bonus": 20,
        "seasons": ("spring", "autumn", "rabi"), "season_bonus": 15,
    },
    "barley": {
        "name": "Barley",
        "soils": ("loamy", "sandy"), "soil_bonus": 15,
        "rain": (30, 80), "rain_bonus": 15,
        "temp": (7, 22), "temp_bonus": 20,
        "seasons": ("winter", "rabi"), "season_bonus": 15,
    },
    "millet": {
        "name": "Millet",
        "soils": ("sandy", "red"), "soil_bonus": 20,
        "rain": (20, 80), "rain_bonus": 20,
        "temp": (25, 38), "temp_bonus": 15,
        "seasons": ("summer", "kharif", "zaid"), "season_bonus": 10,
    },
    "groundnut": {
        "name": "Groundnut",
        "soils": ("sandy", "red", "loamy"), "soil_bonus": 20,
        "rain": (50, 125), "rain_bonus": 15,
        "temp": (25, 35), "temp_bonus": 15,
        "seasons": ("kharif", "summer"), "season_bonus": 10,
    },
    "chickpea": {
        "name": "Chickpea",
        "soils": ("black", "loamy"), "soil_bonus": 20,
        "rain": (25, 60), "rain_bonus": 15,
        "temp": (15, 30), "temp_bonus": 15,
        "seasons": ("rabi", "winter"), "season_bonus": 20,
    },
    "mustard": {
        "name": "Mustard",
        "soils": ("loamy", "sandy"), "soil_bonus": 15,
        "rain": (25, 50), "rain_bonus": 15,
        "temp": (10, 25), "temp_bonus": 20,
        "seasons": ("rabi", "winter"), "season_bonus": 20,
    },
    "sunflower": {
        "name": "Sunflower",
        "soils": ("black", "loamy", "red"), "soil_bonus": 15,
        "rain": (40, 100), "rain_bonus": 10,
        "temp": (20, 30), "temp_bonus": 15,
        "seasons": ("zaid", "spring", "summer"), "season_bonus": 15,
    },
}


def _in_band(value: float, band: Tuple[Optional[float], Optional[float]]) -> bool:
    low, high = band
    if high is None:
        return low is None or value > low
    return (low is None or value >= low) and value <= high


def _band_text(band: Tuple[Optional[float], Optional[float]], unit: str) -> str:
    low, high = band
    if high is None:
        return f"above {low}{unit}"
    if low is None:
        return f"up to {high}{unit}"
    return f"within {low}-{high}{unit}"


def score_crop(
    profile: Dict,
    soil_type: str,
    temperature_c: float,
    rainfall_mm: float,
    season: str,
) -> Tuple[int, List[str]]:
    """Score one crop profile. Returns (score, matched reason phrases)."""
    score = BASE_SCORE
    reasons: List[str] = []

    if soil_type in profile["soils"]:
        score += profile["soil_bonus"]
        reasons.append(f"{soil_type.title()} soil suits {profile['name'].lower()}")

    if _in_band(temperature_c, profile["temp"]):
        score += profile["temp_bonus"]
        reasons.append(f"temperature {_band_text(profile['temp'], '°C')}")

    if _in_band(rainfall_mm, profile["rain"]):
        score += profile["rain_bonus"]
        reasons.append(f"rainfall {_band_text(profile['rain'], 'mm')}")

    if season in profile["seasons"]:
        score += profile["season_bonus"]
        reasons.append(f"{season} is a preferred season")

    return min(score, MAX_SCORE), reasons


def recommend_crops(
    soil_type: str,
    temperature_c: float,
    rainfall_mm: float,
    season: str,
    top_n: int = DEFAULT_TOP_N,
) -> Tuple[CropMatch, ...]:
    """
    Rank catalog crops for the given conditions.

    Args:
        soil_type: soil identifier (unknown values simply never match)
        temperature_c: expected temperature
        rainfall_mm: expected rainfall
        season: season identifier (unknown values simply never match)
        top_n: maximum number of matches returned (1-5)

    Returns:
        Up to ``top_n`` CropMatch records, best first. Equal scores keep
        catalog order.
    """
    if not 1 <= top_n <= DEFAULT_TOP_N:
        raise InvalidInputError(f"top_n must be between 1 and {DEFAULT_TOP_N}, got {top_n}")
    soil = str(soil_type or "").strip().lower()
    season_key = str(season or "").strip().lower()

    candidates = []
    for crop_id, profile in CROP_PROFILES.items():
        score, reasons = score_crop(profile, soil, temperature_c, rainfall_mm, season_key)
        if not reasons:
            continue
        candidates.append(CropMatch(
            crop_id=crop_id,
            name=profile["name"],
            reasons=tuple(reasons),
            score=score,
        ))

    # sorted() is stable, so ties stay in catalog order
    ranked = sorted(candidates, key=lambda m: m.score, reverse=True)[:top_n]
    log.debug("Crop ranking for soil=%s season=%s: %s", soil, season_key,
              [(m.crop_id, m.score) for m in ranked])
    return tuple(ranked)


class CropRecommender:
    def __init__(self, top_n: int = DEFAULT_TOP_N):
        self.top_n = top_n

    def recommend(self, soil_type: str, temperature_c: float, rainfall_mm: float,
                  season: str) -> Tuple[CropMatch, ...]:
        return recommend_crops(soil_type, temperature_c, rainfall_mm, season, self.top_n)
