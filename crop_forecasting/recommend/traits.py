"""
Trait Recommender

Maps farming conditions to a deduplicated list of suggested genetic traits.

Rules are evaluated in a fixed order (temperature, rainfall, crop, soil,
season, baseline). Each matching rule appends one (trait, reason) pair; when
the same trait is suggested twice the first reason is kept and later ones are
dropped.

Two rule tables exist:
- "extended" (default): cold threshold 15°C, sixteen crops, Indian seasons,
  baseline adds high yield and pest resistance.
- "basic": cold threshold 10°C, the five original dashboard crops, baseline
  adds high yield only.
"""
import logging
from typing import Dict, List, Tuple

from ..schema import FarmingConditions, InvalidInputError, Trait, TraitSuggestion

log = logging.getLogger(__name__)

T = Trait

# ═══════════════════════════════════════════════════════════════════════════════
# RULE TABLES
# ═══════════════════════════════════════════════════════════════════════════════

HEAT_THRESHOLD_C = 30
LOW_RAINFALL_MM = 500
HIGH_RAINFALL_MM = 1500

CROP_TRAITS: Dict[str, List[Tuple[Trait, str]]] = {
    "wheat": [
        (T.DISEASE_RESISTANCE, "Wheat is prone to rust and powdery mildew"),
        (T.HIGH_YIELD, "High-yield wheat cultivars respond well to good management"),
    ],
    "rice": [
        (T.DISEASE_RESISTANCE, "Rice blast and bacterial blight are common in paddy fields"),
        (T.HIGH_YIELD, "High-yield rice varieties improve grain output per hectare"),
    ],
    "barley": [
        (T.DISEASE_RESISTANCE, "Barley is susceptible to leaf rust and net blotch"),
        (T.HIGH_YIELD, "Improved barley lines raise grain yield"),
    ],
    "corn": [
        (T.PEST_RESISTANCE, "Corn borers and fall armyworm cause major losses in corn"),
        (T.HIGH_YIELD, "Hybrid corn varieties offer strong yield potential"),
    ],
    "soybean": [
        (T.PEST_RESISTANCE, "Pod borers and stem flies attack soybean"),
        (T.DISEASE_RESISTANCE, "Soybean rust spreads quickly in humid weather"),
    ],
    "cotton": [
        (T.PEST_RESISTANCE, "Bollworms are the main threat to cotton"),
        (T.DROUGHT_TOLERANCE, "Cotton is often grown under rain-fed conditions"),
    ],
    "tomato": [
        (T.DISEASE_RESISTANCE, "Tomato suffers from early blight and leaf curl virus"),
        (T.PEST_RESISTANCE, "Fruit borers and whiteflies damage tomato crops"),
    ],
    "potato": [
        (T.DISEASE_RESISTANCE, "Late blight is the most damaging potato disease"),
        (T.HIGH_YIELD, "High-yield potato varieties increase tuber output"),
    ],
    "sugarcane": [
        (T.HIGH_YIELD, "Sugarcane returns depend on cane tonnage"),
        (T.DROUGHT_TOLERANCE, "Long crop duration exposes sugarcane to dry spells"),
    ],
    "millet": [
        (T.DROUGHT_TOLERANCE, "Millet is grown on marginal, low-rainfall land"),
        (T.FAST_GROWTH, "Short-duration millets fit tight sowing windows"),
    ],
    "sorghum": [
        (T.DROUGHT_TOLERANCE, "Sorghum is a staple of dryland farming"),
        (T.PEST_RESISTANCE, "Shoot fly and stem borer attack sorghum seedlings"),
    ],
    "groundnut": [
        (T.DROUGHT_TOLERANCE, "Groundnut is largely rain-fed"),
        (T.DISEASE_RESISTANCE, "Leaf spot and rust reduce groundnut yields"),
    ],
    "chickpea": [
        (T.DROUGHT_TOLERANCE, "Chickpea grows on residual soil moisture"),
        (T.DISEASE_RESISTANCE, "Fusarium wilt is a major chickpea disease"),
    ],
    "mustard": [
        (T.PEST_RESISTANCE, "Aphids are the key pest of mustard"),
        (T.CLIMATE_ADAPTABILITY, "Mustard must tolerate cold nights and frost"),
    ],
    "sunflower": [
        (T.DROUGHT_TOLERANCE, "Sunflower is often grown with limited irrigation"),
        (T.HIGH_YIELD, "Hybrid sunflower improves oil output"),
    ],
    "onion": [
        (T.DISEASE_RESISTANCE, "Purple blotch and thrips-borne diseases affect onion"),
    ],
}

BASIC_CROPS = ("wheat", "rice", "corn", "soybean", "cotton")

SOIL_TRAITS: Dict[str, List[Tuple[Trait, str]]] = {
    "sandy": [(T.DROUGHT_TOLERANCE, "Sandy soil drains quickly and holds little water")],
    "clay": [(T.DISEASE_RESISTANCE, "Clay soil stays wet, raising root disease risk")],
}

SEASON_TRAITS: Dict[str, List[Tuple[Trait, str]]] = {
    "summer": [(T.FAST_GROWTH, "Fast-maturing varieties avoid peak summer stress")],
    "winter": [(T.CLIMATE_ADAPTABILITY, "Winter planting needs cold-tolerant varieties")],
    "monsoon": [(T.DISEASE_RESISTANCE, "Monsoon humidity favours fungal diseases")],
    "spring": [(T.FAST_GROWTH, "Fast-maturing varieties make the most of the spring window")],
    "autumn": [(T.FAST_GROWTH, "Fast-maturing varieties finish before the first frost")],
}

INDIAN_SEASON_TRAITS: Dict[str, List[Tuple[Trait, str]]] = {
    "kharif": [(T.DISEASE_RESISTANCE, "Kharif crops grow through humid monsoon months")],
    "rabi": [(T.CLIMATE_ADAPTABILITY, "Rabi crops must handle cool winter nights")],
    "zaid": [(T.FAST_GROWTH, "Zaid is a short summer season between rabi and kharif")],
}

VARIANTS: Dict[str, Dict] = {
    "extended": {
        "cold_threshold_c": 15,
        "crops": CROP_TRAITS,
        "seasons": {**SEASON_TRAITS, **INDIAN_SEASON_TRAITS},
        "pest_baseline": True,
    },
    "basic": {
        "cold_threshold_c": 10,
        "crops": {crop: CROP_TRAITS[crop] for crop in BASIC_CROPS},
        "seasons": SEASON_TRAITS,
        "pest_baseline": False,
    },
}

DEFAULT_VARIANT = "extended"


# ═══════════════════════════════════════════════════════════════════════════════
# RECOMMENDER
# ═══════════════════════════════════════════════════════════════════════════════

def dedupe_traits(suggestions: List[TraitSuggestion]) -> Tuple[TraitSuggestion, ...]:
    """Keep the first suggestion for each trait, preserving order."""
    seen = set()
    unique = []
    for suggestion in suggestions:
        if suggestion.trait in seen:
            continue
        seen.add(suggestion.trait)
        unique.append(suggestion)
    return tuple(unique)


def recommend_traits(
    conditions: FarmingConditions,
    variant: str = DEFAULT_VARIANT,
) -> Tuple[TraitSuggestion, ...]:
    """Suggest genetic traits for the given conditions."""
    if variant not in VARIANTS:
        raise InvalidInputError(
            f"Unknown trait rule variant: {variant!r}. Use one of {sorted(VARIANTS)}."
        )
    table = VARIANTS[variant]
    temp = conditions.temperature_c
    rain = conditions.rainfall_mm
    found: List[TraitSuggestion] = []

    def add(trait: Trait, reason: str):
        found.append(TraitSuggestion(trait, reason))

    # Temperature
    if temp > HEAT_THRESHOLD_C:
        add(T.DROUGHT_TOLERANCE, f"High temperatures (>{HEAT_THRESHOLD_C}°C) increase water stress")
        add(T.CLIMATE_ADAPTABILITY, "Heat stress resilience is needed at high temperatures")
    elif temp < table["cold_threshold_c"]:
        add(T.CLIMATE_ADAPTABILITY,
            f"Cold tolerance is needed below {table['cold_threshold_c']}°C")

    # Rainfall
    if rain < LOW_RAINFALL_MM:
        add(T.DROUGHT_TOLERANCE, f"Low rainfall (<{LOW_RAINFALL_MM}mm) calls for drought-tolerant varieties")
    elif rain > HIGH_RAINFALL_MM:
        add(T.DISEASE_RESISTANCE, f"High rainfall (>{HIGH_RAINFALL_MM}mm) raises fungal disease pressure")

    for category, key, rules in (
        ("crop", conditions.crop_type, table["crops"]),
        ("soil", conditions.soil_type, SOIL_TRAITS),
        ("season", conditions.season, table["seasons"]),
    ):
        matched = rules.get(key)
        if matched is None:
            log.debug("No %s trait rules for %r", category, key)
            continue
        for trait, reason in matched:
            add(trait, reason)

    # Baseline
    if not any(s.trait is T.HIGH_YIELD for s in found):
        add(T.HIGH_YIELD, "Recommended to maximize productivity")
    if table["pest_baseline"]:
        add(T.PEST_RESISTANCE, "Pest resistance is broadly beneficial and reduces pesticide use")

    return dedupe_traits(found)


class TraitRecommender:
    """Thin object wrapper so callers can pin a rule variant once."""

    def __init__(self, variant: str = DEFAULT_VARIANT):
        if variant not in VARIANTS:
            raise InvalidInputError(f"Unknown trait rule variant: {variant!r}")
        self.variant = variant

    def recommend(self, conditions: FarmingConditions) -> Tuple[TraitSuggestion, ...]:
        return recommend_traits(conditions, self.variant)
