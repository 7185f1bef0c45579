"""Rule engines: trait, planting window and crop recommendations."""
from .traits import TraitRecommender, recommend_traits, dedupe_traits
from .planting import PlantingWindowAnalyzer, analyze_planting_window, find_best_days
from .crops import CropRecommender, recommend_crops, CROP_PROFILES

__all__ = [
    # Traits
    "TraitRecommender",
    "recommend_traits",
    "dedupe_traits",
    # Planting window
    "PlantingWindowAnalyzer",
    "analyze_planting_window",
    "find_best_days",
    # Crops
    "CropRecommender",
    "recommend_crops",
    "CROP_PROFILES",
]
