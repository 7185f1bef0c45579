"""
Orchestrator Test Suite
"""
from unittest.mock import patch

import pytest

from crop_forecasting.config import MOCK_METRICS
from crop_forecasting.orchestrator import (
    conditions_from_weather,
    parse_selected_traits,
    run_prediction,
)
from crop_forecasting.recommend.planting import REASON_EXCELLENT
from crop_forecasting.recommend.traits import LOW_RAINFALL_MM
from crop_forecasting.schema import InvalidInputError, Trait, WeatherServiceError


class TestSelectedTraits:
    def test_parses_values_and_members(self):
        result = parse_selected_traits(["highYield", Trait.FAST_GROWTH, " highYield "])
        assert result == (Trait.HIGH_YIELD, Trait.FAST_GROWTH)

    def test_none_is_empty(self):
        assert parse_selected_traits(None) == ()

    def test_unknown_trait_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_selected_traits(["glowInTheDark"])


class TestRunPrediction:
    def test_without_location(self, rice_conditions):
        result = run_prediction(rice_conditions, selected_traits=["pestResistance"])

        assert result.weather is None
        assert result.planting_window is None
        assert result.selected_traits == (Trait.PEST_RESISTANCE,)
        assert result.recommended_traits[0].trait == Trait.DISEASE_RESISTANCE
        assert result.metrics is MOCK_METRICS

    def test_with_given_weather(self, rice_conditions, weather_report):
        result = run_prediction(rice_conditions, weather=weather_report)

        assert result.weather is weather_report
        assert result.planting_window.reason == REASON_EXCELLENT

    def test_crops_use_the_conditions(self, rice_conditions):
        result = run_prediction(rice_conditions, top_n=3)
        assert len(result.crop_matches) == 3
        assert result.crop_matches[0].crop_id == "rice"

    @patch("crop_forecasting.orchestrator.weather_api.fetch_weather")
    def test_fetches_weather_for_coordinates(self, mock_fetch, rice_conditions, weather_report):
        mock_fetch.return_value = weather_report
        result = run_prediction(rice_conditions, latitude=18.52, longitude=73.86)

        mock_fetch.assert_called_once_with(lat=18.52, lon=73.86, place=None, source=None)
        assert result.planting_window is not None

    @patch("crop_forecasting.orchestrator.weather_api.fetch_weather")
    def test_fetch_can_be_disabled(self, mock_fetch, rice_conditions):
        result = run_prediction(rice_conditions, place="Pune", fetch_weather=False)
        mock_fetch.assert_not_called()
        assert result.weather is None

    @patch("crop_forecasting.orchestrator.weather_api.fetch_weather")
    def test_weather_errors_propagate(self, mock_fetch, rice_conditions):
        mock_fetch.side_effect = WeatherServiceError("down")
        with pytest.raises(WeatherServiceError):
            run_prediction(rice_conditions, place="Pune")

    def test_to_dict(self, rice_conditions, weather_report):
        d = run_prediction(rice_conditions, weather=weather_report).to_dict()

        assert d["conditions"]["crop_type"] == "rice"
        assert d["metrics"]["mock"] is True
        assert d["weather"]["location"] == "Pune"
        assert d["planting_window"]["recommended"] is True
        assert len(d["weather"]["forecast"]) == 7


class TestConditionsFromWeather:
    def test_mean_temperature_and_total_rain(self, weather_report):
        conditions = conditions_from_weather(weather_report, "Wheat", "Loamy", "Rabi")

        assert conditions.crop_type == "wheat"
        assert conditions.temperature_c == 20.0
        assert conditions.rainfall_mm == 14.0

    def test_weekly_total_reads_as_low_rainfall(self, weather_report):
        conditions = conditions_from_weather(weather_report, "corn", "loamy", "kharif")
        result = run_prediction(conditions)

        assert conditions.rainfall_mm < LOW_RAINFALL_MM
        assert Trait.DROUGHT_TOLERANCE in [s.trait for s in result.recommended_traits]
