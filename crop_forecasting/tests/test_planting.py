"""
Planting Window Test Suite
"""
import sys
from datetime import date, datetime

import pytest

from crop_forecasting.recommend.planting import (
    REASON_ACCEPTABLE,
    REASON_DRY,
    REASON_EXCELLENT,
    REASON_FROST,
    REASON_HEAT,
    REASON_HEAVY_RAIN,
    PlantingWindowAnalyzer,
    analyze_planting_window,
    find_best_days,
)
from crop_forecasting.schema import DailyForecast, InvalidInputError


class TestBlockingConditions:
    def test_frost_blocks_planting(self, make_forecast):
        verdict = analyze_planting_window(make_forecast([(20, 5, 2)] * 6 + [(10, -1, 0)]))
        assert verdict.recommended is False
        assert verdict.reason == REASON_FROST

    def test_frost_takes_priority_over_heat_and_rain(self, make_forecast):
        verdict = analyze_planting_window(make_forecast([(40, -2, 80)]))
        assert verdict.reason == REASON_FROST

    def test_heat_wave(self, make_forecast):
        verdict = analyze_planting_window(make_forecast([(30, 20, 2)] * 6 + [(36, 25, 0)]))
        assert verdict.recommended is False
        assert verdict.reason == REASON_HEAT

    def test_heavy_rain(self, make_forecast):
        verdict = analyze_planting_window(make_forecast([(25, 15, 2)] * 6 + [(25, 15, 51)]))
        assert verdict.recommended is False
        assert verdict.reason == REASON_HEAVY_RAIN

    def test_boundaries_do_not_block(self, make_forecast):
        verdict = analyze_planting_window(make_forecast([(35, 0, 50)]))
        assert verdict.recommended is True


class TestFavourableConditions:
    def test_dry_week(self, make_forecast):
        verdict = analyze_planting_window(make_forecast([(20, 10, 0)] * 7))
        assert verdict.recommended is True
        assert verdict.reason == REASON_DRY
        assert verdict.best_days == ("2024-06-15", "2024-06-16", "2024-06-17")

    def test_excellent_week(self, mild_week):
        verdict = analyze_planting_window(mild_week)
        assert verdict.recommended is True
        assert verdict.reason == REASON_EXCELLENT

    def test_excellent_week_with_daily_rain(self, make_forecast):
        # Average 20°C and 35mm in total, each day at 5mm
        forecast = make_forecast([(25, 15, 5)] * 7)
        verdict = analyze_planting_window(forecast)

        assert verdict.recommended is True
        assert verdict.reason == REASON_EXCELLENT
        assert verdict.best_days == tuple(day.date for day in forecast[:3])

    def test_good_window_counts_all_favourable_days(self, make_forecast):
        # Average 28°C is outside the ideal band but every day is favourable
        verdict = analyze_planting_window(make_forecast([(33, 23, 1)] * 7))
        assert verdict.recommended is True
        assert verdict.reason.startswith("Good planting window. 7 favorable days")
        assert len(verdict.best_days) == 3

    def test_acceptable_fallback(self, make_forecast):
        verdict = analyze_planting_window(make_forecast([(35, 29, 2)] * 7))
        assert verdict.recommended is True
        assert verdict.reason == REASON_ACCEPTABLE
        assert verdict.best_days == ()

    def test_single_day_forecast(self, make_forecast):
        verdict = analyze_planting_window(make_forecast([(22, 12, 0)]))
        assert verdict.reason == REASON_DRY
        assert verdict.best_days == ("2024-06-15",)

    def test_analyzer_wrapper(self, mild_week):
        assert PlantingWindowAnalyzer().analyze(mild_week) == analyze_planting_window(mild_week)


class TestBestDays:
    def test_rainy_days_excluded(self, make_forecast):
        forecast = make_forecast([(25, 15, 12), (25, 15, 0), (25, 15, 9.9)])
        assert find_best_days(forecast) == ["2024-06-16", "2024-06-17"]

    def test_best_days_are_subset_in_order(self, make_forecast):
        forecast = make_forecast([(40, 30, 0), (25, 15, 0), (8, 2, 0), (25, 15, 0), (25, 15, 0), (25, 15, 0)])
        best = analyze_planting_window(forecast).best_days
        dates = [day.date for day in forecast]
        assert len(best) <= 3
        assert list(best) == sorted(best, key=dates.index)
        assert best == ("2024-06-16", "2024-06-18", "2024-06-19")


class TestValidation:
    def test_empty_forecast_raises(self):
        with pytest.raises(InvalidInputError):
            analyze_planting_window(())

    def test_none_raises(self):
        with pytest.raises(InvalidInputError):
            analyze_planting_window(None)

    def test_foreign_entries_raise(self):
        with pytest.raises(InvalidInputError):
            analyze_planting_window([{"date": "2024-06-15"}])

    def test_unordered_dates_raise(self, make_forecast):
        forecast = make_forecast([(25, 15, 0)] * 2)
        with pytest.raises(InvalidInputError):
            analyze_planting_window(tuple(reversed(forecast)))

    def test_duplicate_dates_raise(self, make_forecast):
        day = make_forecast([(25, 15, 0)])[0]
        with pytest.raises(InvalidInputError):
            analyze_planting_window((day, day))


class TestDailyForecast:
    def test_min_above_max_rejected(self):
        with pytest.raises(InvalidInputError):
            DailyForecast("2024-06-15", max_temp_c=10, min_temp_c=20)

    def test_negative_precipitation_rejected(self):
        with pytest.raises(InvalidInputError):
            DailyForecast("2024-06-15", 20, 10, precipitation_mm=-1)

    def test_humidity_range(self):
        with pytest.raises(InvalidInputError):
            DailyForecast("2024-06-15", 20, 10, humidity_percent=101)

    def test_bad_date_rejected(self):
        with pytest.raises(InvalidInputError):
            DailyForecast("15/06/2024", 20, 10)

    def test_values_coerced_to_float(self):
        day = DailyForecast("2024-06-15", "20", 10)
        assert day.max_temp_c == 20.0
        assert day.avg_temp_c == 15.0

    def test_date_object_normalised(self):
        day = DailyForecast(date(2024, 6, 15), 20, 10)
        assert day.date == "2024-06-15"
        assert day.to_dict()["date"] == "2024-06-15"

    def test_datetime_keeps_calendar_day(self):
        assert DailyForecast(datetime(2024, 6, 15, 18, 30), 20, 10).date == "2024-06-15"

    @pytest.mark.skipif(sys.version_info < (3, 11), reason="basic ISO dates need Python 3.11")
    def test_basic_iso_date_normalised(self):
        assert DailyForecast("20240615", 20, 10).date == "2024-06-15"

    def test_date_objects_order_like_strings(self):
        days = [DailyForecast(date(2024, 6, d), 25, 15, 1) for d in (9, 10, 11)]
        verdict = analyze_planting_window(days)
        assert verdict.best_days == ("2024-06-09", "2024-06-10", "2024-06-11")

        with pytest.raises(InvalidInputError):
            analyze_planting_window([days[1], days[0]])
