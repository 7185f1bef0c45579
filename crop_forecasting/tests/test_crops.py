"""
Crop Recommender Test Suite
"""
import pytest

from crop_forecasting.recommend.crops import (
    BASE_SCORE,
    CROP_PROFILES,
    CropRecommender,
    recommend_crops,
    score_crop,
)
from crop_forecasting.schema import InvalidInputError


class TestRanking:
    def test_rice_tops_clay_monsoon(self):
        result = recommend_crops("clay", 25, 200, "monsoon")

        assert result[0].crop_id == "rice"
        assert result[0].score == 100
        assert "Clay soil suits rice" in result[0].reasons

    def test_full_ranking(self):
        result = recommend_crops("clay", 25, 200, "monsoon")
        assert [(m.crop_id, m.score) for m in result] == [
            ("rice", 100),
            ("sugarcane", 100),
            ("wheat", 90),
            ("soybean", 80),
            ("potato", 70),
        ]

    def test_ties_keep_catalog_order(self):
        result = recommend_crops("clay", 25, 200, "monsoon", top_n=2)
        assert [m.crop_id for m in result] == ["rice", "sugarcane"]

    def test_input_is_case_insensitive(self):
        assert recommend_crops(" Clay", 25, 200, "MONSOON") == recommend_crops("clay", 25, 200, "monsoon")

    def test_recommender_wrapper(self):
        assert CropRecommender(top_n=3).recommend("black", 28, 90, "kharif") == \
            recommend_crops("black", 28, 90, "kharif", top_n=3)


class TestInvariants:
    CASES = [
        ("clay", 25, 200, "monsoon"),
        ("sandy", 32, 40, "summer"),
        ("loamy", 18, 70, "rabi"),
        ("black", 28, 90, "kharif"),
        ("red", 12, 30, "winter"),
    ]

    @pytest.mark.parametrize("case", CASES)
    def test_scores_bounded_and_sorted(self, case):
        result = recommend_crops(*case)
        scores = [m.score for m in result]

        assert len(result) <= 5
        assert all(BASE_SCORE < s <= 100 for s in scores)
        assert scores == sorted(scores, reverse=True)
        assert all(m.reasons for m in result)

    def test_nothing_matches(self):
        assert recommend_crops("moon dust", 100, -5, "never") == ()

    def test_reason_joins_phrases(self):
        match = recommend_crops("clay", 25, 200, "monsoon")[0]
        assert match.reason == ", ".join(match.reasons)


class TestTopN:
    @pytest.mark.parametrize("top_n", [0, 6, -1])
    def test_out_of_range_rejected(self, top_n):
        with pytest.raises(InvalidInputError):
            recommend_crops("clay", 25, 200, "monsoon", top_n=top_n)

    def test_top_one(self):
        assert len(recommend_crops("clay", 25, 200, "monsoon", top_n=1)) == 1


class TestScoreCrop:
    def test_closed_bands_are_inclusive(self):
        rice = CROP_PROFILES["rice"]
        score, reasons = score_crop(rice, "silty", 20, 40, "winter")
        assert score == BASE_SCORE + rice["temp_bonus"]
        assert reasons == ["temperature within 20-35°C"]

        score, reasons = score_crop(rice, "silty", 35, 40, "winter")
        assert reasons == ["temperature within 20-35°C"]

    def test_open_band_lower_bound_is_strict(self):
        rice = CROP_PROFILES["rice"]
        _, reasons = score_crop(rice, "silty", 40, 150, "winter")
        assert reasons == []

        score, reasons = score_crop(rice, "silty", 40, 150.5, "winter")
        assert score == BASE_SCORE + rice["rain_bonus"]
        assert reasons == ["rainfall above 150mm"]

    def test_rice_excluded_at_exactly_150mm(self):
        result = recommend_crops("silty", 40, 150, "winter")
        assert "rice" not in [m.crop_id for m in result]

    def test_no_match_keeps_base(self):
        score, reasons = score_crop(CROP_PROFILES["wheat"], "sandy", 40, 500, "summer")
        assert score == BASE_SCORE
        assert reasons == []
