"""
Report & Chart Test Suite
"""
import logging
from datetime import date
from unittest.mock import patch

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from crop_forecasting import charts
from crop_forecasting.config import REPORT
from crop_forecasting.orchestrator import run_prediction
from crop_forecasting.report import NumberedCanvas, build_pdf_report, default_charts, report_filename
from crop_forecasting.schema import InvalidInputError

PNG_MAGIC = b"\x89PNG"


@pytest.fixture
def result(rice_conditions, weather_report):
    return run_prediction(rice_conditions, selected_traits=["highYield"], weather=weather_report)


class TestCharts:
    def test_fixed_datasets(self):
        assert list(charts.YIELD_PREDICTION_DATA["month"]) == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
        assert charts.GENETIC_ALGORITHM_DATA["generation"].iloc[-1] == "Gen 1000"

    def test_render_png(self, mild_week):
        assert charts.render_yield_chart().startswith(PNG_MAGIC)
        assert charts.render_ga_chart().startswith(PNG_MAGIC)
        assert charts.render_forecast_chart(mild_week).startswith(PNG_MAGIC)

    def test_empty_forecast_chart(self):
        with pytest.raises(InvalidInputError):
            charts.render_forecast_chart(())


class TestBuildReport:
    def test_produces_pdf(self, result):
        pdf = build_pdf_report(result)
        assert pdf.startswith(b"%PDF")
        assert pdf.rstrip().endswith(b"%%EOF")

    def test_without_charts_or_traits(self, rice_conditions):
        bare = run_prediction(rice_conditions)
        assert build_pdf_report(bare, chart_sources=[]).startswith(b"%PDF")

    def test_failing_chart_is_skipped(self, result, caplog):
        def broken():
            raise RuntimeError("renderer crashed")

        with caplog.at_level(logging.ERROR, logger="crop_forecasting.report"):
            pdf = build_pdf_report(result, chart_sources=[
                ("Broken", broken),
                ("Yield", charts.render_yield_chart),
            ])

        assert pdf.startswith(b"%PDF")
        assert "Broken" in caplog.text

    def test_long_report_spans_pages(self, result):
        sources = [("Yield", charts.render_yield_chart)] * 6
        assert len(build_pdf_report(result, chart_sources=sources)) > len(
            build_pdf_report(result, chart_sources=sources[:1])
        )

    def test_charts_stay_inside_page_margins(self, result):
        sources = [("Yield", charts.render_yield_chart)] * 6
        margin = REPORT.margin_mm * mm
        page_height = A4[1]

        with patch.object(NumberedCanvas, "drawImage", autospec=True) as draw:
            build_pdf_report(result, chart_sources=sources)

        assert draw.call_count == 6
        for call in draw.call_args_list:
            _, _, _, y, _, height = call.args
            assert y >= margin - 1e-6
            assert y + height <= page_height - margin + 1e-6


class TestReportHelpers:
    def test_default_charts_order(self, result, rice_conditions):
        assert [name for name, _ in default_charts(result)][0] == "7-Day Forecast"
        assert len(default_charts(run_prediction(rice_conditions))) == 2

    def test_filename(self):
        assert report_filename(date(2024, 6, 15)) == "Crop_Forecast_Report_2024-06-15.pdf"
