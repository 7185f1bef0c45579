"""
CLI Test Suite
"""
from unittest.mock import patch

from crop_forecasting.cli import main
from crop_forecasting.schema import WeatherServiceError


class TestRecommendCommand:
    def test_prints_traits_and_crops(self, capsys):
        code = main(["recommend", "-c", "rice", "-s", "clay", "--season", "monsoon", "-t", "28", "-r", "1200"])
        out = capsys.readouterr().out

        assert code == 0
        assert "Disease Resistance" in out
        assert "Rice" in out

    def test_bad_top_n(self, capsys):
        assert main(["recommend", "--top", "9"]) == 2
        assert "top_n" in capsys.readouterr().err

    def test_from_synthetic_weather(self, capsys):
        code = main(["recommend", "--lat", "18.52", "--lon", "73.86", "--source", "synthetic"])
        assert code == 0
        assert "Using forecast" in capsys.readouterr().out


class TestWeatherCommand:
    def test_synthetic(self, capsys):
        assert main(["weather", "--lat", "18.52", "--lon", "73.86", "--source", "synthetic"]) == 0
        assert "Planting window" in capsys.readouterr().out

    @patch("crop_forecasting.ingest.weather_api.fetch_weather")
    def test_service_error_exit_code(self, mock_fetch):
        mock_fetch.side_effect = WeatherServiceError("down")
        assert main(["weather", "--place", "Pune"]) == 2


class TestReportCommand:
    def test_writes_pdf(self, tmp_path, capsys):
        output = tmp_path / "out" / "report.pdf"
        code = main(["report", "-c", "corn", "--traits", "pestResistance,highYield", "-o", str(output)])

        assert code == 0
        assert output.read_bytes().startswith(b"%PDF")


def test_no_command_prints_help():
    assert main([]) == 1
