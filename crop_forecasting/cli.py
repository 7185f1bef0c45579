"""
Smart Crop Forecasting - Unified CLI
Main entry point for all commands

Usage:
    python -m crop_forecasting.cli <command> [options]

Commands:
    recommend   Trait and crop recommendations for farming conditions
    weather     Current weather, 7-day forecast and planting window
    report      Run the full prediction and write the PDF report
    serve       Start the FastAPI server
"""
import argparse
import logging
import sys
from pathlib import Path

from .config import CROPS, LOG_FORMAT, LOG_LEVEL, SEASONS, SOIL_TYPES, TRAITS
from .ingest import weather_api
from .orchestrator import conditions_from_weather, run_prediction
from .recommend import analyze_planting_window, recommend_crops, recommend_traits
from .recommend.traits import DEFAULT_VARIANT, VARIANTS
from .schema import CropForecastError, FarmingConditions

log = logging.getLogger("crop_forecasting")

CROP_EMOJI = {
    "rice": "🌾", "wheat": "🌾", "barley": "🌾", "corn": "🌽", "cotton": "🧵",
    "sugarcane": "🎋", "groundnut": "🥜", "potato": "🥔", "tomato": "🍅", "sunflower": "🌻",
}


def _location(args):
    """(lat, lon, place) from the shared location options."""
    return args.lat, args.lon, args.place


def _print_weather(weather):
    print(f"\n📍 {weather.location} ({weather.latitude:.4f}, {weather.longitude:.4f}) [{weather.source}]")
    print(f"   Now: {weather.temperature_c}°C, humidity {weather.humidity_percent}%, "
          f"rain {weather.rainfall_mm}mm")
    print("-" * 50)
    for day in weather.forecast:
        print(f"   {day.date}  {day.min_temp_c:5.1f} - {day.max_temp_c:5.1f}°C  "
              f"{day.precipitation_mm:5.1f}mm  {day.humidity_percent:4.0f}%")


def _print_window(verdict):
    icon = "✅" if verdict.recommended else "⛔"
    print(f"\n{icon} Planting window: {verdict.reason}")
    if verdict.best_days:
        print(f"   Best days: {', '.join(verdict.best_days)}")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: recommend
# ═══════════════════════════════════════════════════════════════════════════════

def cmd_recommend(args):
    """Trait and crop recommendations from CLI."""
    if args.lat is not None or args.place:
        weather = weather_api.fetch_weather(args.lat, args.lon, args.place, source=args.source)
        conditions = conditions_from_weather(weather, args.crop, args.soil, args.season)
        print(f"🌦️  Using forecast for {weather.location}: "
              f"{conditions.temperature_c}°C mean, {conditions.rainfall_mm}mm total")
    else:
        conditions = FarmingConditions.from_raw(args.crop, args.soil, args.season, args.temp, args.rainfall)

    traits = recommend_traits(conditions, args.variant)
    crops = recommend_crops(
        conditions.soil_type, conditions.temperature_c, conditions.rainfall_mm,
        conditions.season, top_n=args.top,
    )

    print(f"\n🧬 Recommended traits for {conditions.crop_type or 'your crop'}:")
    print(f"   Conditions: soil={conditions.soil_type}, season={conditions.season}, "
          f"temp={conditions.temperature_c}°C, rain={conditions.rainfall_mm}mm")
    print("-" * 50)
    for s in traits:
        print(f"   • {s.trait.label:22} {s.reason}")

    print("\n🌱 Best crops for these conditions:")
    print("-" * 50)
    if not crops:
        print("   No crop in the catalog matches these conditions.")
    for i, match in enumerate(crops, 1):
        emoji = CROP_EMOJI.get(match.crop_id, "🌱")
        print(f"   {i}. {emoji} {match.name:14} {match.score:3d}/100 | {match.reason}")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: weather
# ═══════════════════════════════════════════════════════════════════════════════

def cmd_weather(args):
    """Show weather and the planting window for a location."""
    lat, lon, place = _location(args)
    weather = weather_api.fetch_weather(lat, lon, place, source=args.source)
    _print_weather(weather)
    _print_window(analyze_planting_window(weather.forecast))

    summary = weather_api.summarize_forecast(weather.forecast)
    print(f"\n📈 {len(weather.forecast)}-day totals: rain={summary['total_precipitation_mm']}mm "
          f"over {summary['rain_days']} days, mean temp={summary['avg_temp_c']}°C")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: report
# ═══════════════════════════════════════════════════════════════════════════════

def cmd_report(args):
    """Run the full prediction and save the PDF report."""
    from .report import build_pdf_report, report_filename

    conditions = FarmingConditions.from_raw(args.crop, args.soil, args.season, args.temp, args.rainfall)
    lat, lon, place = _location(args)
    result = run_prediction(
        conditions,
        selected_traits=args.traits.split(",") if args.traits else (),
        latitude=lat,
        longitude=lon,
        place=place,
        weather_source=args.source,
        trait_variant=args.variant,
    )

    output = Path(args.output or report_filename(result.generated_at.date()))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(build_pdf_report(result))
    log.info(f"Report written to {output}")
    print(f"✅ Report saved to {output}")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: serve
# ═══════════════════════════════════════════════════════════════════════════════

def cmd_serve(args):
    """Start FastAPI server."""
    from .api.main import run_server

    print(f"🚀 Starting API server on {args.host}:{args.port}")
    print(f"   Docs: http://{args.host}:{args.port}/docs")
    run_server(host=args.host, port=args.port, reload=args.reload)


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════════

def _add_conditions(p):
    p.add_argument("-c", "--crop", default="rice", help=f"Crop type ({', '.join(CROPS)})")
    p.add_argument("-s", "--soil", default="loamy", help=f"Soil type ({', '.join(SOIL_TYPES)})")
    p.add_argument("--season", default="monsoon", help=f"Season ({', '.join(SEASONS)})")
    p.add_argument("-t", "--temp", type=float, default=28, help="Temperature °C")
    p.add_argument("-r", "--rainfall", type=float, default=1200, help="Rainfall mm")
    p.add_argument("--variant", choices=sorted(VARIANTS), default=DEFAULT_VARIANT,
                   help="Trait rule table")


def _add_location(p):
    p.add_argument("--lat", type=float, help="Latitude")
    p.add_argument("--lon", type=float, help="Longitude")
    p.add_argument("--place", help="Place name to geocode")
    p.add_argument("--source", choices=[weather_api.SOURCE_OPEN_METEO, weather_api.SOURCE_SYNTHETIC],
                   help="Weather source (default: open-meteo, synthetic when offline)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crop_forecast",
        description="🌾 Smart Crop Forecasting CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m crop_forecasting.cli recommend -c rice -s clay --season monsoon -t 28 -r 1200
  python -m crop_forecasting.cli recommend -c wheat --place Ludhiana --season rabi
  python -m crop_forecasting.cli weather --lat 18.52 --lon 73.86
  python -m crop_forecasting.cli report -c corn --traits pestResistance,highYield -o report.pdf
  python -m crop_forecasting.cli serve --port 8000
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # recommend
    p_rec = subparsers.add_parser("recommend", help="Trait and crop recommendations")
    _add_conditions(p_rec)
    _add_location(p_rec)
    p_rec.add_argument("--top", type=int, default=5, help="Top N crops (1-5)")
    p_rec.set_defaults(func=cmd_recommend)

    # weather
    p_weather = subparsers.add_parser("weather", help="Weather and planting window")
    _add_location(p_weather)
    p_weather.set_defaults(func=cmd_weather)

    # report
    p_report = subparsers.add_parser("report", help="Write the PDF report")
    _add_conditions(p_report)
    _add_location(p_report)
    p_report.add_argument("--traits", help=f"Comma-separated selected traits ({', '.join(TRAITS)})")
    p_report.add_argument("-o", "--output", help="Output PDF path")
    p_report.set_defaults(func=cmd_report)

    # serve
    p_serve = subparsers.add_parser("serve", help="Start API server")
    p_serve.add_argument("-H", "--host", default="0.0.0.0", help="Host")
    p_serve.add_argument("-p", "--port", type=int, default=8000, help="Port")
    p_serve.add_argument("--reload", action="store_true", help="Auto-reload")
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        args.func(args)
    except CropForecastError as e:
        log.error(str(e))
        print(f"❌ {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
