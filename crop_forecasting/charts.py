"""
Dashboard chart data and PNG rendering.

The yield and genetic-algorithm series are fixed display data, not model
output. Only the forecast chart reflects live input.
"""
from io import BytesIO

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from .ingest.weather_api import forecast_to_frame  # noqa: E402
from .schema import ForecastSet, InvalidInputError  # noqa: E402

YIELD_PREDICTION_DATA = pd.DataFrame({
    "month": ["Jan", "Feb", "Mar", "Apr", "May", "Jun"],
    "predicted": [45, 52, 61, 70, 78, 85],
    "actual": [42, 50, 59, 68, 75, 82],
    "optimized": [48, 56, 65, 75, 82, 89],
})

GENETIC_ALGORITHM_DATA = pd.DataFrame({
    "generation": ["Gen 1", "Gen 50", "Gen 100", "Gen 200", "Gen 500", "Gen 1000"],
    "fitness": [65, 72, 81, 88, 93, 96],
    "diversity": [85, 75, 68, 55, 42, 35],
})

COLORS = {"chart1": "#22c55e", "chart2": "#3b82f6", "chart3": "#f59e0b"}


def _to_png(fig) -> bytes:
    buf = BytesIO()
    fig.tight_layout()
    fig.savefig(buf, format="png", dpi=150, facecolor="white")
    plt.close(fig)
    return buf.getvalue()


def render_yield_chart() -> bytes:
    """Yield Prediction Analysis: predicted vs actual vs optimized."""
    df = YIELD_PREDICTION_DATA
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.plot(df["month"], df["predicted"], color=COLORS["chart1"], linewidth=2, label="AI Predicted")
    ax.plot(df["month"], df["actual"], color=COLORS["chart2"], linewidth=2, label="Actual Yield")
    ax.plot(df["month"], df["optimized"], color=COLORS["chart3"], linewidth=2,
            linestyle="--", label="GA Optimized")
    ax.set_title("Yield Prediction Analysis")
    ax.grid(True, linestyle="--", alpha=0.4)
    ax.legend()
    return _to_png(fig)


def render_ga_chart() -> bytes:
    """Genetic Algorithm Evolution: fitness and diversity per generation."""
    df = GENETIC_ALGORITHM_DATA
    fig, ax = plt.subplots(figsize=(8, 4))
    x = range(len(df))
    width = 0.38
    ax.bar([i - width / 2 for i in x], df["fitness"], width, color=COLORS["chart1"], label="Fitness Score")
    ax.bar([i + width / 2 for i in x], df["diversity"], width, color=COLORS["chart2"],
           label="Population Diversity")
    ax.set_xticks(list(x))
    ax.set_xticklabels(df["generation"])
    ax.set_title("Genetic Algorithm Evolution")
    ax.grid(True, axis="y", linestyle="--", alpha=0.4)
    ax.legend()
    return _to_png(fig)


def render_forecast_chart(forecast: ForecastSet) -> bytes:
    """Daily min/max temperature lines over precipitation bars."""
    df = forecast_to_frame(forecast)
    if df.empty:
        raise InvalidInputError("Cannot chart an empty forecast")
    labels = df.index.strftime("%d %b")

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.bar(labels, df["precipitation_mm"], color=COLORS["chart2"], alpha=0.35, label="Precipitation (mm)")
    ax.set_ylabel("Precipitation (mm)")
    temp_ax = ax.twinx()
    temp_ax.plot(labels, df["max_temp_c"], color="#ef4444", marker="o", label="Max °C")
    temp_ax.plot(labels, df["min_temp_c"], color=COLORS["chart2"], marker="o", label="Min °C")
    temp_ax.set_ylabel("Temperature (°C)")
    ax.set_title("7-Day Forecast")
    handles = ax.get_legend_handles_labels()
    temp_handles = temp_ax.get_legend_handles_labels()
    ax.legend(handles[0] + temp_handles[0], handles[1] + temp_handles[1], loc="upper left", fontsize=8)
    return _to_png(fig)
