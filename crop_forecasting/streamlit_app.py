"""
Smart Crop Forecasting - Streamlit Frontend
Home, Dashboard and Results pages over the rule engines and live weather

Run with: streamlit run crop_forecasting/streamlit_app.py
"""
import logging
import os
import sys
import time

import pandas as pd
import streamlit as st

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from crop_forecasting import charts  # noqa: E402
from crop_forecasting.config import (  # noqa: E402
    CROPS,
    DEFAULT_LOCATION,
    LOG_FORMAT,
    LOG_LEVEL,
    PREDICTION_DELAY_SECONDS,
    SEASONS,
    SOIL_TYPES,
)
from crop_forecasting.ingest import weather_api  # noqa: E402
from crop_forecasting.orchestrator import run_prediction  # noqa: E402
from crop_forecasting.recommend import analyze_planting_window  # noqa: E402
from crop_forecasting.report import build_pdf_report, report_filename  # noqa: E402
from crop_forecasting.schema import (  # noqa: E402
    CropForecastError,
    FarmingConditions,
    InvalidInputError,
    LocationNotFoundError,
    Trait,
    WeatherServiceError,
)

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
log = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# PAGE CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════

st.set_page_config(
    page_title="🌾 Smart Crop Forecasting",
    page_icon="🌾",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        color: #22c55e;
        text-align: center;
        margin-bottom: 1rem;
    }
    .sub-header {
        text-align: center;
        color: #666;
        margin-bottom: 2rem;
    }
    .crop-card {
        background: #f8f9fa;
        padding: 1rem;
        border-radius: 10px;
        border-left: 4px solid #22c55e;
        margin: 0.5rem 0;
    }
    .window-good {
        background: #ecfdf5;
        border-left: 4px solid #22c55e;
        padding: 0.75rem 1rem;
        border-radius: 8px;
    }
    .window-bad {
        background: #fef2f2;
        border-left: 4px solid #ef4444;
        padding: 0.75rem 1rem;
        border-radius: 8px;
    }
    .stButton>button {
        width: 100%;
    }
</style>
""", unsafe_allow_html=True)

PAGES = ["🏠 Home", "📋 Dashboard", "📊 Results"]

RAINFALL_HELP = (
    "Fetched weather fills in the 7-day forecast total. The trait rules read "
    "this field as seasonal rainfall (below 500 mm favours drought tolerance, "
    "above 1500 mm disease resistance), so enter a seasonal figure if you know it."
)

FEATURES = [
    ("🧬", "Genetic Trait Suggestions",
     "Traits such as drought tolerance or disease resistance matched to your crop, soil, season and climate."),
    ("🌦️", "Live Weather",
     "Current conditions and a 7-day forecast from Open-Meteo for any coordinates or place name."),
    ("🗓️", "Planting Window",
     "Frost, heat, heavy-rain and dry-spell checks over the forecast, with the best planting days."),
    ("🌱", "Crop Ranking",
     "Crops scored against soil, temperature, rainfall and season, best match first."),
    ("📄", "PDF Reports",
     "Download a report with inputs, recommendations and charts."),
]

# ═══════════════════════════════════════════════════════════════════════════════
# SESSION STATE INITIALIZATION
# ═══════════════════════════════════════════════════════════════════════════════

if 'page' not in st.session_state:
    st.session_state.page = PAGES[0]

if 'weather' not in st.session_state:
    st.session_state.weather = None

if 'result' not in st.session_state:
    st.session_state.result = None

if 'location' not in st.session_state:
    st.session_state.location = DEFAULT_LOCATION

# ═══════════════════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════════

def load_weather(lat=None, lon=None, place=None):
    """Fetch weather into session state, reporting failures in the page."""
    try:
        with st.spinner("Fetching weather..."):
            weather = weather_api.fetch_weather(lat=lat, lon=lon, place=place)
    except LocationNotFoundError as e:
        st.error(f"📍 {e}")
        return
    except WeatherServiceError as e:
        st.error(f"Could not load weather data: {e}")
        return
    except InvalidInputError as e:
        st.warning(str(e))
        return
    st.session_state.weather = weather
    st.session_state.location = (weather.latitude, weather.longitude)


def show_planting_window(verdict):
    css = "window-good" if verdict.recommended else "window-bad"
    icon = "✅ Recommended" if verdict.recommended else "⛔ Not recommended"
    best = f"<br><b>Best days:</b> {', '.join(verdict.best_days)}" if verdict.best_days else ""
    st.markdown(f'<div class="{css}"><b>{icon}</b><br>{verdict.reason}{best}</div>',
                unsafe_allow_html=True)


def show_weather(weather):
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Temperature", f"{weather.temperature_c}°C")
    with col2:
        st.metric("Humidity", f"{weather.humidity_percent}%")
    with col3:
        st.metric("Rain today", f"{weather.rainfall_mm} mm")

    df = weather_api.forecast_to_frame(weather.forecast)
    st.line_chart(df[["max_temp_c", "min_temp_c"]])
    st.bar_chart(df[["precipitation_mm"]])


# ═══════════════════════════════════════════════════════════════════════════════
# SIDEBAR - NAVIGATION
# ═══════════════════════════════════════════════════════════════════════════════

with st.sidebar:
    st.title("🌾 Smart Crop")
    page = st.radio("Navigate", PAGES, index=PAGES.index(st.session_state.page))
    st.session_state.page = page

    st.markdown("---")
    weather = st.session_state.weather
    if weather is not None:
        st.caption(f"📍 {weather.location}")
        st.metric("Now", f"{weather.temperature_c}°C")
    if st.session_state.result is not None:
        st.success("Prediction ready. Open Results.")

# ═══════════════════════════════════════════════════════════════════════════════
# PAGE: HOME
# ═══════════════════════════════════════════════════════════════════════════════

if page == PAGES[0]:
    st.markdown('<h1 class="main-header">🌾 Smart Crop Forecasting</h1>', unsafe_allow_html=True)
    st.markdown('<p class="sub-header">Plan what to plant, which traits to look for, and when to sow</p>',
                unsafe_allow_html=True)

    for emoji, title, text in FEATURES:
        st.markdown(f'<div class="crop-card"><b>{emoji} {title}</b><br>{text}</div>',
                    unsafe_allow_html=True)

    st.info("Open the **📋 Dashboard** page in the sidebar to get started.")

# ═══════════════════════════════════════════════════════════════════════════════
# PAGE: DASHBOARD
# ═══════════════════════════════════════════════════════════════════════════════

elif page == PAGES[1]:
    st.header("📋 Farming Dashboard")
    col1, col2 = st.columns([1, 1])

    with col1:
        st.subheader("📍 Location & Weather")
        mode = st.radio("Locate by", ["Coordinates", "Place name"], horizontal=True)
        if mode == "Coordinates":
            lat_col, lon_col = st.columns(2)
            with lat_col:
                lat = st.number_input("Latitude", value=float(st.session_state.location[0]),
                                      min_value=-90.0, max_value=90.0, format="%.4f")
            with lon_col:
                lon = st.number_input("Longitude", value=float(st.session_state.location[1]),
                                      min_value=-180.0, max_value=180.0, format="%.4f")
            if st.button("🌤️ Fetch Weather"):
                load_weather(lat=lat, lon=lon)
        else:
            place = st.text_input("Place", placeholder="e.g., Pune")
            if st.button("🌤️ Fetch Weather"):
                load_weather(place=place)

        lat, lon = st.session_state.location
        st.map(pd.DataFrame({"lat": [lat], "lon": [lon]}), zoom=6)

        weather = st.session_state.weather
        if weather is not None:
            st.caption(f"Weather for **{weather.location}** ({weather.source})")
            show_weather(weather)
            st.subheader("🗓️ Planting Window")
            show_planting_window(analyze_planting_window(weather.forecast))

    with col2:
        st.subheader("🌱 Farming Conditions")
        with st.form("conditions"):
            crop = st.selectbox("Crop Type", list(CROPS), format_func=CROPS.get)
            soil = st.selectbox("Soil Type", SOIL_TYPES, format_func=str.title)
            season = st.selectbox("Season", SEASONS, format_func=str.title)

            default_temp, default_rain = 25.0, 800.0
            if weather is not None:
                summary = weather_api.summarize_forecast(weather.forecast)
                default_temp = summary["avg_temp_c"]
                default_rain = summary["total_precipitation_mm"]
            temperature = st.number_input("Temperature (°C)", value=float(default_temp),
                                          min_value=-30.0, max_value=60.0)
            rainfall = st.number_input("Rainfall (mm)", value=float(default_rain),
                                       min_value=0.0, max_value=5000.0, help=RAINFALL_HELP)

            st.markdown("**🧬 Genetic Traits**")
            trait_cols = st.columns(2)
            selected = []
            for i, trait in enumerate(Trait):
                with trait_cols[i % 2]:
                    if st.checkbox(trait.label, key=f"trait_{trait.value}"):
                        selected.append(trait)

            submitted = st.form_submit_button("🚀 Generate Prediction", type="primary")

        if submitted:
            try:
                conditions = FarmingConditions.from_raw(crop, soil, season, temperature, rainfall)
                with st.spinner("Running simulated analysis (placeholder metrics)..."):
                    time.sleep(PREDICTION_DELAY_SECONDS)
                    result = run_prediction(
                        conditions,
                        selected_traits=selected,
                        weather=weather,
                        fetch_weather=False,
                    )
            except CropForecastError as e:
                st.error(f"Prediction failed: {e}")
            else:
                st.session_state.result = result
                st.session_state.page = PAGES[2]
                st.rerun()

# ═══════════════════════════════════════════════════════════════════════════════
# PAGE: RESULTS
# ═══════════════════════════════════════════════════════════════════════════════

else:
    st.header("📊 Prediction Results")
    result = st.session_state.result

    if result is None:
        st.warning("No prediction yet. Fill in the Dashboard form first.")
    else:
        c = result.conditions
        m = result.metrics
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("AI Prediction Accuracy", f"{m.accuracy_pct}%")
        with col2:
            st.metric("GA Generations", f"{m.ga_generations:,}")
        with col3:
            st.metric("Yield Improvement", f"+{m.yield_improvement_pct}%")
        st.caption("Headline figures are illustrative placeholders.")

        left, right = st.columns([1, 1])
        with left:
            st.subheader("📝 Input Parameters")
            st.markdown(f"""
            - Crop: **{CROPS.get(c.crop_type, c.crop_type.title())}**
            - Soil: **{c.soil_type.title()}**
            - Season: **{c.season.title()}**
            - Temperature: **{c.temperature_c:g}°C**
            - Rainfall: **{c.rainfall_mm:g} mm**
            """)

            st.subheader("🧬 Selected Traits")
            if result.selected_traits:
                for trait in result.selected_traits:
                    st.markdown(f"- {trait.label}")
            else:
                st.caption("No genetic traits selected")

            st.subheader("🤖 AI-Recommended Traits")
            for s in result.recommended_traits:
                st.markdown(f"- **{s.trait.label}**: {s.reason}")

        with right:
            if result.planting_window is not None:
                st.subheader("🗓️ Planting Window")
                show_planting_window(result.planting_window)

            st.subheader("🌱 Best Crops")
            if not result.crop_matches:
                st.info("No crop in the catalog matches these conditions.")
            for rank, match in enumerate(result.crop_matches, 1):
                st.markdown(f"**{rank}. {match.name}**: {match.reason}")
                st.progress(match.score / 100, text=f"{match.score}/100")

        st.markdown("---")
        tab1, tab2 = st.tabs(["📈 Yield Prediction", "🧬 Genetic Algorithm"])
        with tab1:
            st.line_chart(charts.YIELD_PREDICTION_DATA.set_index("month"))
        with tab2:
            st.bar_chart(charts.GENETIC_ALGORITHM_DATA.set_index("generation"))

        with st.spinner("Preparing PDF..."):
            pdf = build_pdf_report(result)
        st.download_button(
            "📄 Download PDF Report",
            data=pdf,
            file_name=report_filename(result.generated_at.date()),
            mime="application/pdf",
            use_container_width=True,
        )

# ═══════════════════════════════════════════════════════════════════════════════
# FOOTER
# ═══════════════════════════════════════════════════════════════════════════════

st.markdown("---")
st.markdown("""
<div style="text-align: center; color: #666;">
    <p>🌾 Smart Crop Forecasting System | Streamlit Edition</p>
</div>
""", unsafe_allow_html=True)
