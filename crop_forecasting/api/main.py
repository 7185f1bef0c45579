"""
FastAPI Application for Smart Crop Forecasting

REST API with:
- POST /recommend/traits - genetic trait suggestions
- POST /recommend/crops - ranked crop matches
- POST /planting-window - planting verdict for a daily forecast
- GET  /weather - live weather + forecast for coordinates or a place
- POST /predict - full dashboard pipeline
- POST /report - PDF report download
- GET  /status, /reference - health and catalogs
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from .. import __version__
from ..config import API_CONFIG, CROPS, LOG_FORMAT, LOG_LEVEL, SEASONS, SOIL_TYPES, TRAITS
from ..ingest import weather_api
from ..orchestrator import run_prediction
from ..recommend import analyze_planting_window, recommend_crops, recommend_traits
from ..recommend.traits import DEFAULT_VARIANT, VARIANTS
from ..report import build_pdf_report, report_filename
from ..schema import (
    DailyForecast,
    FarmingConditions,
    InvalidInputError,
    LocationNotFoundError,
    WeatherServiceError,
)

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
log = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# PYDANTIC MODELS
# ═══════════════════════════════════════════════════════════════════════════════

class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str = __version__
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ConditionsInput(BaseModel):
    crop_type: str = Field(..., description="Crop identifier", examples=["rice"])
    soil_type: str = Field(..., description="Soil type", examples=["clay"])
    season: str = Field(..., description="Season", examples=["monsoon"])
    temperature_c: float = Field(..., description="Average temperature (°C)", examples=[28.0])
    rainfall_mm: float = Field(..., description="Expected rainfall (mm)", examples=[1200.0])

    def to_conditions(self) -> FarmingConditions:
        return FarmingConditions.from_raw(
            self.crop_type, self.soil_type, self.season, self.temperature_c, self.rainfall_mm
        )


class TraitRequest(ConditionsInput):
    variant: str = Field(default=DEFAULT_VARIANT, description="Rule table: extended or basic")


class CropRequest(BaseModel):
    soil_type: str = Field(..., examples=["clay"])
    temperature_c: float = Field(..., examples=[25.0])
    rainfall_mm: float = Field(..., examples=[200.0])
    season: str = Field(..., examples=["monsoon"])
    top_n: int = Field(default=5, ge=1, le=5)


class ForecastDay(BaseModel):
    date: str = Field(..., examples=["2024-06-15"])
    max_temp_c: float
    min_temp_c: float
    precipitation_mm: float = 0.0
    humidity_percent: float = 0.0


class PlantingWindowRequest(BaseModel):
    forecast: List[ForecastDay]


class PredictRequest(ConditionsInput):
    selected_traits: List[str] = Field(default_factory=list, examples=[["droughtTolerance"]])
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    place: Optional[str] = Field(default=None, examples=["Pune"])
    fetch_weather: bool = True
    weather_source: Optional[str] = Field(default=None, description="open-meteo or synthetic")
    variant: str = DEFAULT_VARIANT

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "crop_type": "rice",
                "soil_type": "clay",
                "season": "monsoon",
                "temperature_c": 28.0,
                "rainfall_mm": 1200.0,
                "selected_traits": ["pestResistance", "highYield"],
                "latitude": 18.5204,
                "longitude": 73.8567,
            }]
        }
    }


# ═══════════════════════════════════════════════════════════════════════════════
# APPLICATION
# ═══════════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="Smart Crop Forecasting API",
    description="""
    Rule-based crop planning for farmers.

    ## Features
    - Genetic trait suggestions for given farming conditions
    - Crop ranking by soil, temperature, rainfall and season
    - Planting window analysis over a 7-day forecast
    - Live weather from Open-Meteo and PDF report export
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=API_CONFIG.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(LocationNotFoundError)
async def location_not_found_handler(request: Request, exc: LocationNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(WeatherServiceError)
async def weather_error_handler(request: Request, exc: WeatherServiceError):
    log.warning(f"Weather service error on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def _prediction(request: PredictRequest):
    return run_prediction(
        request.to_conditions(),
        selected_traits=request.selected_traits,
        latitude=request.latitude,
        longitude=request.longitude,
        place=request.place,
        fetch_weather=request.fetch_weather,
        weather_source=request.weather_source,
        trait_variant=request.variant,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════

@app.get("/", tags=["Health"])
async def root():
    return {"message": "Smart Crop Forecasting API", "docs": "/docs"}


@app.get("/status", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse()


@app.get("/reference", tags=["Reference"])
async def reference() -> Dict[str, Any]:
    """Catalogs accepted by the recommenders."""
    return {
        "crops": CROPS,
        "soil_types": SOIL_TYPES,
        "seasons": SEASONS,
        "traits": TRAITS,
        "trait_variants": sorted(VARIANTS),
    }


@app.post("/recommend/traits", tags=["Recommendations"])
async def traits_endpoint(request: TraitRequest):
    suggestions = recommend_traits(request.to_conditions(), request.variant)
    return {"variant": request.variant, "traits": [s.to_dict() for s in suggestions]}


@app.post("/recommend/crops", tags=["Recommendations"])
async def crops_endpoint(request: CropRequest):
    matches = recommend_crops(
        request.soil_type, request.temperature_c, request.rainfall_mm,
        request.season, top_n=request.top_n,
    )
    return {"crops": [m.to_dict() for m in matches]}


@app.post("/planting-window", tags=["Recommendations"])
async def planting_window_endpoint(request: PlantingWindowRequest):
    forecast = tuple(DailyForecast(**day.model_dump()) for day in request.forecast)
    return analyze_planting_window(forecast).to_dict()


@app.get("/weather", tags=["Weather"])
def weather_endpoint(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    place: Optional[str] = Query(None, description="Place name to geocode"),
    source: Optional[str] = Query(None, description="open-meteo or synthetic"),
):
    """Current weather, 7-day forecast and planting window for a location."""
    if (lat is None or lon is None) and not place:
        raise HTTPException(status_code=400, detail="Provide lat and lon, or a place name")
    weather = weather_api.fetch_weather(lat=lat, lon=lon, place=place, source=source)
    return {
        **weather.to_dict(),
        "planting_window": analyze_planting_window(weather.forecast).to_dict(),
    }


@app.post("/predict", tags=["Recommendations"])
def predict_endpoint(request: PredictRequest):
    """Full dashboard pipeline: weather, planting window, traits and crops."""
    return _prediction(request).to_dict()


@app.post("/report", tags=["Reports"])
def report_endpoint(request: PredictRequest):
    """Run the pipeline and return the PDF report."""
    result = _prediction(request)
    pdf = build_pdf_report(result)
    filename = report_filename(result.generated_at.date())
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════════

def run_server(host: str = API_CONFIG.host, port: int = API_CONFIG.port, reload: bool = API_CONFIG.reload):
    """Run the API server."""
    uvicorn.run(
        "crop_forecasting.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    run_server()
