from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.errors import WeatherServiceError
from app.logging_config import setup_logging
from app.schemas import AssistantRequest
from app.services.assistant import WeatherAssistant
from app.services.recommender import build_advisories
from app.services.weather_client import WeatherClient
from app.services.weather_service import WeatherService


settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

weather_client = WeatherClient(settings=settings)

app = FastAPI(title=settings.app_name, version=settings.app_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.frontend_origins),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

INVALID_REQUEST_MESSAGE = (
    "Invalid request. Send a text \"query\" and, optionally, a \"city\" of at most 80 characters."
)

DEBUG_FEATURE_FLAGS = {
    "hourlyTemperatureOverride": True,
    "dayNightIcons": True,
    "bestMatchGeocoding": True,
    "detailedRecommendations": True,
    "bilingualAssistant": True,
}


@app.exception_handler(WeatherServiceError)
async def weather_service_error_handler(request: Request, exc: WeatherServiceError) -> JSONResponse:
    logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=200, content={"success": False, "error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Field names only; the rejected input is never echoed back.
    fields = sorted({str(error["loc"][-1]) for error in exc.errors() if error.get("loc")})
    logger.info("Invalid request body on %s: fields=%s", request.url.path, fields)
    return JSONResponse(status_code=200, content={"success": False, "error": INVALID_REQUEST_MESSAGE})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


@app.on_event("shutdown")
async def shutdown_event() -> None:
    await weather_client.close()


def _weather_service() -> WeatherService:
    return WeatherService(client=weather_client)


@app.get("/api/health")
async def health() -> dict:
    return {
        "status": "ok",
        "service": settings.app_name,
        "timestamp_utc": datetime.now(tz=timezone.utc).isoformat(),
    }


@app.get("/api/weather/compare/{city}")
async def compare_weather(city: str) -> dict:
    if not settings.enable_debug_routes:
        return {"success": False, "error": "Debug routes are disabled."}

    service = _weather_service()
    location = await service.resolve_location(city)
    snapshot = await service.current_weather_at(location)
    advisories = build_advisories(
        temperature=snapshot.temperature,
        apparent_temperature=snapshot.apparent_temperature,
        humidity=snapshot.humidity,
        wind_speed=snapshot.wind_speed,
        weather_code=snapshot.weather_code,
        pressure=snapshot.pressure,
        visibility=snapshot.visibility,
        uv_index=snapshot.uv_index,
    )
    return {
        "success": True,
        "data": {
            "query": city,
            "location": location.model_dump(by_alias=True),
            "snapshot": snapshot.model_dump(by_alias=True),
            "allAdvisories": advisories,
            "features": DEBUG_FEATURE_FLAGS,
        },
    }


@app.get("/api/weather/{city}")
async def current_weather(city: str) -> dict:
    snapshot = await _weather_service().current_weather(city)
    return {"success": True, "data": snapshot.model_dump(by_alias=True)}


@app.get("/api/forecast/{city}")
async def forecast(city: str) -> dict:
    result = await _weather_service().forecast(city)
    return {"success": True, "data": result.model_dump(by_alias=True)}


@app.post("/api/weather-assistant")
@app.post("/api/chat")
async def weather_assistant(payload: AssistantRequest) -> dict:
    assistant = WeatherAssistant(service=_weather_service())
    reply = await assistant.answer(payload.query, payload.city)
    return reply.model_dump()
