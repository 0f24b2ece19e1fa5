from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    app_name: str = "Weather Agent API"
    app_version: str = "1.0.0"
    open_meteo_forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    open_meteo_geo_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    geocode_candidate_count: int = 10
    forecast_days: int = 5
    request_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    enable_debug_routes: bool = True
    frontend_origins: tuple[str, ...] = ("http://localhost:3000", "http://127.0.0.1:3000")


def get_settings() -> Settings:
    app_name_raw = os.getenv("APP_NAME", "").strip()
    origins_raw = os.getenv("FRONTEND_ORIGINS", "").strip()
    timeout_raw = os.getenv("REQUEST_TIMEOUT_SECONDS", "").strip()
    candidate_count_raw = os.getenv("GEOCODE_CANDIDATE_COUNT", "").strip()
    forecast_days_raw = os.getenv("FORECAST_DAYS", "").strip()
    log_level_raw = os.getenv("LOG_LEVEL", "").strip().upper()
    debug_routes_raw = os.getenv("ENABLE_DEBUG_ROUTES", "").strip().lower()

    parsed_origins = tuple(item.strip() for item in origins_raw.split(",") if item.strip())

    try:
        timeout_seconds = float(timeout_raw) if timeout_raw else 10.0
    except ValueError:
        timeout_seconds = 10.0

    try:
        candidate_count = int(candidate_count_raw) if candidate_count_raw else 10
    except ValueError:
        candidate_count = 10

    try:
        forecast_days = int(forecast_days_raw) if forecast_days_raw else 5
    except ValueError:
        forecast_days = 5

    if log_level_raw not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        log_level_raw = Settings.log_level

    enable_debug_routes = debug_routes_raw not in {"0", "false", "no", "off"}

    return Settings(
        app_name=app_name_raw or Settings.app_name,
        frontend_origins=parsed_origins or Settings.frontend_origins,
        request_timeout_seconds=max(1.0, timeout_seconds),
        geocode_candidate_count=min(100, max(1, candidate_count)),
        forecast_days=min(5, max(3, forecast_days)),
        log_level=log_level_raw,
        enable_debug_routes=enable_debug_routes,
    )
