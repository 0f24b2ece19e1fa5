from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

import httpx
from pydantic import ValidationError

from app.errors import LocationNotFoundError, QueryValidationError, UpstreamServiceError
from app.schemas import (
    Coordinates,
    ForecastDay,
    ForecastResult,
    GeoCandidate,
    ResolvedLocation,
    WeatherSnapshot,
)
from app.services.recommender import recommend, recommend_long
from app.services.weather_client import WeatherClient, describe_weather_code, select_best_candidate


logger = logging.getLogger(__name__)

COORDINATE_PRECISION = 4
HOURLY_AGREEMENT_C = 3.0
SANE_TEMPERATURE_RANGE_C = (-50.0, 60.0)

GEOCODING_UNAVAILABLE = "Location service temporarily unavailable. Please try again."
INVALID_COORDINATES = "Location service returned invalid coordinates. Please try again."
WEATHER_UNAVAILABLE = "Unable to fetch weather data right now. Please try again."
FORECAST_UNAVAILABLE = "Forecast service temporarily unavailable. Please try again."


@dataclass
class WeatherService:
    """Geocoding, current conditions and daily forecast on top of one WeatherClient.

    Every method raises a WeatherServiceError subclass on failure; nothing from
    the provider's error text is put into those messages.
    """

    client: WeatherClient

    async def resolve_location(self, city: str | None) -> ResolvedLocation:
        name = (city or "").strip()
        if not name:
            raise QueryValidationError("Please provide a city name.")

        try:
            raw_results = await self.client.search_locations(name)
            candidates = [GeoCandidate.model_validate(item) for item in raw_results]
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            logger.warning("Geocoding failed for %r: %s", name, exc, exc_info=True)
            raise UpstreamServiceError(GEOCODING_UNAVAILABLE) from exc

        best = select_best_candidate(candidates, name)
        if best is None:
            raise LocationNotFoundError(
                f'City "{name}" not found. Please check the spelling or add the country, e.g. "Paris, France".'
            )

        if not (-90 <= best.latitude <= 90 and -180 <= best.longitude <= 180):
            logger.error(
                "Geocoder returned out-of-range coordinates for %r: %s, %s", name, best.latitude, best.longitude
            )
            raise UpstreamServiceError(INVALID_COORDINATES)

        return ResolvedLocation(
            name=best.name,
            country=best.country,
            admin1=best.admin1,
            latitude=round(best.latitude, COORDINATE_PRECISION),
            longitude=round(best.longitude, COORDINATE_PRECISION),
            timezone=best.timezone or "auto",
        )

    async def current_weather(self, city: str | None) -> WeatherSnapshot:
        location = await self.resolve_location(city)
        return await self.current_weather_at(location)

    async def current_weather_at(self, location: ResolvedLocation) -> WeatherSnapshot:
        try:
            payload = await self.client.fetch_current_conditions(location.latitude, location.longitude)
            return build_snapshot(location, payload)
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Current weather failed for %s: %s", location.name, exc, exc_info=True)
            raise UpstreamServiceError(WEATHER_UNAVAILABLE) from exc

    async def forecast(self, city: str | None) -> ForecastResult:
        location = await self.resolve_location(city)

        try:
            payload = await self.client.fetch_daily_forecast(location.latitude, location.longitude)
            days = build_forecast_days(payload)
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Forecast failed for %s: %s", location.name, exc, exc_info=True)
            raise UpstreamServiceError(FORECAST_UNAVAILABLE) from exc

        return ForecastResult(city=location.name, forecast=days)


def local_hour_index(current: dict, hourly: dict) -> int | None:
    """Index into the hourly arrays for the provider's local current hour."""
    stamp = current.get("time")
    if not stamp:
        return None
    local_now = datetime.fromisoformat(stamp)
    hour_stamp = local_now.replace(minute=0, second=0, microsecond=0).strftime("%Y-%m-%dT%H:%M")
    try:
        return list(hourly.get("time", [])).index(hour_stamp)
    except ValueError:
        return None


def _hourly_value(hourly: dict, key: str, idx: int | None) -> float | None:
    if idx is None:
        return None
    values = hourly.get(key) or []
    if idx >= len(values):
        return None
    value = values[idx]
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _round_or_none(value: float | None, digits: int) -> float | None:
    if value is None:
        return None
    return round(float(value), digits)


def _int_or_none(value: float | None) -> int | None:
    if value is None:
        return None
    return int(round(float(value)))


def build_snapshot(location: ResolvedLocation, payload: dict) -> WeatherSnapshot:
    current = payload["current"]
    hourly = payload.get("hourly") or {}

    temperature = float(current["temperature_2m"])
    humidity = float(current["relative_humidity_2m"])

    idx = local_hour_index(current, hourly)
    hourly_temperature = _hourly_value(hourly, "temperature_2m", idx)
    if hourly_temperature is not None and abs(hourly_temperature - temperature) <= HOURLY_AGREEMENT_C:
        temperature = hourly_temperature
        hourly_humidity = _hourly_value(hourly, "relative_humidity_2m", idx)
        if hourly_humidity is not None:
            humidity = hourly_humidity

    low, high = SANE_TEMPERATURE_RANGE_C
    if not low <= temperature <= high:
        logger.warning("Temperature %.1fC for %s is outside the plausible range", temperature, location.name)

    weather_code = current.get("weather_code")
    is_day = bool(current.get("is_day", 1))
    description, icon = describe_weather_code(weather_code, is_day)

    visibility_m = current.get("visibility")
    fields = {
        "temperature": round(temperature, 1),
        "apparent_temperature": _round_or_none(current.get("apparent_temperature"), 1),
        "humidity": int(round(humidity)),
        "wind_speed": round(float(current.get("wind_speed_10m") or 0.0), 1),
        "weather_code": weather_code,
        "pressure": _round_or_none(current.get("surface_pressure"), 1),
        "visibility": round(visibility_m / 1000, 1) if visibility_m is not None else None,
        "uv_index": _round_or_none(current.get("uv_index"), 1),
    }

    return WeatherSnapshot(
        city=location.name,
        country=location.country,
        description=description,
        icon=icon,
        wind_direction=_int_or_none(current.get("wind_direction_10m")),
        cloud_cover=_int_or_none(current.get("cloud_cover")),
        is_day=is_day,
        coordinates=Coordinates(latitude=location.latitude, longitude=location.longitude),
        timezone=payload.get("timezone") or location.timezone,
        last_updated=datetime.now(tz=timezone.utc).isoformat(),
        recommendation=recommend(fields["temperature"], description),
        detailed_recommendation=recommend_long(**fields),
        **fields,
    )


def format_forecast_date(value: date) -> str:
    # en-US short date, e.g. 1/15/2026
    return f"{value.month}/{value.day}/{value.year}"


def build_forecast_days(payload: dict) -> list[ForecastDay]:
    daily = payload["daily"]
    stamps = daily["time"]
    temperatures = daily["temperature_2m_max"]
    codes = daily["weather_code"]

    # Ragged columns raise ValueError.
    rows = sorted(
        (date.fromisoformat(stamp), temperature, code)
        for stamp, temperature, code in zip(stamps, temperatures, codes, strict=True)
    )
    if not rows:
        raise ValueError("Forecast payload contained no days.")

    days: list[ForecastDay] = []
    for day, temperature, code in rows:
        description, icon = describe_weather_code(code, True)
        days.append(
            ForecastDay(
                date=format_forecast_date(day),
                temperature=int(round(float(temperature))),
                description=description,
                icon=icon,
            )
        )
    return days
