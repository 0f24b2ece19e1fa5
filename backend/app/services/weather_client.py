from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

import httpx

from app.config import Settings
from app.schemas import GeoCandidate


logger = logging.getLogger(__name__)

# (description, icon) for daytime; night variants below override codes 0-2.
WEATHER_CODES: Mapping[int, tuple[str, str]] = MappingProxyType(
    {
        0: ("Clear sky", "01d"),
        1: ("Mainly clear", "01d"),
        2: ("Partly cloudy", "02d"),
        3: ("Overcast", "03d"),
        45: ("Fog", "50d"),
        48: ("Depositing rime fog", "50d"),
        51: ("Light drizzle", "09d"),
        53: ("Moderate drizzle", "09d"),
        55: ("Dense drizzle", "09d"),
        56: ("Light freezing drizzle", "09d"),
        57: ("Dense freezing drizzle", "09d"),
        61: ("Slight rain", "10d"),
        63: ("Moderate rain", "10d"),
        65: ("Heavy rain", "10d"),
        66: ("Light freezing rain", "13d"),
        67: ("Heavy freezing rain", "13d"),
        71: ("Slight snow fall", "13d"),
        73: ("Moderate snow fall", "13d"),
        75: ("Heavy snow fall", "13d"),
        77: ("Snow grains", "13d"),
        80: ("Slight rain showers", "09d"),
        81: ("Moderate rain showers", "09d"),
        82: ("Violent rain showers", "09d"),
        85: ("Slight snow showers", "13d"),
        86: ("Heavy snow showers", "13d"),
        95: ("Thunderstorm", "11d"),
        96: ("Thunderstorm with slight hail", "11d"),
        99: ("Thunderstorm with heavy hail", "11d"),
    }
)

NIGHT_WEATHER_CODES: Mapping[int, tuple[str, str]] = MappingProxyType(
    {
        0: ("Clear night", "01n"),
        1: ("Mainly clear night", "01n"),
        2: ("Partly cloudy night", "02n"),
    }
)

UNKNOWN_DAY = ("Unknown", "01d")
UNKNOWN_NIGHT = ("Unknown", "01n")

# GeoNames feature codes for cities, towns and villages all start with PPL.
POPULATED_PLACE_PREFIX = "PPL"

CURRENT_FIELDS = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,is_day,weather_code,"
    "surface_pressure,wind_speed_10m,wind_direction_10m,cloud_cover,visibility,uv_index"
)
HOURLY_FIELDS = "temperature_2m,relative_humidity_2m,precipitation_probability,weather_code"
DAILY_FIELDS = "temperature_2m_max,weather_code"


def describe_weather_code(code: int | None, is_day: bool = True) -> tuple[str, str]:
    if code is None:
        return UNKNOWN_DAY if is_day else UNKNOWN_NIGHT
    if not is_day and code in NIGHT_WEATHER_CODES:
        return NIGHT_WEATHER_CODES[code]
    if code in WEATHER_CODES:
        return WEATHER_CODES[code]
    return UNKNOWN_DAY if is_day else UNKNOWN_NIGHT


def select_best_candidate(candidates: list[GeoCandidate], query: str) -> GeoCandidate | None:
    """Pick the geocoding result that most likely means what the user typed.

    An exact case-insensitive name match wins outright. Otherwise the most
    populous populated place is used (first seen wins ties), and failing that
    the provider's own top result.
    """
    if not candidates:
        return None

    wanted = query.strip().casefold()
    for candidate in candidates:
        if candidate.name.strip().casefold() == wanted:
            return candidate

    best_place: GeoCandidate | None = None
    for candidate in candidates:
        if not (candidate.feature_code or "").upper().startswith(POPULATED_PLACE_PREFIX):
            continue
        if best_place is None or (candidate.population or 0) > (best_place.population or 0):
            best_place = candidate
    if best_place is not None:
        return best_place

    return candidates[0]


@dataclass
class WeatherClient:
    settings: Settings
    _client: httpx.AsyncClient = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(timeout=self.settings.request_timeout_seconds)

    async def close(self) -> None:
        await self._client.aclose()

    async def search_locations(self, name: str) -> list[dict]:
        payload = await self._get_json(
            url=self.settings.open_meteo_geo_url,
            params={
                "name": name.strip(),
                "count": self.settings.geocode_candidate_count,
                "language": "en",
                "format": "json",
            },
        )
        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            return []
        return results

    async def fetch_current_conditions(self, latitude: float, longitude: float) -> dict:
        return await self._get_json(
            url=self.settings.open_meteo_forecast_url,
            params={
                "latitude": latitude,
                "longitude": longitude,
                "current": CURRENT_FIELDS,
                "hourly": HOURLY_FIELDS,
                "timezone": "auto",
                "forecast_days": 1,
                "temperature_unit": "celsius",
                "wind_speed_unit": "ms",
                "precipitation_unit": "mm",
            },
        )

    async def fetch_daily_forecast(self, latitude: float, longitude: float) -> dict:
        return await self._get_json(
            url=self.settings.open_meteo_forecast_url,
            params={
                "latitude": latitude,
                "longitude": longitude,
                "daily": DAILY_FIELDS,
                "timezone": "auto",
                "forecast_days": self.settings.forecast_days,
            },
        )

    async def _get_json(self, *, url: str, params: dict[str, Any] | None = None) -> Any:
        # Single attempt: a failed provider call fails the whole request.
        logger.debug("GET %s params=%s", url, params)
        response = await self._client.get(url, params=params)
        response.raise_for_status()
        return response.json()
