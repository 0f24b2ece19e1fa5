from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for models serialized to the browser client with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class GeoCandidate(BaseModel):
    """One row of the Open-Meteo geocoding `results` array."""

    model_config = ConfigDict(extra="ignore")

    name: str
    latitude: float
    longitude: float
    country: str | None = None
    admin1: str | None = None
    population: int | None = None
    feature_code: str | None = None
    elevation: float | None = None
    timezone: str | None = None


class ResolvedLocation(ApiModel):
    name: str
    country: str | None = None
    admin1: str | None = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timezone: str = "auto"


class Coordinates(ApiModel):
    latitude: float
    longitude: float


class WeatherSnapshot(ApiModel):
    city: str
    country: str | None = None
    temperature: float
    apparent_temperature: float | None = None
    description: str
    icon: str
    weather_code: int | None = None
    humidity: int
    wind_speed: float
    wind_direction: int | None = None
    pressure: float | None = None
    visibility: float | None = None
    cloud_cover: int | None = None
    uv_index: float | None = None
    is_day: bool = True
    coordinates: Coordinates
    timezone: str = "auto"
    last_updated: str
    recommendation: str = ""
    detailed_recommendation: str = ""


class ForecastDay(ApiModel):
    date: str
    temperature: int
    description: str
    icon: str


class ForecastResult(ApiModel):
    city: str
    forecast: list[ForecastDay]


class AssistantRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    query: str | None = None
    city: str | None = Field(default=None, max_length=80)


class AssistantReply(BaseModel):
    success: bool = True
    response: str
    confidence: float
    language: str
    categories: list[str]
    city: str | None = None
