from unittest.mock import AsyncMock

import httpx
import pytest

from app.config import Settings
from app.services.weather_client import WeatherClient


def _client_returning(json_data: object, status_code: int = 200) -> WeatherClient:
    client = WeatherClient(settings=Settings())
    mock = AsyncMock(spec=httpx.AsyncClient)
    mock.get.return_value = httpx.Response(
        status_code=status_code,
        json=json_data,
        request=httpx.Request("GET", "https://test"),
    )
    client._client = mock
    return client


@pytest.mark.asyncio
async def test_search_locations_requests_ten_candidates() -> None:
    client = _client_returning({"results": [{"name": "Paris", "latitude": 48.85, "longitude": 2.35}]})

    results = await client.search_locations("  Paris ")

    assert results == [{"name": "Paris", "latitude": 48.85, "longitude": 2.35}]
    args, kwargs = client._client.get.call_args
    assert args[0] == "https://geocoding-api.open-meteo.com/v1/search"
    assert kwargs["params"]["name"] == "Paris"
    assert kwargs["params"]["count"] == 10


@pytest.mark.asyncio
async def test_search_locations_treats_missing_results_as_empty() -> None:
    assert await _client_returning({}).search_locations("Xyzzyville") == []
    assert await _client_returning({"results": None}).search_locations("Xyzzyville") == []


@pytest.mark.asyncio
async def test_fetch_current_conditions_asks_for_metric_local_time() -> None:
    client = _client_returning({"current": {"temperature_2m": 10.0}})

    payload = await client.fetch_current_conditions(51.5085, -0.1257)

    assert payload == {"current": {"temperature_2m": 10.0}}
    params = client._client.get.call_args.kwargs["params"]
    assert params["latitude"] == 51.5085
    assert params["longitude"] == -0.1257
    assert params["timezone"] == "auto"
    assert params["wind_speed_unit"] == "ms"
    assert params["forecast_days"] == 1
    assert "apparent_temperature" in params["current"]
    assert "visibility" in params["current"]
    assert "relative_humidity_2m" in params["hourly"]


@pytest.mark.asyncio
async def test_fetch_daily_forecast_uses_configured_day_count() -> None:
    client = _client_returning({"daily": {}})
    client.settings = Settings(forecast_days=3)

    await client.fetch_daily_forecast(48.85, 2.35)

    params = client._client.get.call_args.kwargs["params"]
    assert params["daily"] == "temperature_2m_max,weather_code"
    assert params["forecast_days"] == 3


@pytest.mark.asyncio
async def test_provider_error_status_raises_once() -> None:
    client = _client_returning({"error": True, "reason": "boom"}, status_code=500)

    with pytest.raises(httpx.HTTPStatusError):
        await client.fetch_current_conditions(0.0, 0.0)
    assert client._client.get.await_count == 1
