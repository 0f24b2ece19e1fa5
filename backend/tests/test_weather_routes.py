import httpx
from fastapi.testclient import TestClient

from app import main as main_module


class _FakeRouteWeatherClient:
    def __init__(self, results: list[dict] | None = None, fail_weather: bool = False) -> None:
        self.results = results
        self.fail_weather = fail_weather
        self.calls: list[str] = []

    async def close(self) -> None:
        return None

    async def search_locations(self, name: str) -> list[dict]:
        self.calls.append("search")
        if self.results is not None:
            return self.results
        return [
            {
                "name": "London",
                "country": "United Kingdom",
                "admin1": "England",
                "latitude": 51.50853,
                "longitude": -0.12574,
                "population": 8961989,
                "feature_code": "PPLC",
                "timezone": "Europe/London",
            }
        ]

    async def fetch_current_conditions(self, latitude: float, longitude: float) -> dict:
        self.calls.append("current")
        if self.fail_weather:
            request = httpx.Request("GET", "https://api.open-meteo.com/v1/forecast")
            raise httpx.ConnectTimeout("timed out talking to provider", request=request)
        return {
            "timezone": "Europe/London",
            "current": {
                "time": "2026-02-20T09:00",
                "temperature_2m": 32.0,
                "relative_humidity_2m": 90,
                "apparent_temperature": 33.5,
                "is_day": 1,
                "weather_code": 0,
                "surface_pressure": 1012.0,
                "wind_speed_10m": 3.2,
                "wind_direction_10m": 180,
                "cloud_cover": 5,
                "visibility": 24000.0,
                "uv_index": 4.0,
            },
        }

    async def fetch_daily_forecast(self, latitude: float, longitude: float) -> dict:
        self.calls.append("daily")
        return {
            "daily": {
                "time": ["2026-02-20", "2026-02-21", "2026-02-22", "2026-02-23", "2026-02-24"],
                "temperature_2m_max": [9.0, 8.0, 10.4, 11.6, 7.2],
                "weather_code": [2, 63, 3, 0, 71],
            }
        }


def _client_with(monkeypatch, fake: _FakeRouteWeatherClient) -> TestClient:  # noqa: ANN001
    monkeypatch.setattr(main_module, "weather_client", fake)
    return TestClient(main_module.app)


def test_health_route() -> None:
    response = TestClient(main_module.app).get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_current_weather_route_returns_camel_case_snapshot(monkeypatch) -> None:  # noqa: ANN001
    client = _client_with(monkeypatch, _FakeRouteWeatherClient())

    response = client.get("/api/weather/London")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["city"] == "London"
    assert data["country"] == "United Kingdom"
    assert data["temperature"] == 32.0
    assert data["humidity"] == 90
    assert data["description"] == "Clear sky"
    assert data["icon"] == "01d"
    assert data["visibility"] == 24.0
    assert data["coordinates"] == {"latitude": 51.5085, "longitude": -0.1257}
    assert data["recommendation"] == "Hot weather. Stay hydrated and wear light clothes. Great day to be outside!"
    detailed = data["detailedRecommendation"]
    assert detailed.startswith("Hot weather!")
    assert detailed.index("Hot weather!") < detailed.index("Very high humidity")
    assert "lastUpdated" in data


def test_forecast_route_returns_five_days(monkeypatch) -> None:  # noqa: ANN001
    client = _client_with(monkeypatch, _FakeRouteWeatherClient())

    response = client.get("/api/forecast/London")

    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["city"] == "London"
    forecast = payload["data"]["forecast"]
    assert len(forecast) == 5
    assert forecast[0] == {"date": "2/20/2026", "temperature": 9, "description": "Partly cloudy", "icon": "02d"}
    assert [day["temperature"] for day in forecast] == [9, 8, 10, 12, 7]


def test_unknown_city_is_reported_in_body(monkeypatch) -> None:  # noqa: ANN001
    fake = _FakeRouteWeatherClient(results=[])
    client = _client_with(monkeypatch, fake)

    response = client.get("/api/weather/Atlantis")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is False
    assert "Atlantis" in payload["error"]
    assert fake.calls == ["search"]


def test_provider_failure_is_not_leaked(monkeypatch) -> None:  # noqa: ANN001
    client = _client_with(monkeypatch, _FakeRouteWeatherClient(fail_weather=True))

    response = client.get("/api/weather/London")

    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "Unable to fetch weather data right now. Please try again."
    assert "timed out" not in payload["error"]


def test_compare_route_lists_every_advisory(monkeypatch) -> None:  # noqa: ANN001
    fake = _FakeRouteWeatherClient()
    client = _client_with(monkeypatch, fake)

    response = client.get("/api/weather/compare/London")

    payload = response.json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["query"] == "London"
    assert data["location"]["latitude"] == 51.5085
    assert data["snapshot"]["city"] == "London"
    assert data["allAdvisories"][0].startswith("Hot weather!")
    assert data["features"]["bestMatchGeocoding"] is True
    assert fake.calls == ["search", "current"]


def test_weather_assistant_route(monkeypatch) -> None:  # noqa: ANN001
    client = _client_with(monkeypatch, _FakeRouteWeatherClient())

    response = client.post("/api/weather-assistant", json={"query": "Is it hot in London today?"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["city"] == "London"
    assert payload["language"] == "en"
    assert payload["confidence"] == 0.85
    assert "temperature" in payload["categories"]
    assert "Temperature: 32.0°C" in payload["response"]


def test_chat_alias_uses_explicit_city(monkeypatch) -> None:  # noqa: ANN001
    fake = _FakeRouteWeatherClient()
    client = _client_with(monkeypatch, fake)

    response = client.post("/api/chat", json={"query": "Should I carry an umbrella?", "city": "London"})

    payload = response.json()
    assert payload["success"] is True
    assert payload["categories"] == ["clothing"]
    assert "What to wear:" in payload["response"]
    assert fake.calls == ["search", "current"]


def test_assistant_rejects_off_topic_query_without_weather_calls(monkeypatch) -> None:  # noqa: ANN001
    fake = _FakeRouteWeatherClient()
    client = _client_with(monkeypatch, fake)

    response = client.post("/api/chat", json={"query": "Tell me a joke about cats"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"].startswith("I'm a weather assistant!")
    assert fake.calls == []


def test_assistant_requires_a_query(monkeypatch) -> None:  # noqa: ANN001
    fake = _FakeRouteWeatherClient()
    client = _client_with(monkeypatch, fake)

    response = client.post("/api/weather-assistant", json={"query": "", "city": "London"})

    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "Please ask me a weather-related question!"
    assert fake.calls == []


def test_assistant_null_query_gets_envelope(monkeypatch) -> None:  # noqa: ANN001
    fake = _FakeRouteWeatherClient()
    client = _client_with(monkeypatch, fake)

    response = client.post("/api/chat", json={"query": None})

    assert response.status_code == 200
    assert response.json() == {"success": False, "error": "Please ask me a weather-related question!"}
    assert fake.calls == []


def test_assistant_malformed_body_gets_envelope(monkeypatch) -> None:  # noqa: ANN001
    fake = _FakeRouteWeatherClient()
    client = _client_with(monkeypatch, fake)

    too_long = client.post("/api/weather-assistant", json={"query": "Is it hot?", "city": "x" * 81})
    wrong_type = client.post("/api/chat", json={"query": ["rain"]})

    for response in (too_long, wrong_type):
        assert response.status_code == 200
        payload = response.json()
        assert payload["success"] is False
        assert payload["error"] == main_module.INVALID_REQUEST_MESSAGE
        assert "detail" not in payload
    assert "x" * 81 not in too_long.text
    assert fake.calls == []


def test_ragged_forecast_payload_is_a_provider_error(monkeypatch) -> None:  # noqa: ANN001
    fake = _FakeRouteWeatherClient()

    async def ragged_daily(latitude: float, longitude: float) -> dict:
        return {
            "daily": {
                "time": ["2026-02-20", "2026-02-21"],
                "temperature_2m_max": [9.0],
                "weather_code": [2, 63],
            }
        }

    fake.fetch_daily_forecast = ragged_daily
    client = _client_with(monkeypatch, fake)

    response = client.get("/api/forecast/London")

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "error": "Forecast service temporarily unavailable. Please try again.",
    }
