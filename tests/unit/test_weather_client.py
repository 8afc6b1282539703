import httpx
import pytest

from chat_agent.agent.weather import WeatherAPIClient
from chat_agent.config import WeatherConfig
from chat_agent.errors import LocationNotFoundError


def _client(handler) -> WeatherAPIClient:  # type: ignore[no-untyped-def]
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return WeatherAPIClient(WeatherConfig(api_key="test-key", base_url="http://weather.test/v1"), http)


def test_lookup_parses_current_conditions() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "location": {"name": "Paris"},
                "current": {
                    "temp_c": 17.6,
                    "condition": {"text": "Partly cloudy"},
                    "humidity": 63,
                    "wind_kph": 14.4,
                },
            },
        )

    report = _client(handler).lookup("paris")

    assert seen == {"path": "/v1/current.json", "params": {"key": "test-key", "q": "paris"}}
    assert report.location == "Paris"
    assert report.temperature_c == 17.6
    assert report.condition == "Partly cloudy"
    assert report.humidity == 63
    assert report.wind_kph == 14.4


def test_unknown_location_raises_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400, json={"error": {"code": 1006, "message": "No matching location found."}}
        )

    with pytest.raises(LocationNotFoundError):
        _client(handler).lookup("Atlantis")


def test_payload_without_current_raises_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"location": {"name": "Nowhere"}})

    with pytest.raises(LocationNotFoundError):
        _client(handler).lookup("Nowhere")


def test_server_error_propagates_as_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(httpx.HTTPStatusError):
        _client(handler).lookup("Paris")
