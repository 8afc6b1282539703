"""Weather lookup collaborator backed by the WeatherAPI.com REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from chat_agent.config import WeatherConfig
from chat_agent.errors import LocationNotFoundError

logger = logging.getLogger(__name__)

# WeatherAPI.com error code for "No matching location found."
_NO_LOCATION_CODE = 1006


@dataclass(slots=True)
class WeatherReport:
    temperature_c: float
    condition: str
    humidity: int
    wind_kph: float
    location: str


class WeatherLookup(Protocol):
    def lookup(self, location: str) -> WeatherReport:
        """Return current conditions, raising `LocationNotFoundError` if unknown."""


class WeatherAPIClient:
    """Fetches current conditions from `{base_url}/current.json`."""

    def __init__(self, config: WeatherConfig | None = None, client: httpx.Client | None = None) -> None:
        self.config = config or WeatherConfig()
        self._client = client

    def lookup(self, location: str) -> WeatherReport:
        params = {"key": self.config.api_key, "q": location}
        url = f"{self.config.base_url.rstrip('/')}/current.json"
        if self._client is not None:
            response = self._client.get(url, params=params, timeout=self.config.timeout_seconds)
        else:
            with httpx.Client(timeout=self.config.timeout_seconds) as client:
                response = client.get(url, params=params)

        payload = _json_or_empty(response)
        error = payload.get("error") or {}
        if error.get("code") == _NO_LOCATION_CODE:
            raise LocationNotFoundError(location)
        response.raise_for_status()

        current = payload.get("current")
        resolved = payload.get("location")
        if not current or not resolved:
            raise LocationNotFoundError(location)

        logger.info("Weather lookup resolved %r to %r", location, resolved.get("name"))
        return WeatherReport(
            temperature_c=float(current["temp_c"]),
            condition=str((current.get("condition") or {}).get("text", "")),
            humidity=int(current.get("humidity", 0)),
            wind_kph=float(current.get("wind_kph", 0.0)),
            location=str(resolved.get("name", location)),
        )


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}
