"""OpenWeatherMap API client: current conditions, forecast, geocoding."""

import logging
from typing import Any

import httpx

from weatherapp.models.weather import (
    ForecastEntry,
    Suggestion,
    WeatherCondition,
    WeatherSnapshot,
)

logger = logging.getLogger(__name__)

OPENWEATHER_BASE_URL = "https://api.openweathermap.org"
ICON_BASE_URL = "https://openweathermap.org/img/wn"
UNITS = "metric"


class OpenWeatherClient:
    """Async wrapper around the OpenWeatherMap REST endpoints.

    Non-2xx responses raise httpx.HTTPStatusError and connectivity failures
    raise httpx.RequestError; callers decide how to present them.
    """

    def __init__(
        self,
        base_url: str = OPENWEATHER_BASE_URL,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def __aenter__(self) -> "OpenWeatherClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = await self._http.get(url, params=params)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "OpenWeather %s returned %d: %s",
                path, e.response.status_code, e.response.text[:200],
            )
            raise
        except httpx.RequestError as e:
            logger.error("OpenWeather request to %s failed: %s", path, e)
            raise

    async def get_current(self, city: str, api_key: str) -> dict:
        """Current conditions for a city name."""
        return await self._get(
            "/data/2.5/weather",
            {"q": city, "appid": api_key, "units": UNITS},
        )

    async def get_forecast(self, city: str, api_key: str) -> dict:
        """3-hourly forecast list for a city name."""
        return await self._get(
            "/data/2.5/forecast",
            {"q": city, "appid": api_key, "units": UNITS},
        )

    async def geocode(self, query: str, api_key: str, limit: int = 5) -> Any:
        """Candidate places for a partial name. Shape is whatever the API returns."""
        return await self._get(
            "/geo/1.0/direct",
            {"q": query, "limit": limit, "appid": api_key},
        )


def icon_url(icon: str, large: bool = False) -> str:
    suffix = "@2x.png" if large else ".png"
    return f"{ICON_BASE_URL}/{icon}{suffix}"


def _parse_condition(raw: dict) -> WeatherCondition:
    weather = raw["weather"][0]
    return WeatherCondition(
        id=int(weather.get("id", 0)),
        main=weather.get("main", ""),
        description=weather.get("description", ""),
        icon=weather.get("icon", ""),
    )


def parse_current(raw: dict) -> WeatherSnapshot:
    """Map a /weather payload onto a snapshot, keeping the payload verbatim."""
    main = raw["main"]
    wind = raw.get("wind", {})
    return WeatherSnapshot(
        name=raw.get("name", ""),
        country=raw.get("sys", {}).get("country", ""),
        condition=_parse_condition(raw),
        temp=float(main["temp"]),
        feels_like=float(main.get("feels_like", main["temp"])),
        humidity=int(main.get("humidity", 0)),
        pressure=int(main.get("pressure", 0)),
        wind_speed=float(wind.get("speed", 0.0)),
        temp_min=main.get("temp_min"),
        temp_max=main.get("temp_max"),
        wind_deg=wind.get("deg"),
        raw=raw,
    )


def parse_forecast(raw: dict, limit: int) -> list[ForecastEntry]:
    """First `limit` entries of a /forecast payload, in provider order."""
    entries = []
    for item in raw["list"][:limit]:
        condition = _parse_condition(item)
        entries.append(
            ForecastEntry(
                dt=int(item["dt"]),
                temp=float(item["main"]["temp"]),
                icon=condition.icon,
                description=condition.description,
            )
        )
    return entries


def parse_suggestions(raw: Any) -> list[Suggestion]:
    """Geocoding candidates; anything other than a list means no suggestions."""
    if not isinstance(raw, list):
        return []
    suggestions = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("name"):
            continue
        suggestions.append(
            Suggestion(
                name=item["name"],
                country=item.get("country", ""),
                state=item.get("state"),
                lat=item.get("lat"),
                lon=item.get("lon"),
            )
        )
    return suggestions
