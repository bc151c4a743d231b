"""Output formatters for the weather view."""

import json
from datetime import UTC, datetime
from typing import Any

from weatherapp.ingest.openweather_client import icon_url
from weatherapp.models.common import round_half_up
from weatherapp.models.weather import ForecastEntry, WeatherSnapshot
from weatherapp.view.controller import WeatherViewController


def weekday_label(dt: int) -> str:
    return datetime.fromtimestamp(dt, UTC).strftime("%a")


def snapshot_dict(w: WeatherSnapshot) -> dict[str, Any]:
    return {
        "name": w.name,
        "country": w.country,
        "description": w.condition.description,
        "icon": w.condition.icon,
        "icon_url": icon_url(w.condition.icon, large=True),
        "temp": round_half_up(w.temp),
        "feels_like": round_half_up(w.feels_like),
        "humidity": w.humidity,
        "pressure": w.pressure,
        "wind_speed": w.wind_speed,
    }


def forecast_dict(f: ForecastEntry) -> dict[str, Any]:
    return {
        "dt": f.dt,
        "day": weekday_label(f.dt),
        "temp": round_half_up(f.temp),
        "icon": f.icon,
        "icon_url": icon_url(f.icon),
        "description": f.description,
    }


def view_dict(view: WeatherViewController) -> dict[str, Any]:
    """Everything the widget page needs to render the current state."""
    return {
        "phase": str(view.phase),
        "city": view.city,
        "error": view.error,
        "weather": snapshot_dict(view.weather) if view.weather else None,
        "forecast": [forecast_dict(f) for f in view.forecast],
    }


def format_view_json(view: WeatherViewController) -> str:
    return json.dumps(view_dict(view), indent=2)


def format_view_text(view: WeatherViewController) -> str:
    """Plain text rendering for the terminal."""
    if view.error:
        return view.error
    w = view.weather
    if w is None:
        return "No weather data."
    lines = [
        f"=== {w.name}, {w.country} ===",
        f"{round_half_up(w.temp)}°C  {w.condition.description}",
        f"Feels like: {round_half_up(w.feels_like)}°C | Humidity: {w.humidity}% | "
        f"Wind: {w.wind_speed} m/s | Pressure: {w.pressure} hPa",
    ]
    if view.forecast:
        lines.append("Forecast:")
        for f in view.forecast:
            lines.append(
                f"  {weekday_label(f.dt)}  {round_half_up(f.temp):>3}°C  {f.description}"
            )
    return "\n".join(lines)


def format_favorites_text(favorites: dict[str, WeatherSnapshot]) -> str:
    if not favorites:
        return "No favorite cities available."
    return "\n".join(
        f"{city}: {round_half_up(w.temp)}°C {w.condition.description}"
        for city, w in favorites.items()
    )
