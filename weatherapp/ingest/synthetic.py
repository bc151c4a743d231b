"""Placeholder weather used when no API key is configured."""

import random
from datetime import UTC, date, datetime, time, timedelta

from weatherapp.models.common import utc_today
from weatherapp.models.weather import ForecastEntry, WeatherCondition, WeatherSnapshot

BASE_TEMP = 22
MAX_TEMP_DROP = 4

CLEAR_SKY = WeatherCondition(id=800, main="Clear", description="clear sky", icon="01d")

FORECAST_CONDITIONS: list[tuple[str, str]] = [
    ("01d", "clear sky"),
    ("02d", "few clouds"),
    ("03d", "scattered clouds"),
    ("04d", "broken clouds"),
    ("09d", "shower rain"),
    ("10d", "rain"),
    ("11d", "thunderstorm"),
    ("13d", "snow"),
    ("50d", "mist"),
]


def synthetic_snapshot(city: str) -> WeatherSnapshot:
    return WeatherSnapshot(
        name=city,
        country="GB",
        condition=CLEAR_SKY,
        temp=BASE_TEMP,
        feels_like=23,
        humidity=65,
        pressure=1015,
        wind_speed=3.5,
    )


def synthetic_forecast(
    entries: int,
    rng: random.Random | None = None,
    today: date | None = None,
) -> list[ForecastEntry]:
    """One entry per day starting tomorrow, temperature BASE_TEMP minus 0..4."""
    rng = rng or random.Random()
    today = today or utc_today()
    forecast = []
    for offset in range(1, entries + 1):
        day = datetime.combine(today + timedelta(days=offset), time(12, 0), tzinfo=UTC)
        icon, description = rng.choice(FORECAST_CONDITIONS)
        forecast.append(
            ForecastEntry(
                dt=int(day.timestamp()),
                temp=BASE_TEMP - rng.randint(0, MAX_TEMP_DROP),
                icon=icon,
                description=description,
            )
        )
    return forecast
