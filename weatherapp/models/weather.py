"""Weather view models: current conditions, forecast entries, suggestions."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ViewPhase(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class WeatherCondition:
    id: int
    main: str
    description: str
    icon: str


@dataclass(frozen=True)
class WeatherSnapshot:
    name: str
    country: str
    condition: WeatherCondition
    temp: float
    feels_like: float
    humidity: int
    pressure: int
    wind_speed: float
    temp_min: float | None = None
    temp_max: float | None = None
    wind_deg: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class ForecastEntry:
    dt: int  # unix seconds
    temp: float
    icon: str
    description: str


@dataclass(frozen=True)
class Suggestion:
    name: str
    country: str
    state: str | None = None
    lat: float | None = None
    lon: float | None = None

    @property
    def label(self) -> str:
        parts = [self.name]
        if self.state:
            parts.append(self.state)
        parts.append(self.country)
        return ", ".join(parts)
