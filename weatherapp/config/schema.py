"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.openweathermap.org"
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class RuntimeEnvConfig(BaseModel):
    model_config = {"extra": "forbid"}

    env_file: str = "env-config.json"
    poll_interval_ms: int = Field(default=100, ge=1)
    poll_max_attempts: int = Field(default=50, ge=1)


class SuggestionConfig(BaseModel):
    model_config = {"extra": "forbid"}

    debounce_ms: int = Field(default=300, ge=0)
    min_chars: int = Field(default=2, ge=1)
    limit: int = Field(default=5, ge=1, le=5)


class FavoritesConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = True
    cities: list[str] = []


class WidgetConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_city: str = Field(default="London", min_length=1)
    forecast_entries: int = Field(default=5, ge=4, le=5)
    api: ApiConfig = ApiConfig()
    runtime_env: RuntimeEnvConfig = RuntimeEnvConfig()
    suggestions: SuggestionConfig = SuggestionConfig()
    favorites: FavoritesConfig = FavoritesConfig()
