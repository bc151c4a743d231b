"""Shared test fixtures."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import yaml

from weatherapp.config.runtime_env import API_KEY_NAME, RuntimeConfigProvider
from weatherapp.config.schema import FavoritesConfig, SuggestionConfig, WidgetConfig
from weatherapp.ingest.openweather_client import OpenWeatherClient

TEST_API_KEY = "0123456789abcdef0123456789abcdef"
FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str):
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def api_key() -> str:
    return TEST_API_KEY


@pytest.fixture
def current_payload() -> dict:
    """A fresh copy of the London /weather response."""
    return load_fixture("openweather_current_london.json")


@pytest.fixture
def forecast_payload() -> dict:
    return load_fixture("openweather_forecast_london.json")


@pytest.fixture
def geocode_payload() -> list:
    return load_fixture("openweather_geocode_london.json")


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "default_city": "Berlin",
        "suggestions": {"debounce_ms": 250},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def widget_config() -> WidgetConfig:
    """Config with favorites off and a short debounce so tests stay fast."""
    return WidgetConfig(
        forecast_entries=5,
        suggestions=SuggestionConfig(debounce_ms=30, min_chars=2, limit=5),
        favorites=FavoritesConfig(enabled=False, cities=["Paris", "Tokyo"]),
    )


@pytest_asyncio.fixture
async def keyed_env() -> RuntimeConfigProvider:
    env = RuntimeConfigProvider(host_loader=lambda: {API_KEY_NAME: TEST_API_KEY})
    await env.resolve()
    return env


@pytest_asyncio.fixture
async def keyless_env() -> RuntimeConfigProvider:
    env = RuntimeConfigProvider(host_loader=lambda: {})
    await env.resolve()
    return env


@pytest.fixture
def mock_client() -> MagicMock:
    """OpenWeatherClient double; its coroutine methods are AsyncMocks."""
    client = MagicMock(spec=OpenWeatherClient)
    client.get_current.return_value = load_fixture("openweather_current_london.json")
    client.get_forecast.return_value = load_fixture("openweather_forecast_london.json")
    client.geocode.return_value = load_fixture("openweather_geocode_london.json")
    return client
