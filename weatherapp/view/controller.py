"""Weather view controller: search state machine, type-ahead and favorite cards.

Phases run idle -> loading -> success | error, and every new search re-enters
loading. Each search and suggestion lookup is tagged with a sequence number so
a slow response from a superseded request never overwrites newer state.
"""

import asyncio
import logging
import random
from collections.abc import Callable, Coroutine
from datetime import date
from typing import Any

from weatherapp.config.runtime_env import API_KEY_NAME, RuntimeConfigProvider
from weatherapp.config.schema import WidgetConfig
from weatherapp.ingest.openweather_client import (
    OpenWeatherClient,
    parse_current,
    parse_forecast,
    parse_suggestions,
)
from weatherapp.ingest.synthetic import synthetic_forecast, synthetic_snapshot
from weatherapp.models.common import utc_today
from weatherapp.models.weather import (
    ForecastEntry,
    Suggestion,
    ViewPhase,
    WeatherSnapshot,
)
from weatherapp.view.errors import describe_fetch_error

logger = logging.getLogger(__name__)


class WeatherViewController:
    def __init__(
        self,
        config: WidgetConfig,
        env: RuntimeConfigProvider,
        client: OpenWeatherClient,
        rng: random.Random | None = None,
        today: Callable[[], date] = utc_today,
    ):
        self.config = config
        self.env = env
        self.client = client
        self.rng = rng or random.Random()
        self.today = today

        self.phase = ViewPhase.IDLE
        self.city = config.default_city
        self.input_text = config.default_city
        self.weather: WeatherSnapshot | None = None
        self.forecast: list[ForecastEntry] = []
        self.error: str | None = None
        self.suggestions: list[Suggestion] = []
        self.show_suggestions = False
        self.favorites: dict[str, WeatherSnapshot] = {}

        self._search_seq = 0
        self._suggest_seq = 0
        self._favorites_seq = 0
        self._debounce: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def api_key(self) -> str | None:
        return self.env.get_config_value(API_KEY_NAME)

    @property
    def has_pending_suggestion(self) -> bool:
        return self._debounce is not None

    # --- Primary search ---

    async def mount(self) -> ViewPhase:
        return await self.search(self.city)

    async def submit(self, text: str) -> ViewPhase | None:
        """Search form handler. Blank input is ignored."""
        city = text.strip()
        if not city:
            return None
        self.input_text = city
        self._dismiss_suggestions()
        return await self.search(city)

    async def search(self, city: str) -> ViewPhase:
        self.city = city
        self._search_seq += 1
        seq = self._search_seq
        self.phase = ViewPhase.LOADING
        self.error = None

        if self.config.favorites.enabled:
            self._spawn(self.refresh_favorites())

        api_key = self.api_key
        if not api_key:
            logger.info("No API key configured, using synthetic data for %s", city)
            self._show(
                synthetic_snapshot(city),
                synthetic_forecast(
                    self.config.forecast_entries, self.rng, self.today()
                ),
            )
            return self.phase

        logger.info("Fetching weather for %s", city)
        try:
            current_raw, forecast_raw = await asyncio.gather(
                self.client.get_current(city, api_key),
                self.client.get_forecast(city, api_key),
            )
            weather = parse_current(current_raw)
            forecast = parse_forecast(forecast_raw, self.config.forecast_entries)
        except Exception as e:
            if seq != self._search_seq:
                logger.debug("Dropping failure from superseded search for %s", city)
                return self.phase
            self.phase = ViewPhase.ERROR
            self.error = describe_fetch_error(e)
            self.weather = None
            self.forecast = []
            logger.warning("Weather lookup for %s failed: %s", city, self.error)
            return self.phase

        if seq != self._search_seq:
            logger.debug("Dropping result from superseded search for %s", city)
            return self.phase
        self._show(weather, forecast)
        return self.phase

    def _show(self, weather: WeatherSnapshot, forecast: list[ForecastEntry]) -> None:
        self.weather = weather
        self.forecast = forecast
        self.phase = ViewPhase.SUCCESS

    # --- Type-ahead suggestions ---

    def on_input(self, text: str) -> None:
        """Keystroke handler; must be called from within the running event loop.

        Replaces any pending lookup timer. Short input clears suggestions
        immediately without a network call.
        """
        self.input_text = text
        self._cancel_debounce()
        query = text.strip()
        if len(query) < self.config.suggestions.min_chars:
            self._suggest_seq += 1
            self._clear_suggestions()
            return

        loop = asyncio.get_running_loop()
        self._debounce = loop.call_later(
            self.config.suggestions.debounce_ms / 1000,
            self._fire_suggestions,
            query,
        )

    def _fire_suggestions(self, query: str) -> None:
        self._debounce = None
        self._spawn(self.fetch_suggestions(query))

    async def fetch_suggestions(self, query: str) -> list[Suggestion]:
        """Geocoding lookup. Failures and odd shapes just mean no suggestions."""
        self._suggest_seq += 1
        seq = self._suggest_seq

        api_key = self.api_key
        if not api_key:
            suggestions: list[Suggestion] = []
        else:
            try:
                raw = await self.client.geocode(
                    query, api_key, self.config.suggestions.limit
                )
                suggestions = parse_suggestions(raw)
            except Exception as e:
                logger.warning("Suggestion lookup for %r failed: %s", query, e)
                suggestions = []

        if seq == self._suggest_seq:
            self.suggestions = suggestions
            self.show_suggestions = bool(suggestions)
        return suggestions

    async def select_suggestion(self, suggestion: Suggestion) -> ViewPhase:
        self.input_text = suggestion.name
        self._dismiss_suggestions()
        return await self.search(suggestion.name)

    def on_blur(self) -> None:
        self._dismiss_suggestions()

    def _dismiss_suggestions(self) -> None:
        """Drop the pending timer and any lookup in flight, then hide the list."""
        self._cancel_debounce()
        self._suggest_seq += 1
        self._clear_suggestions()

    def _clear_suggestions(self) -> None:
        self.suggestions = []
        self.show_suggestions = False

    def _cancel_debounce(self) -> None:
        if self._debounce is not None:
            self._debounce.cancel()
            self._debounce = None

    # --- Favorite city cards ---

    async def refresh_favorites(self) -> dict[str, WeatherSnapshot]:
        """Fetch each favorite independently; a failing city is left out."""
        self._favorites_seq += 1
        seq = self._favorites_seq
        cities = list(self.config.favorites.cities)

        api_key = self.api_key
        results: dict[str, WeatherSnapshot] = {}
        if not api_key:
            results = {city: synthetic_snapshot(city) for city in cities}
        else:
            outcomes = await asyncio.gather(
                *(self.client.get_current(city, api_key) for city in cities),
                return_exceptions=True,
            )
            for city, outcome in zip(cities, outcomes):
                if isinstance(outcome, Exception):
                    logger.warning(
                        "Skipping favorite %s: %s", city, describe_fetch_error(outcome)
                    )
                    continue
                try:
                    results[city] = parse_current(outcome)
                except (KeyError, IndexError, TypeError, ValueError):
                    logger.exception("Malformed weather payload for favorite %s", city)

        if seq == self._favorites_seq:
            self.favorites = results
        return results

    # --- Lifecycle ---

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for spawned suggestion and favorite tasks to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        self._cancel_debounce()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
