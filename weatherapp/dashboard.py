"""Weather widget web app: FastAPI backend serving the widget page and its JSON API."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse

from weatherapp.config.loader import load_config
from weatherapp.config.runtime_env import (
    API_KEY_NAME,
    RuntimeConfigProvider,
    provider_from_config,
)
from weatherapp.config.schema import WidgetConfig
from weatherapp.ingest.openweather_client import OpenWeatherClient
from weatherapp.reporting.formatters import snapshot_dict, view_dict
from weatherapp.view.controller import WeatherViewController

WIDGET_HTML = Path(__file__).parent.parent / "static" / "widget.html"


def create_app(
    config: WidgetConfig | None = None,
    env: RuntimeConfigProvider | None = None,
    client: OpenWeatherClient | None = None,
) -> FastAPI:
    config = config or load_config()
    env = env or provider_from_config(config)
    owns_client = client is None
    # /api/weather leaves favorite cards to /api/favorites
    search_config = config.model_copy(
        update={"favorites": config.favorites.model_copy(update={"enabled": False})}
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.client = client or OpenWeatherClient(
            base_url=config.api.base_url,
            timeout=config.api.timeout_seconds,
        )
        await env.resolve()
        try:
            yield
        finally:
            if owns_client:
                await app.state.client.aclose()

    app = FastAPI(title="Weather Widget", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _view(view_config: WidgetConfig = config) -> WeatherViewController:
        return WeatherViewController(view_config, env, app.state.client)

    @app.get("/", response_class=HTMLResponse)
    def index():
        if WIDGET_HTML.is_file():
            return FileResponse(WIDGET_HTML)
        return HTMLResponse("<h1>Weather Forecast App</h1><p>widget.html missing</p>")

    @app.get("/api/weather")
    async def get_weather(city: str = Query(default=config.default_city, min_length=1)):
        """Current conditions and forecast, or the classified error."""
        view = _view(search_config)
        await view.search(city.strip() or config.default_city)
        await view.close()
        return view_dict(view)

    @app.get("/api/suggest")
    async def get_suggestions(q: str = ""):
        """Type-ahead candidates; short input or lookup failure gives an empty list."""
        query = q.strip()
        if len(query) < config.suggestions.min_chars:
            return []
        suggestions = await _view().fetch_suggestions(query)
        return [
            {"name": s.name, "country": s.country, "state": s.state, "label": s.label}
            for s in suggestions
        ]

    @app.get("/api/favorites")
    async def get_favorites():
        favorites = await _view().refresh_favorites()
        return [snapshot_dict(w) for w in favorites.values()]

    @app.get("/api/env")
    def get_env():
        """Key presence and length only; the value itself never leaves the server."""
        api_key = env.get_config_value(API_KEY_NAME) or ""
        return {
            "state": str(env.state),
            "has_api_key": bool(api_key),
            "api_key_length": len(api_key),
            "forecast_entries": config.forecast_entries,
            "suggestion_debounce_ms": config.suggestions.debounce_ms,
            "suggestion_min_chars": config.suggestions.min_chars,
        }

    return app
