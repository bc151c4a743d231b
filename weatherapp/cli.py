"""CLI entry point for the weather widget."""

import argparse
import asyncio
import logging

from weatherapp.config.loader import get_config_value, load_config, set_config_value
from weatherapp.config.runtime_env import provider_from_config
from weatherapp.config.schema import WidgetConfig
from weatherapp.ingest.openweather_client import OpenWeatherClient
from weatherapp.models.weather import ViewPhase
from weatherapp.reporting.env_checker import EnvChecker
from weatherapp.reporting.formatters import (
    format_favorites_text,
    format_view_json,
    format_view_text,
)
from weatherapp.view.controller import WeatherViewController

DEFAULT_CONFIG = "ops/configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherapp",
        description="Weather lookup widget",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )

    sub = parser.add_subparsers(dest="command")

    # weather
    weather_p = sub.add_parser("weather", help="Current conditions and forecast")
    weather_p.add_argument("city", nargs="?", help="City name (default from config)")
    weather_p.add_argument("--json", action="store_true", help="Print JSON")

    # suggest
    suggest_p = sub.add_parser("suggest", help="Type-ahead city suggestions")
    suggest_p.add_argument("query")

    # favorites
    sub.add_parser("favorites", help="Conditions for favorite cities")

    # env-check
    sub.add_parser("env-check", help="Verify the configured API key")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    # serve
    serve_p = sub.add_parser("serve", help="Serve the widget page")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "weather":
        return asyncio.run(_cmd_weather(config, args))
    elif args.command == "suggest":
        return asyncio.run(_cmd_suggest(config, args))
    elif args.command == "favorites":
        return asyncio.run(_cmd_favorites(config))
    elif args.command == "env-check":
        return asyncio.run(_cmd_env_check(config))
    elif args.command == "config":
        return _cmd_config(config, args)
    elif args.command == "serve":
        return _cmd_serve(config, args)
    else:
        parser.print_help()
        return 1


def _client(config: WidgetConfig) -> OpenWeatherClient:
    return OpenWeatherClient(
        base_url=config.api.base_url,
        timeout=config.api.timeout_seconds,
    )


async def _cmd_weather(config: WidgetConfig, args) -> int:
    config = config.model_copy(
        update={"favorites": config.favorites.model_copy(update={"enabled": False})}
    )
    env = provider_from_config(config)
    await env.resolve()
    async with _client(config) as client:
        view = WeatherViewController(config, env, client)
        phase = await view.search(args.city or config.default_city)
        await view.close()
    print(format_view_json(view) if args.json else format_view_text(view))
    return 0 if phase == ViewPhase.SUCCESS else 1


async def _cmd_suggest(config: WidgetConfig, args) -> int:
    env = provider_from_config(config)
    await env.resolve()
    query = args.query.strip()
    if len(query) < config.suggestions.min_chars:
        print(f"Type at least {config.suggestions.min_chars} characters")
        return 1
    async with _client(config) as client:
        view = WeatherViewController(config, env, client)
        suggestions = await view.fetch_suggestions(query)
    if not suggestions:
        print("No suggestions")
    for s in suggestions:
        print(s.label)
    return 0


async def _cmd_favorites(config: WidgetConfig) -> int:
    env = provider_from_config(config)
    await env.resolve()
    async with _client(config) as client:
        view = WeatherViewController(config, env, client)
        favorites = await view.refresh_favorites()
    print(format_favorites_text(favorites))
    return 0


async def _cmd_env_check(config: WidgetConfig) -> int:
    env = provider_from_config(config)
    async with _client(config) as client:
        result = await EnvChecker(env, client).check()
    print(f"Has API key: {'YES' if result.has_api_key else 'NO'}")
    print(f"API key length: {result.api_key_length}")
    print(f"Is placeholder: {'YES' if result.is_placeholder else 'NO'}")
    print(f"Status: {result.status}")
    if result.error:
        print(f"Error: {result.error}")
    return 0 if result.ok else 1


def _cmd_config(config: WidgetConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1


def _cmd_serve(config: WidgetConfig, args) -> int:
    import uvicorn

    from weatherapp.dashboard import create_app

    uvicorn.run(create_app(config), host=args.host, port=args.port)
    return 0
