"""Runtime environment provider: API key injected by the host at container start.

The container entrypoint writes ``env-config.json`` (or exports the variable)
after the image is built, so the key is discovered at runtime instead of being
baked in. Discovery is a single awaitable operation with a bounded number of
polls; once settled the values are frozen for the life of the provider.
"""

import asyncio
import json
import logging
import os
from collections.abc import Callable, Mapping
from enum import StrEnum
from pathlib import Path
from types import MappingProxyType

from weatherapp.config.schema import WidgetConfig

logger = logging.getLogger(__name__)

API_KEY_NAME = "OPENWEATHER_API_KEY"
ENV_FILE_VARIABLE = "WEATHERAPP_ENV_FILE"
DEFAULT_ENV_FILE = "env-config.json"

HostLoader = Callable[[], Mapping[str, str] | None]


class EnvState(StrEnum):
    PENDING = "pending"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


def load_host_env(env_file: str | Path | None = None) -> dict[str, str] | None:
    """Return the host-provided variables, or None if the host has not provided any yet.

    The env file wins over the process environment. A file that exists but
    cannot be parsed is treated as not yet written.
    """
    path = Path(env_file or os.environ.get(ENV_FILE_VARIABLE, DEFAULT_ENV_FILE))
    if path.is_file():
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Env file %s not readable yet: %s", path, e)
            return None
        if isinstance(data, dict):
            return {str(k): "" if v is None else str(v) for k, v in data.items()}
        logger.warning("Env file %s does not hold an object, ignoring", path)
        return None

    if API_KEY_NAME in os.environ:
        return {API_KEY_NAME: os.environ[API_KEY_NAME]}
    return None


class RuntimeConfigProvider:
    """Resolves the API key once from the host and exposes it read-only."""

    def __init__(
        self,
        host_loader: HostLoader | None = None,
        poll_interval: float = 0.1,
        max_attempts: int = 50,
    ):
        self.host_loader = host_loader or load_host_env
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._state = EnvState.PENDING
        self._values: Mapping[str, str] = MappingProxyType({})
        self._discovery: asyncio.Task | None = None

    @property
    def state(self) -> EnvState:
        return self._state

    def get_config_value(self, key: str) -> str | None:
        """Synchronous read. Unknown keys, missing and empty values are None."""
        if key != API_KEY_NAME:
            return None
        return self._values.get(key) or None

    async def resolve(self) -> EnvState:
        """Discover the host values, polling until found or attempts run out.

        Concurrent callers share the same discovery. Calling again after it
        settled returns the settled state without touching the host.
        """
        if self._state is not EnvState.PENDING:
            return self._state
        if self._discovery is None:
            self._discovery = asyncio.ensure_future(self._discover())
        return await asyncio.shield(self._discovery)

    async def _discover(self) -> EnvState:
        for attempt in range(1, self.max_attempts + 1):
            host = self.host_loader()
            if host is not None:
                self._freeze(host)
                return self._state
            if attempt < self.max_attempts:
                logger.debug(
                    "Host env not found, retrying in %.0fms (attempt %d/%d)",
                    self.poll_interval * 1000, attempt, self.max_attempts,
                )
                await asyncio.sleep(self.poll_interval)

        self._state = EnvState.UNAVAILABLE
        logger.warning(
            "Host env not found after %d attempts, continuing without %s",
            self.max_attempts, API_KEY_NAME,
        )
        return self._state

    def _freeze(self, host: Mapping[str, str]) -> None:
        value = host.get(API_KEY_NAME) or ""
        self._values = MappingProxyType({API_KEY_NAME: value})
        self._state = EnvState.AVAILABLE
        logger.info(
            "Host env found: %s present=%s length=%d",
            API_KEY_NAME, bool(value), len(value),
        )


def provider_from_config(config: WidgetConfig) -> RuntimeConfigProvider:
    """Build a provider from the runtime_env section of a WidgetConfig."""
    env = config.runtime_env
    env_file = os.environ.get(ENV_FILE_VARIABLE, env.env_file)
    return RuntimeConfigProvider(
        host_loader=lambda: load_host_env(env_file),
        poll_interval=env.poll_interval_ms / 1000,
        max_attempts=env.poll_max_attempts,
    )
