"""API key diagnostics: presence, placeholder, length, and one live call."""

import logging

import httpx

from weatherapp.config.runtime_env import API_KEY_NAME, RuntimeConfigProvider
from weatherapp.ingest.openweather_client import OpenWeatherClient
from weatherapp.models.reporting import EnvCheckResult

logger = logging.getLogger(__name__)

PLACEHOLDER_KEY = "YOUR_API_KEY_HERE"
EXPECTED_KEY_LENGTH = 32
PROBE_CITY = "London"


class EnvChecker:
    def __init__(self, env: RuntimeConfigProvider, client: OpenWeatherClient):
        self.env = env
        self.client = client

    async def check(self) -> EnvCheckResult:
        await self.env.resolve()
        api_key = self.env.get_config_value(API_KEY_NAME) or ""
        result = EnvCheckResult(
            has_api_key=bool(api_key),
            api_key_length=len(api_key),
            is_placeholder=api_key == PLACEHOLDER_KEY,
            status="",
        )
        logger.info(
            "Environment check: has_api_key=%s length=%d placeholder=%s",
            result.has_api_key, result.api_key_length, result.is_placeholder,
        )

        if not result.has_api_key:
            result.status = (
                "ERROR: No API key found. Check your env-config.json or "
                f"{API_KEY_NAME} and restart the server."
            )
            return result
        if result.is_placeholder:
            result.status = "ERROR: Using placeholder API key. Update your configuration."
            return result
        if result.api_key_length != EXPECTED_KEY_LENGTH:
            result.status = (
                f"WARNING: API key length is {result.api_key_length}, "
                f"expected {EXPECTED_KEY_LENGTH}. Check your API key format."
            )
            return result

        try:
            await self.client.get_current(PROBE_CITY, api_key)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                result.status = (
                    "ERROR: API key is invalid or unauthorized (401). "
                    "Please verify your API key."
                )
                result.error = "Unauthorized"
            else:
                result.status = "ERROR: API call failed. Check the logs for details."
                result.error = f"HTTP error! status: {e.response.status_code}"
            return result
        except httpx.RequestError as e:
            result.status = "ERROR: API call failed. Check the logs for details."
            result.error = str(e) or type(e).__name__
            return result

        result.status = "SUCCESS: API call successful!"
        return result
