"""Map fetch failures onto the messages shown in the widget."""

import httpx

INVALID_KEY_MESSAGE = "Invalid API key. Please verify your OpenWeatherMap API key is correct."
NOT_FOUND_MESSAGE = "City not found. Please check the city name and try again."
NETWORK_ERROR_MESSAGE = (
    "Network error: Unable to connect to weather service. "
    "Please check your internet connection."
)
GENERIC_FAILURE = "Failed to fetch weather data"


def describe_fetch_error(exc: BaseException) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status == 401:
            return INVALID_KEY_MESSAGE
        if status == 404:
            return NOT_FOUND_MESSAGE
        return f"Error {status}: {_provider_message(exc.response) or GENERIC_FAILURE}"
    if isinstance(exc, httpx.RequestError):
        return NETWORK_ERROR_MESSAGE
    return f"Error: {str(exc) or GENERIC_FAILURE}"


def _provider_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None
