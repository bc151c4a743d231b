"""Tests for fetch error classification."""

import httpx

from weatherapp.view.errors import (
    INVALID_KEY_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    describe_fetch_error,
)

REQUEST = httpx.Request("GET", "https://api.openweathermap.org/data/2.5/weather")


def _status_error(status: int, **kwargs) -> httpx.HTTPStatusError:
    response = httpx.Response(status, request=REQUEST, **kwargs)
    return httpx.HTTPStatusError("boom", request=REQUEST, response=response)


class TestDescribeFetchError:
    def test_unauthorized_ignores_body(self):
        assert describe_fetch_error(_status_error(401)) == INVALID_KEY_MESSAGE
        assert (
            describe_fetch_error(_status_error(401, json={"message": "Invalid API key. See docs"}))
            == INVALID_KEY_MESSAGE
        )

    def test_not_found(self):
        err = _status_error(404, json={"cod": "404", "message": "city not found"})
        assert describe_fetch_error(err) == NOT_FOUND_MESSAGE

    def test_other_status_with_provider_message(self):
        err = _status_error(429, json={"cod": 429, "message": "rate limit exceeded"})
        assert describe_fetch_error(err) == "Error 429: rate limit exceeded"

    def test_other_status_without_message(self):
        assert describe_fetch_error(_status_error(500, text="oops")) == (
            "Error 500: Failed to fetch weather data"
        )

    def test_other_status_json_without_message(self):
        assert describe_fetch_error(_status_error(502, json=["x"])) == (
            "Error 502: Failed to fetch weather data"
        )

    def test_network_error(self):
        err = httpx.ConnectError("connection refused", request=REQUEST)
        assert describe_fetch_error(err) == NETWORK_ERROR_MESSAGE

    def test_timeout_is_network_error(self):
        err = httpx.ReadTimeout("timed out", request=REQUEST)
        assert describe_fetch_error(err) == NETWORK_ERROR_MESSAGE

    def test_malformed_payload(self):
        assert describe_fetch_error(ValueError("bad payload")) == "Error: bad payload"

    def test_no_text_available(self):
        assert describe_fetch_error(RuntimeError()) == "Error: Failed to fetch weather data"
