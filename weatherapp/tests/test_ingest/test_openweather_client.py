"""Tests for the OpenWeatherMap client with mocked httpx."""

import httpx
import pytest
import respx

from weatherapp.ingest.openweather_client import (
    OpenWeatherClient,
    icon_url,
    parse_current,
    parse_forecast,
    parse_suggestions,
)

BASE = "https://test-owm.example.com"
@pytest.fixture
def owm() -> OpenWeatherClient:
    return OpenWeatherClient(base_url=BASE, timeout=1.0)


class TestRequests:
    @pytest.mark.asyncio
    @respx.mock
    async def test_current_params(self, owm: OpenWeatherClient, current_payload):
        route = respx.get(f"{BASE}/data/2.5/weather").mock(
            return_value=httpx.Response(200, json=current_payload)
        )
        data = await owm.get_current("London", "key123")
        assert data["name"] == "London"
        params = route.calls[0].request.url.params
        assert params["q"] == "London"
        assert params["appid"] == "key123"
        assert params["units"] == "metric"
        await owm.aclose()

    @pytest.mark.asyncio
    @respx.mock
    async def test_forecast(self, owm: OpenWeatherClient, forecast_payload):
        respx.get(f"{BASE}/data/2.5/forecast").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        data = await owm.get_forecast("London", "key123")
        assert len(data["list"]) == 7
        await owm.aclose()

    @pytest.mark.asyncio
    @respx.mock
    async def test_geocode_limit(self, owm: OpenWeatherClient):
        route = respx.get(f"{BASE}/geo/1.0/direct").mock(
            return_value=httpx.Response(200, json=[])
        )
        assert await owm.geocode("Lon", "key123", limit=3) == []
        params = route.calls[0].request.url.params
        assert params["q"] == "Lon"
        assert params["limit"] == "3"
        await owm.aclose()

    @pytest.mark.asyncio
    @respx.mock
    async def test_status_error_raised(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/data/2.5/weather").mock(
            return_value=httpx.Response(404, json={"cod": "404", "message": "city not found"})
        )
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await owm.get_current("Nowhere", "key123")
        assert exc_info.value.response.status_code == 404
        await owm.aclose()

    @pytest.mark.asyncio
    @respx.mock
    async def test_connect_error_raised(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/data/2.5/weather").mock(side_effect=httpx.ConnectError("down"))
        with pytest.raises(httpx.RequestError):
            await owm.get_current("London", "key123")
        await owm.aclose()

    @pytest.mark.asyncio
    async def test_shared_http_client_not_closed(self):
        http = httpx.AsyncClient()
        async with OpenWeatherClient(http_client=http):
            pass
        assert not http.is_closed
        await http.aclose()


class TestParsers:
    def test_parse_current(self, current_payload):
        raw = current_payload
        w = parse_current(raw)
        assert w.name == "London"
        assert w.country == "GB"
        assert w.condition.icon == "04d"
        assert w.temp == 14.62
        assert w.humidity == 78
        assert w.pressure == 1012
        assert w.wind_speed == 4.63
        assert w.wind_deg == 240
        assert w.temp_max == 15.75
        assert w.raw is raw

    def test_parse_current_missing_main(self):
        with pytest.raises(KeyError):
            parse_current({"weather": [{"icon": "01d"}]})

    def test_parse_forecast_truncates_in_order(self, forecast_payload):
        raw = forecast_payload
        entries = parse_forecast(raw, 5)
        assert len(entries) == 5
        assert [e.dt for e in entries] == [item["dt"] for item in raw["list"][:5]]
        assert entries[1].description == "light rain"

    def test_parse_forecast_short_list(self, forecast_payload):
        raw = forecast_payload
        raw["list"] = raw["list"][:2]
        assert len(parse_forecast(raw, 5)) == 2

    def test_parse_suggestions(self, geocode_payload):
        suggestions = parse_suggestions(geocode_payload)
        assert len(suggestions) == 3
        assert suggestions[0].name == "London"
        assert suggestions[1].label == "London, Ontario, CA"

    def test_parse_suggestions_non_list(self):
        assert parse_suggestions({"cod": 401, "message": "Invalid API key"}) == []
        assert parse_suggestions(None) == []

    def test_parse_suggestions_skips_nameless(self):
        assert parse_suggestions([{"country": "GB"}, "junk"]) == []

    def test_icon_url(self):
        assert icon_url("10d") == "https://openweathermap.org/img/wn/10d.png"
        assert icon_url("10d", large=True) == "https://openweathermap.org/img/wn/10d@2x.png"
