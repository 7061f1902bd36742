import httpx
import pytest

from intentbot.infrastructure.weather.weather_client import MetaWeatherClient, WeatherService
from intentbot.utils.exceptions import LookupFailureError
from conftest import FakeWeatherClient

BASE_URL = "https://weather.test/api"

SEARCH_RESULTS = [{"title": "Singapore", "location_type": "City", "woeid": 1062617}]
FORECAST = {
    "title": "Singapore",
    "location_type": "City",
    "consolidated_weather": [
        {"weather_state_name": "Heavy Rain"},
        {"weather_state_name": "Showers"},
    ],
}


def make_client(handler) -> MetaWeatherClient:
    return MetaWeatherClient(base_url=BASE_URL, max_retries=1, transport=httpx.MockTransport(handler))


def weather_api(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/location/search/":
        query = request.url.params.get("query")
        return httpx.Response(200, json=SEARCH_RESULTS if query.lower() == "singapore" else [])
    if request.url.path == "/api/location/1062617/":
        return httpx.Response(200, json=FORECAST)
    return httpx.Response(404)


class TestMetaWeatherClient:

    @pytest.mark.asyncio
    async def test_search_sends_query(self):
        seen = []

        def handler(request):
            seen.append(request)
            return weather_api(request)

        results = await make_client(handler).search("  Singapore ")

        assert results == SEARCH_RESULTS
        assert seen[0].url.params["query"] == "Singapore"

    @pytest.mark.asyncio
    async def test_detail_reads_todays_condition(self):
        detail = await make_client(weather_api).detail(1062617)

        assert detail == {"location_type": "City", "title": "Singapore", "condition": "Heavy Rain"}

    @pytest.mark.asyncio
    async def test_server_error_is_lookup_failure(self):
        client = make_client(lambda request: httpx.Response(500))

        with pytest.raises(LookupFailureError) as exc_info:
            await client.search("singapore")

        assert exc_info.value.details["service"] == "weather"

    @pytest.mark.asyncio
    async def test_invalid_json_is_lookup_failure(self):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(LookupFailureError):
            await client.search("singapore")

    @pytest.mark.asyncio
    async def test_unexpected_forecast_shape_is_lookup_failure(self):
        client = make_client(lambda request: httpx.Response(200, json={"title": "Singapore"}))

        with pytest.raises(LookupFailureError):
            await client.detail(1062617)

    @pytest.mark.asyncio
    async def test_connection_error_is_lookup_failure(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(LookupFailureError):
            await make_client(handler).search("singapore")


class TestWeatherService:

    @pytest.mark.asyncio
    async def test_describes_first_candidate(self):
        service = WeatherService(make_client(weather_api))

        assert await service.describe("Singapore") == "The City of Singapore is expecting Heavy Rain today."

    @pytest.mark.asyncio
    async def test_no_candidates_apologises(self):
        service = WeatherService(make_client(weather_api))

        assert await service.describe("Atlantis") == "I'm not smart enough to know weather data for Atlantis"

    @pytest.mark.asyncio
    async def test_failed_lookup_apologises(self):
        service = WeatherService(FakeWeatherClient(fail=True))

        assert await service.describe("Singapore") == WeatherService.unknown_location_message("Singapore")

    @pytest.mark.asyncio
    async def test_failed_detail_apologises(self):
        def handler(request):
            if request.url.path.endswith("/search/"):
                return httpx.Response(200, json=SEARCH_RESULTS)
            return httpx.Response(503)

        service = WeatherService(make_client(handler))

        assert await service.describe("Singapore") == "I'm not smart enough to know weather data for Singapore"
