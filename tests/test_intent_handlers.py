import pytest

from intentbot.domain.services.intent_handlers import (
    MUSIC_RESPONSE,
    WEATHER_GLYPH,
    CannedResponseHandler,
    UnknownIntentHandler,
    WeatherIntentHandler,
    default_handlers
)
from intentbot.infrastructure.weather.weather_client import WeatherService
from conftest import FakeWeatherClient


class StubExtractor:

    def __init__(self, value):
        self.value = value

    async def extract(self, sentence):
        return self.value


class TestWeatherIntentHandler:

    @pytest.mark.asyncio
    async def test_reports_weather_for_extracted_location(self):
        client = FakeWeatherClient()
        handler = WeatherIntentHandler()

        response = await handler.respond("weather in singapore", StubExtractor("singapore"), WeatherService(client))

        assert response == f"{WEATHER_GLYPH} The City of Singapore is expecting Heavy Rain today."
        assert client.searches == ["singapore"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("location", ["", "   "])
    async def test_no_location_returns_glyph_without_lookup(self, location):
        client = FakeWeatherClient()
        handler = WeatherIntentHandler()

        response = await handler.respond("what's the weather", StubExtractor(location), WeatherService(client))

        assert response == WEATHER_GLYPH
        assert client.searches == []

    @pytest.mark.asyncio
    async def test_speaks_the_weather_sentence(self):
        spoken = []

        async def speak(text):
            spoken.append(text)

        handler = WeatherIntentHandler(speak=speak)
        await handler.respond("weather in singapore", StubExtractor("singapore"), WeatherService(FakeWeatherClient()))

        assert spoken == ["The City of Singapore is expecting Heavy Rain today."]

    @pytest.mark.asyncio
    async def test_speech_failure_does_not_break_the_reply(self):
        async def speak(text):
            raise RuntimeError("no audio device")

        handler = WeatherIntentHandler(speak=speak)
        response = await handler.respond("weather in singapore", StubExtractor("singapore"), WeatherService(FakeWeatherClient()))

        assert response.startswith(WEATHER_GLYPH + " The City")

    def test_handles_only_its_label(self):
        handler = WeatherIntentHandler()

        assert handler.can_handle("GetWeather")
        assert not handler.can_handle("PlayMusic")


class TestOtherHandlers:

    @pytest.mark.asyncio
    async def test_canned_response(self):
        handler = CannedResponseHandler("PlayMusic", MUSIC_RESPONSE)

        assert handler.can_handle("PlayMusic")
        assert await handler.respond("play some jazz", None, None) == "🎵🎺🎵"

    @pytest.mark.asyncio
    async def test_unknown_intent_handler_accepts_everything(self):
        handler = UnknownIntentHandler()

        assert handler.can_handle("BookRestaurant")
        assert await handler.respond("book a table", None, None) == "?"

    def test_default_table_ends_with_catch_all(self):
        handlers = default_handlers()

        assert isinstance(handlers[-1], UnknownIntentHandler)
        assert [h for h in handlers if h.can_handle("GetWeather")][0] is handlers[0]
