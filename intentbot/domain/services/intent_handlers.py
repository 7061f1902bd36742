"""
Per-intent response handlers.

Each handler owns the response logic of one or more intent labels so it
can be exercised without the model stack.
"""

from typing import Awaitable, Callable, Optional

from intentbot.domain.interfaces.handler_interface import IntentHandler
from intentbot.domain.services.slot_extractor import SlotExtractor
from intentbot.infrastructure.weather.weather_client import WeatherService
from intentbot.utils.logger import get_logger

WEATHER_GLYPH = "⛅"
MUSIC_RESPONSE = "🎵🎺🎵"
UNKNOWN_INTENT_RESPONSE = "?"

SpeechCallback = Callable[[str], Awaitable[None]]


class WeatherIntentHandler(IntentHandler):
    """
    Answers weather questions for the location found in the sentence.
    """

    def __init__(self, label: str = "GetWeather", speak: Optional[SpeechCallback] = None):
        """
        Args:
            label: Intent label handled
            speak: Optional coroutine function that voices the weather sentence
        """
        self.label = label
        self.speak = speak
        self.logger = get_logger(__name__)

    def can_handle(self, label: str) -> bool:
        return label == self.label

    async def respond(
        self,
        sentence: str,
        slot_extractor: Optional[SlotExtractor],
        lookup: Optional[WeatherService]
    ) -> str:
        location = await slot_extractor.extract(sentence) if slot_extractor else ""
        if not location.strip() or lookup is None:
            return WEATHER_GLYPH

        weather_message = await lookup.describe(location)
        if self.speak is not None:
            try:
                await self.speak(weather_message)
            except Exception as e:
                self.logger.warning(f"Speech output failed: {str(e)}")
        return f"{WEATHER_GLYPH} {weather_message}"


class CannedResponseHandler(IntentHandler):
    """Answers an intent with a fixed response."""

    def __init__(self, label: str, response: str):
        self.label = label
        self.response = response

    def can_handle(self, label: str) -> bool:
        return label == self.label

    async def respond(self, sentence, slot_extractor, lookup) -> str:
        return self.response


class UnknownIntentHandler(IntentHandler):
    """Answers any recognized intent that has no dedicated handler."""

    def can_handle(self, label: str) -> bool:
        return True

    async def respond(self, sentence, slot_extractor, lookup) -> str:
        return UNKNOWN_INTENT_RESPONSE


def default_handlers(speak: Optional[SpeechCallback] = None) -> list:
    """Handler table in priority order; the catch-all comes last."""
    return [
        WeatherIntentHandler("GetWeather", speak=speak),
        CannedResponseHandler("PlayMusic", MUSIC_RESPONSE),
        UnknownIntentHandler(),
    ]
