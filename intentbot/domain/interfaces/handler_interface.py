from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from intentbot.domain.services.slot_extractor import SlotExtractor
    from intentbot.infrastructure.weather.weather_client import WeatherService


class IntentHandler(ABC):
    """
    Abstract base class for per-intent response logic.

    Handlers are consulted in registration order; the first one whose
    ``can_handle`` accepts the intent label produces the response.
    """

    @abstractmethod
    def can_handle(self, label: str) -> bool:
        """
        Check whether this handler responds to an intent label.

        Args:
            label: The recognized intent label

        Returns:
            True if this handler should produce the response
        """
        pass

    @abstractmethod
    async def respond(
        self,
        sentence: str,
        slot_extractor: Optional["SlotExtractor"],
        lookup: Optional["WeatherService"]
    ) -> str:
        """
        Produce the display text for a recognized intent.

        Args:
            sentence: The user's sentence
            slot_extractor: Extracts slot values from the sentence
            lookup: External data collaborator

        Returns:
            The response text
        """
        pass
