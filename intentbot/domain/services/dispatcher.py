"""
Routes a classified utterance to the handler for its intent.
"""

from typing import List, Optional, Sequence

from intentbot.domain.interfaces.handler_interface import IntentHandler
from intentbot.domain.models.intent import IntentPrediction
from intentbot.domain.services.intent_handlers import UNKNOWN_INTENT_RESPONSE
from intentbot.domain.services.slot_extractor import SlotExtractor
from intentbot.infrastructure.weather.weather_client import WeatherService
from intentbot.utils.logger import get_logger

UNRECOGNIZED_RESPONSE = "¯\\_(ツ)_/¯"


class Dispatcher:
    """
    Applies the confidence threshold and dispatches recognized intents.
    """

    def __init__(
        self,
        classifier,
        handlers: Sequence[IntentHandler],
        slot_extractor: Optional[SlotExtractor] = None,
        lookup: Optional[WeatherService] = None,
        threshold: float = 0.90
    ):
        """
        Initialize the dispatcher.

        Args:
            classifier: IntentClassifier producing intent distributions
            handlers: Handlers consulted in order for recognized intents
            slot_extractor: Slot extraction passed to handlers
            lookup: Weather collaborator passed to handlers
            threshold: Minimum top score for an intent to be recognized
        """
        self.logger = get_logger(__name__)
        self.classifier = classifier
        self.handlers: List[IntentHandler] = list(handlers)
        self.slot_extractor = slot_extractor
        self.lookup = lookup
        self.threshold = threshold

    def select_handler(self, label: str) -> Optional[IntentHandler]:
        for handler in self.handlers:
            if handler.can_handle(label):
                return handler
        return None

    async def respond(self, sentence: str) -> str:
        """
        Produce the bot's reply to a sentence.

        Args:
            sentence: The user's sentence

        Returns:
            The response text

        Raises:
            IntentClassificationError: If the intent model is unavailable
        """
        distribution = await self.classifier.classify([sentence])
        labels = await self.classifier.get_labels()
        return await self.respond_to_distribution(sentence, distribution, labels)

    async def respond_to_distribution(
        self,
        sentence: str,
        distribution: Sequence[float],
        labels: Sequence[str]
    ) -> str:
        """
        Produce the reply for an already classified sentence.

        Any top score below the threshold gets the unrecognized response,
        however close it is.
        """
        prediction = IntentPrediction.from_distribution(distribution, labels)

        if not prediction.meets(self.threshold):
            self.logger.info(
                f"Intent not recognized: best was {prediction.label} ({prediction.confidence:.3f})"
            )
            return UNRECOGNIZED_RESPONSE

        self.logger.info(f"Recognized intent {prediction.label} ({prediction.confidence:.3f})")
        handler = self.select_handler(prediction.label)
        if handler is None:
            return UNKNOWN_INTENT_RESPONSE
        return await handler.respond(sentence, self.slot_extractor, self.lookup)
