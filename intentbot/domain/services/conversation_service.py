"""
Service responsible for processing conversational turns.

A turn runs strictly in order: embed, classify, threshold, then for
recognized intents the intent's handler (which may tag the sentence, extract
a slot and call the weather collaborator). Sessions keep no state between
turns; the only shared state is the model registry's cache.
"""

from typing import Dict, Iterable, Optional
import asyncio

from intentbot.domain.models.model_artifacts import LoadResult
from intentbot.domain.models.tagging import TaggingResult
from intentbot.domain.services.dispatcher import Dispatcher
from intentbot.utils.logger import get_logger, get_turn_logger
from intentbot.utils.exceptions import MalformedInputError


class ConversationSession:
    """
    Orchestrates one conversational turn at a time.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        tagger,
        registry,
        tagger_model_name: str,
        warm_up_models: Optional[Iterable[str]] = None
    ):
        """
        Initialize the conversation session with dependencies.

        Args:
            dispatcher: Dispatcher producing responses
            tagger: SequenceTagger used for the display breakdown
            registry: ModelRegistry to warm up
            tagger_model_name: Tagging model used for the display breakdown
            warm_up_models: Model names loaded by ``warm_up``
        """
        self.dispatcher = dispatcher
        self.tagger = tagger
        self.registry = registry
        self.tagger_model_name = tagger_model_name
        self.warm_up_models = list(warm_up_models) if warm_up_models is not None else registry.list_models()
        self.logger = get_logger(__name__)

    async def warm_up(self) -> Dict[str, LoadResult]:
        """
        Load the sentence encoder and every configured model concurrently.

        Returns:
            Mapping of model name to load result, including the encoder
        """
        self.logger.info(f"Warming up models: {', '.join(self.warm_up_models)}")
        embedder_result, model_results = await asyncio.gather(
            self.registry.load_embedding_model(),
            self.registry.load_all(self.warm_up_models)
        )
        results = {"embedder": embedder_result}
        results.update(model_results)
        return results

    async def handle_turn(self, text: Optional[str], turn_id: Optional[str] = None) -> Optional[str]:
        """
        Produce the bot's reply to one user message.

        Args:
            text: The user's message
            turn_id: Optional id stamped on this turn's logs

        Returns:
            The reply, or None for an empty message (nothing to display)

        Raises:
            IntentClassificationError: If the intent model is unavailable
            ModelUnavailableError: If the sentence encoder is unavailable
        """
        try:
            sentence = self.validate_input(text)
        except MalformedInputError as e:
            self.logger.debug(f"Skipping turn: {e.message}")
            return None

        logger = get_turn_logger(__name__, turn_id)
        logger.info(f"Processing turn: {sentence[:50]}")

        response = await self.dispatcher.respond(sentence)

        logger.info(f"Responded: {response}")
        return response

    async def tag_for_display(self, text: Optional[str]) -> Optional[TaggingResult]:
        """
        Tag a message for the token breakdown shown next to the chat.

        Args:
            text: The user's message

        Returns:
            The tagging result, or None when there is nothing to show
        """
        return await self.tagger.tag(text, self.tagger_model_name)

    @staticmethod
    def validate_input(text: Optional[str]) -> str:
        """
        Check that a message has content.

        Raises:
            MalformedInputError: If the message is None or empty
        """
        if text is None or not text.strip():
            raise MalformedInputError()
        return text
