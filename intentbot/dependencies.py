from typing import Optional

from intentbot.config import Settings, get_settings
from intentbot.domain.services.conversation_service import ConversationSession
from intentbot.domain.services.dispatcher import Dispatcher
from intentbot.domain.services.intent_handlers import SpeechCallback, default_handlers
from intentbot.domain.services.slot_extractor import SlotExtractor
from intentbot.infrastructure.ai.embeddings.embedding_service import EmbeddingService, SentenceTransformerBackend
from intentbot.infrastructure.ai.intent.intent_classifier import IntentClassifier
from intentbot.infrastructure.ai.registry.artifact_source import HttpArtifactSource
from intentbot.infrastructure.ai.registry.model_registry import ModelRegistry
from intentbot.infrastructure.ai.tagging.sequence_tagger import SequenceTagger
from intentbot.infrastructure.weather.weather_client import MetaWeatherClient, WeatherService


def get_model_registry(settings: Settings) -> ModelRegistry:
    """
    Provide a model registry configured from settings.

    Args:
        settings: Application settings

    Returns:
        ModelRegistry: Registry instance
    """
    source = HttpArtifactSource(
        timeout=settings.ARTIFACT_TIMEOUT_SECONDS,
        max_retries=settings.ARTIFACT_MAX_RETRIES
    )

    async def load_embedder() -> SentenceTransformerBackend:
        return await SentenceTransformerBackend.load(
            settings.EMBEDDING_MODEL_NAME,
            batch_size=settings.EMBEDDING_BATCH_SIZE
        )

    return ModelRegistry(source, settings.model_sources(), embedder_factory=load_embedder)


def get_weather_service(settings: Settings) -> WeatherService:
    """
    Provide the weather collaborator.

    Args:
        settings: Application settings

    Returns:
        WeatherService: Service instance
    """
    client = MetaWeatherClient(
        base_url=settings.WEATHER_API_URL,
        timeout=settings.WEATHER_TIMEOUT_SECONDS,
        max_retries=settings.WEATHER_MAX_RETRIES
    )
    return WeatherService(client)


def build_session(
    settings: Optional[Settings] = None,
    registry: Optional[ModelRegistry] = None,
    weather_service: Optional[WeatherService] = None,
    speak: Optional[SpeechCallback] = None
) -> ConversationSession:
    """
    Assemble a conversation session and all of its collaborators.

    Args:
        settings: Application settings, defaults to the cached settings
        registry: Registry to use instead of one built from settings
        weather_service: Weather collaborator to use instead of the default
        speak: Optional coroutine function voicing weather reports

    Returns:
        ConversationSession: Session ready to handle turns
    """
    settings = settings or get_settings()
    registry = registry or get_model_registry(settings)

    embedder = EmbeddingService(
        registry,
        embedding_dim=settings.EMBEDDING_DIMENSION,
        use_cache=settings.EMBEDDING_USE_CACHE
    )
    classifier = IntentClassifier(registry, embedder, model_name=settings.INTENT_MODEL_NAME)
    tagger = SequenceTagger(
        registry,
        embedder,
        embedding_dim=settings.EMBEDDING_DIMENSION,
        padding_label_index=settings.PADDING_DISPLAY_LABEL_INDEX
    )
    slot_extractor = SlotExtractor(
        tagger,
        settings.TAGGER_MODEL_NAME,
        slot_label_index=settings.LOCATION_SLOT_LABEL_INDEX,
        slot_label=settings.LOCATION_SLOT_LABEL
    )
    dispatcher = Dispatcher(
        classifier,
        default_handlers(speak=speak),
        slot_extractor=slot_extractor,
        lookup=weather_service or get_weather_service(settings),
        threshold=settings.THRESHOLD_SCORE
    )
    return ConversationSession(
        dispatcher,
        tagger,
        registry,
        tagger_model_name=settings.TAGGER_MODEL_NAME
    )
