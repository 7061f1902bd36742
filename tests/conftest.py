import asyncio
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pytest

from intentbot.config import ModelSource, Settings
from intentbot.domain.interfaces.model_interface import (
    ArtifactSourceInterface,
    EmbeddingBackendInterface,
    WeatherClientInterface
)
from intentbot.infrastructure.ai.embeddings.embedding_service import EmbeddingService
from intentbot.infrastructure.ai.registry.model_registry import ModelRegistry
from intentbot.utils.exceptions import LookupFailureError, MetadataUnavailableError, ModelUnavailableError

EMBEDDING_DIM = 512
INTENT_LABELS = ["GetWeather", "PlayMusic", "BookRestaurant", "RateBook"]
TAGGER_LABELS = ["O", "B-LOCATION", "__PAD__"]
SEQUENCE_LENGTH = 8

# Marker values placed in the first embedding component by the fake encoder
LOCATION_MARKER = 0.5
SENTENCE_MARKERS = {
    "what's the weather in singapore": 0.1,
    "play some jazz": 0.2,
    "asdkjasdj": 0.3,
    "what's the weather": 0.4,
}


class FakeEmbeddingBackend(EmbeddingBackendInterface):
    """Encodes each string as a constant vector chosen by a marker table."""

    def __init__(self, markers: Optional[Dict[str, float]] = None, dim: int = EMBEDDING_DIM):
        self.markers = markers if markers is not None else dict(SENTENCE_MARKERS, singapore=LOCATION_MARKER)
        self.dim = dim
        self.calls: List[List[str]] = []

    async def embed(self, texts: Sequence[str]) -> np.ndarray:
        self.calls.append(list(texts))
        return np.stack([
            np.full(self.dim, self.markers.get(text.lower(), 0.0), dtype=np.float32)
            for text in texts
        ]) if texts else np.empty((0, self.dim), dtype=np.float32)


class ScriptedIntentModel:
    """Returns a distribution chosen by the marker in each embedding."""

    def __init__(self, distributions: Dict[float, List[float]], default: Optional[List[float]] = None):
        self.distributions = {round(k, 4): v for k, v in distributions.items()}
        self.default = default or [0.25, 0.25, 0.25, 0.25]
        self.batches: List[np.ndarray] = []

    def predict(self, batch):
        self.batches.append(np.array(batch))
        return np.array([
            self.distributions.get(round(float(row[0]), 4), self.default) for row in batch
        ])


class MarkerTaggerModel:
    """
    Tags all-ones rows as padding, rows carrying the location marker as
    location and everything else as outside.
    """

    def __init__(self, num_labels: int = 3):
        self.num_labels = num_labels
        self.batches: List[np.ndarray] = []

    def predict(self, batch):
        batch = np.array(batch)
        self.batches.append(batch)
        output = np.full((batch.shape[0], batch.shape[1], self.num_labels), 0.05)
        for b, sequence in enumerate(batch):
            for i, row in enumerate(sequence):
                if np.all(row == 1.0):
                    winner = 2
                elif np.isclose(row[0], LOCATION_MARKER):
                    winner = 1
                else:
                    winner = 0
                output[b, i, winner] = 0.9
        return output


class FakeArtifactSource(ArtifactSourceInterface):
    """In-memory artifact source that counts fetches."""

    def __init__(
        self,
        models: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Dict[str, Any]]] = None,
        delay: float = 0.0
    ):
        self.models = models or {}
        self.metadata = metadata or {}
        self.delay = delay
        self.model_fetches: Dict[str, int] = {}
        self.metadata_fetches: Dict[str, int] = {}

    async def fetch_model(self, name: str, url: str) -> Any:
        self.model_fetches[name] = self.model_fetches.get(name, 0) + 1
        await asyncio.sleep(self.delay)
        if name not in self.models:
            raise ModelUnavailableError(name, f"Could not fetch model '{name}'")
        return self.models[name]

    async def fetch_metadata(self, name: str, url: str) -> Dict[str, Any]:
        self.metadata_fetches[name] = self.metadata_fetches.get(name, 0) + 1
        await asyncio.sleep(self.delay)
        if name not in self.metadata:
            raise MetadataUnavailableError(name, f"Could not load metadata for '{name}'")
        return self.metadata[name]


class FakeWeatherClient(WeatherClientInterface):
    """Weather provider serving canned places."""

    def __init__(self, places: Optional[Dict[str, Dict[str, Any]]] = None, fail: bool = False):
        self.places = places if places is not None else {
            "singapore": {"woeid": 1062617, "location_type": "City", "title": "Singapore", "condition": "Heavy Rain"}
        }
        self.fail = fail
        self.searches: List[str] = []

    async def search(self, location: str) -> List[Dict[str, Any]]:
        self.searches.append(location)
        if self.fail:
            raise LookupFailureError("weather", "unreachable")
        place = self.places.get(location.strip().lower())
        return [place] if place else []

    async def detail(self, candidate_id: Any) -> Dict[str, Any]:
        for place in self.places.values():
            if place["woeid"] == candidate_id:
                return {
                    "location_type": place["location_type"],
                    "title": place["title"],
                    "condition": place["condition"],
                }
        raise LookupFailureError("weather", f"no such place {candidate_id}")


def default_intent_model() -> ScriptedIntentModel:
    return ScriptedIntentModel({
        0.1: [0.95, 0.02, 0.02, 0.01],
        0.2: [0.04, 0.92, 0.02, 0.02],
        0.3: [0.30, 0.30, 0.20, 0.20],
        0.4: [0.97, 0.01, 0.01, 0.01],
    })


def make_sources(names: Sequence[str]) -> Dict[str, ModelSource]:
    return {
        name: ModelSource(model_url=f"memory://{name}/model.joblib", metadata_url=f"memory://{name}/metadata.json")
        for name in names
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        INTENT_MODEL_NAME="intent",
        TAGGER_MODEL_NAME="bidirectional-lstm",
        MODEL_BASE_URL="memory://models",
        WEATHER_MAX_RETRIES=1,
        ARTIFACT_MAX_RETRIES=1
    )


@pytest.fixture
def embedding_backend() -> FakeEmbeddingBackend:
    return FakeEmbeddingBackend()


@pytest.fixture
def intent_model() -> ScriptedIntentModel:
    return default_intent_model()


@pytest.fixture
def tagger_model() -> MarkerTaggerModel:
    return MarkerTaggerModel()


@pytest.fixture
def artifact_source(intent_model, tagger_model) -> FakeArtifactSource:
    return FakeArtifactSource(
        models={"intent": intent_model, "bidirectional-lstm": tagger_model},
        metadata={
            "intent": {"labels": INTENT_LABELS},
            "bidirectional-lstm": {"labels": TAGGER_LABELS, "sequenceLength": SEQUENCE_LENGTH},
        }
    )


@pytest.fixture
def registry(artifact_source, embedding_backend) -> ModelRegistry:
    async def load_embedder():
        return embedding_backend

    return ModelRegistry(
        artifact_source,
        make_sources(["intent", "bidirectional-lstm"]),
        embedder_factory=load_embedder
    )


@pytest.fixture
def embedder(registry) -> EmbeddingService:
    return EmbeddingService(registry, embedding_dim=EMBEDDING_DIM)


@pytest.fixture
def weather_client() -> FakeWeatherClient:
    return FakeWeatherClient()
