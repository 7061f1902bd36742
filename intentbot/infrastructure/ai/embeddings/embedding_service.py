from typing import Dict, Optional, Sequence
import asyncio

import numpy as np

from intentbot.domain.interfaces.model_interface import EmbeddingBackendInterface
from intentbot.domain.models.model_artifacts import Loaded
from intentbot.utils.logger import get_logger
from intentbot.utils.exceptions import ModelUnavailableError

EMBEDDER_NAME = "sentence-encoder"


class SentenceTransformerBackend(EmbeddingBackendInterface):
    """
    Sentence encoder backed by a sentence-transformers model.
    """

    def __init__(self, client, batch_size: int = 32):
        """
        Args:
            client: A loaded ``SentenceTransformer`` instance
            batch_size: Encoding batch size
        """
        self.client = client
        self.batch_size = batch_size

    @classmethod
    async def load(cls, model_name: str, batch_size: int = 32) -> "SentenceTransformerBackend":
        """
        Load the encoder weights off the event loop.

        Raises:
            ModelUnavailableError: If the model cannot be loaded
        """
        logger = get_logger(__name__)
        logger.info(f"Loading sentence encoder: {model_name}")
        try:
            from sentence_transformers import SentenceTransformer
            client = await asyncio.to_thread(SentenceTransformer, model_name)
        except Exception as e:
            raise ModelUnavailableError(
                EMBEDDER_NAME,
                f"Could not load sentence encoder '{model_name}': {str(e)}"
            ) from e
        return cls(client, batch_size=batch_size)

    async def embed(self, texts: Sequence[str]) -> np.ndarray:
        embeddings = await asyncio.to_thread(
            self.client.encode,
            list(texts),
            batch_size=self.batch_size,
            convert_to_numpy=True,
            show_progress_bar=False
        )
        return np.asarray(embeddings, dtype=np.float32)


class EmbeddingService:
    """
    Maps text to fixed-dimension vectors.

    The encoder is borrowed from the model registry on every call, so it is
    loaded lazily, exactly once, on first use.
    """

    def __init__(self, registry, embedding_dim: int = 512, use_cache: bool = False):
        """
        Initialize the embedding service.

        Args:
            registry: ModelRegistry owning the encoder
            embedding_dim: Expected vector length
            use_cache: Keep an in-memory cache of embeddings per string
        """
        self.logger = get_logger(__name__)
        self.registry = registry
        self.embedding_dim = embedding_dim
        self.use_cache = use_cache
        self.cache: Dict[str, np.ndarray] = {}

    async def _backend(self) -> EmbeddingBackendInterface:
        result = await self.registry.load_embedding_model()
        if not isinstance(result, Loaded):
            raise ModelUnavailableError(EMBEDDER_NAME, f"Sentence encoder unavailable: {result.reason}")
        return result.value

    async def embed(self, inputs: Sequence[str]) -> np.ndarray:
        """
        Create one embedding per input string.

        Args:
            inputs: Ordered strings to embed

        Returns:
            Array of shape (len(inputs), embedding_dim), in input order

        Raises:
            ModelUnavailableError: If the encoder cannot be loaded or
                produces vectors of the wrong size
        """
        inputs = list(inputs)
        if not inputs:
            return np.empty((0, self.embedding_dim), dtype=np.float32)

        backend = await self._backend()

        if self.use_cache:
            texts_to_embed = list(dict.fromkeys(text for text in inputs if text not in self.cache))
        else:
            texts_to_embed = inputs

        new_embeddings: Optional[np.ndarray] = None
        if texts_to_embed:
            new_embeddings = np.asarray(await backend.embed(texts_to_embed), dtype=np.float32)
            if new_embeddings.ndim != 2 or new_embeddings.shape != (len(texts_to_embed), self.embedding_dim):
                raise ModelUnavailableError(
                    EMBEDDER_NAME,
                    f"Sentence encoder returned shape {new_embeddings.shape}, "
                    f"expected ({len(texts_to_embed)}, {self.embedding_dim})"
                )

        if not self.use_cache:
            return new_embeddings

        for text, embedding in zip(texts_to_embed, new_embeddings if new_embeddings is not None else []):
            self.cache[text] = embedding
        if texts_to_embed:
            self.logger.debug(f"Embedding cache holds {len(self.cache)} entries")

        return np.stack([self.cache[text] for text in inputs])

    async def embed_text(self, text: str) -> np.ndarray:
        """Embed a single string."""
        return (await self.embed([text]))[0]
