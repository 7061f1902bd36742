"""
Process-wide registry of loaded models.

The registry owns every loaded artifact: the embedding encoder, classifier
and tagger models, and their metadata. Each artifact is fetched at most
once per process. Concurrent first-time requests for the same key await a
single in-flight load. Failed loads are reported as ``Unavailable`` and are
not cached, so the next request retries.
"""

from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional
import asyncio

from pydantic import ValidationError

from intentbot.config import ModelSource
from intentbot.domain.interfaces.model_interface import (
    ArtifactSourceInterface,
    EmbeddingBackendInterface
)
from intentbot.domain.models.model_artifacts import (
    Loaded,
    LoadResult,
    ModelHandle,
    ModelMetadata,
    Unavailable
)
from intentbot.utils.logger import get_logger
from intentbot.utils.exceptions import AppException, MetadataUnavailableError, ModelUnavailableError

logger = get_logger(__name__)

EMBEDDER_KEY = "__embedder__"


class ModelRegistry:
    """
    Lazily loads and caches models and metadata by name.
    Uses the Registry pattern with single-flight load coordination.
    """

    def __init__(
        self,
        source: ArtifactSourceInterface,
        model_sources: Dict[str, ModelSource],
        embedder_factory: Optional[Callable[[], Awaitable[EmbeddingBackendInterface]]] = None
    ):
        """
        Initialize an empty model registry.

        Args:
            source: Where artifacts are fetched from
            model_sources: Mapping of model name to artifact locations
            embedder_factory: Coroutine function that loads the embedding encoder
        """
        self._source = source
        self._model_sources = dict(model_sources)
        self._embedder_factory = embedder_factory
        self._cache: Dict[str, Any] = {}
        self._pending: Dict[str, "asyncio.Task[Any]"] = {}
        logger.debug("Initialized ModelRegistry")

    def list_models(self) -> List[str]:
        """List the names of all configured models."""
        return list(self._model_sources.keys())

    def is_loaded(self, key: str) -> bool:
        return key in self._cache

    async def _acquire(self, key: str, loader: Callable[[], Awaitable[Any]]) -> LoadResult:
        """
        Return the cached value for ``key``, loading it at most once.

        Args:
            key: Cache slot
            loader: Coroutine function producing the value

        Returns:
            Loaded(value) on success, Unavailable(reason) otherwise
        """
        if key in self._cache:
            return Loaded(self._cache[key])

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load_into_cache(key, loader))
            self._pending[key] = task

        try:
            # Cancelling one waiter must not cancel the load shared with others
            return Loaded(await asyncio.shield(task))
        except AppException as e:
            logger.warning(f"Could not load '{key}': {e.message}")
            return Unavailable(e.message)

    async def _load_into_cache(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        try:
            value = await loader()
            self._cache[key] = value
            return value
        finally:
            self._pending.pop(key, None)

    def _unknown(self, name: str) -> Unavailable:
        logger.warning(f"No artifact source configured for model '{name}'")
        return Unavailable(f"Unknown model '{name}'")

    async def load(self, name: str) -> LoadResult:
        """
        Load a classifier or tagger model by name.

        Args:
            name: Model name

        Returns:
            Loaded(ModelHandle) or Unavailable(reason)
        """
        model_source = self._model_sources.get(name)
        if model_source is None:
            return self._unknown(name)

        async def loader() -> ModelHandle:
            model = await self._source.fetch_model(name, model_source.model_url)
            try:
                return ModelHandle(name, model)
            except TypeError as e:
                raise ModelUnavailableError(name, str(e)) from e

        return await self._acquire(f"model:{name}", loader)

    async def load_metadata(self, name: str) -> LoadResult:
        """
        Load the metadata of a model by name.

        Args:
            name: Model name

        Returns:
            Loaded(ModelMetadata) or Unavailable(reason)
        """
        model_source = self._model_sources.get(name)
        if model_source is None:
            return self._unknown(name)

        async def loader() -> ModelMetadata:
            document = await self._source.fetch_metadata(name, model_source.metadata_url)
            try:
                return ModelMetadata.model_validate(document)
            except ValidationError as e:
                raise MetadataUnavailableError(name, f"Invalid metadata for '{name}': {str(e)}") from e

        return await self._acquire(f"metadata:{name}", loader)

    async def load_embedding_model(self) -> LoadResult:
        """
        Load the sentence encoder.

        Returns:
            Loaded(EmbeddingBackendInterface) or Unavailable(reason)
        """
        if self._embedder_factory is None:
            return Unavailable("No embedding model configured")
        return await self._acquire(EMBEDDER_KEY, self._embedder_factory)

    async def load_all(self, names: Iterable[str]) -> Dict[str, LoadResult]:
        """
        Load a batch of models and their metadata concurrently.

        Returns once every attempt has settled.

        Args:
            names: Model names

        Returns:
            Mapping of model name to the model's load result; a model whose
            metadata is unavailable is reported as unavailable
        """
        names = list(names)
        model_results, metadata_results = await asyncio.gather(
            asyncio.gather(*(self.load(name) for name in names)),
            asyncio.gather(*(self.load_metadata(name) for name in names))
        )

        results: Dict[str, LoadResult] = {}
        for name, model_result, metadata_result in zip(names, model_results, metadata_results):
            if not metadata_result.is_available:
                results[name] = metadata_result
            else:
                results[name] = model_result
        loaded = [name for name, result in results.items() if result.is_available]
        logger.info(f"Loaded {len(loaded)} of {len(names)} models: {', '.join(loaded) or 'none'}")
        return results
