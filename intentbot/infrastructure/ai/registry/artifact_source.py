from typing import Any, Dict, Optional
from urllib.parse import urlparse
import asyncio
import io
import json

import httpx
import joblib
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential, retry_if_exception_type

from intentbot.domain.interfaces.model_interface import ArtifactSourceInterface
from intentbot.utils.logger import get_logger
from intentbot.utils.exceptions import ModelUnavailableError, MetadataUnavailableError


class HttpArtifactSource(ArtifactSourceInterface):
    """
    Fetches model artifacts over HTTP or from the local filesystem.

    Model artifacts are joblib-serialized objects exposing ``predict`` or
    ``predict_proba``; metadata is a JSON document. URLs without a scheme
    or with a ``file://`` scheme are read from disk.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the artifact source.

        Args:
            timeout: Per-request timeout in seconds
            max_retries: Attempts made for transport errors before giving up
            transport: Optional httpx transport, used to substitute the network
        """
        self.logger = get_logger(__name__)
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self._transport = transport

    @staticmethod
    def _local_path(url: str) -> Optional[str]:
        parsed = urlparse(url)
        if parsed.scheme == "file":
            return parsed.path
        if not parsed.scheme:
            return url
        return None

    async def _download(self, url: str) -> bytes:
        """Download a URL, retrying transport errors with exponential back-off."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True
        ):
            with attempt:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    response = await client.get(url)
                    response.raise_for_status()
                    return response.content

    async def _read(self, url: str) -> bytes:
        path = self._local_path(url)
        if path is not None:
            with open(path, "rb") as f:
                return f.read()
        return await self._download(url)

    async def fetch_model(self, name: str, url: str) -> Any:
        """
        Fetch and deserialize a model artifact.

        Args:
            name: Model name, used for error reporting
            url: Artifact location

        Returns:
            The deserialized model object

        Raises:
            ModelUnavailableError: If the artifact cannot be fetched or loaded
        """
        self.logger.debug(f"Fetching model '{name}' from {url}")
        try:
            content = await self._read(url)
        except (httpx.HTTPError, OSError) as e:
            raise ModelUnavailableError(
                name,
                f"Could not fetch model '{name}': {str(e)}",
                details={"url": url}
            ) from e

        try:
            model = await asyncio.to_thread(joblib.load, io.BytesIO(content))
        except Exception as e:
            raise ModelUnavailableError(
                name,
                f"Could not deserialize model '{name}': {str(e)}",
                details={"url": url}
            ) from e

        self.logger.info(f"Loaded model '{name}' from {url}")
        return model

    async def fetch_metadata(self, name: str, url: str) -> Dict[str, Any]:
        """
        Fetch the metadata JSON published with a model.

        Args:
            name: Model name, used for error reporting
            url: Metadata location

        Returns:
            The decoded JSON document

        Raises:
            MetadataUnavailableError: If the metadata cannot be fetched or parsed
        """
        self.logger.debug(f"Fetching metadata for '{name}' from {url}")
        try:
            content = await self._read(url)
            document = json.loads(content)
        except (httpx.HTTPError, OSError, ValueError) as e:
            raise MetadataUnavailableError(
                name,
                f"Could not load metadata for '{name}': {str(e)}",
                details={"url": url}
            ) from e

        if not isinstance(document, dict):
            raise MetadataUnavailableError(
                name,
                f"Metadata for '{name}' is not a JSON object",
                details={"url": url}
            )
        return document
