from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

import numpy as np


class EmbeddingBackendInterface(ABC):
    """
    Abstract base class for sentence encoders.
    Following the Strategy pattern to allow different encoder implementations.
    """

    @abstractmethod
    async def embed(self, texts: Sequence[str]) -> np.ndarray:
        """
        Encode each input string into one fixed-length vector.

        Args:
            texts: Strings to encode

        Returns:
            Array of shape (len(texts), embedding_dim), in input order
        """
        pass


class ArtifactSourceInterface(ABC):
    """
    Abstract base class for the place trained models are fetched from.
    """

    @abstractmethod
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
        pass

    @abstractmethod
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
        pass


class WeatherClientInterface(ABC):
    """
    Abstract base class for weather data providers.
    """

    @abstractmethod
    async def search(self, location: str) -> List[Dict[str, Any]]:
        """
        Find candidate places matching free text.

        Returns:
            Candidate places, possibly empty

        Raises:
            LookupFailureError: If the provider cannot be reached
        """
        pass

    @abstractmethod
    async def detail(self, candidate_id: Any) -> Dict[str, Any]:
        """
        Fetch current conditions for a candidate place.

        Returns:
            Dictionary with location_type, title and condition keys

        Raises:
            LookupFailureError: If the provider cannot be reached
        """
        pass
