"""
Abstract interfaces implemented by the infrastructure layer and the intent
handlers.
"""

from intentbot.domain.interfaces.handler_interface import IntentHandler
from intentbot.domain.interfaces.model_interface import (
    ArtifactSourceInterface,
    EmbeddingBackendInterface,
    WeatherClientInterface
)

__all__ = [
    "IntentHandler",
    "ArtifactSourceInterface",
    "EmbeddingBackendInterface",
    "WeatherClientInterface",
]
