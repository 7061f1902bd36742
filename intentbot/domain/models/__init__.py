"""
Domain models for the intent bot.

Value objects describing model metadata, load results, intent predictions
and tagging results.
"""

from intentbot.domain.models.intent import Distribution, IntentPrediction
from intentbot.domain.models.model_artifacts import (
    Loaded,
    LoadResult,
    ModelHandle,
    ModelMetadata,
    Unavailable
)
from intentbot.domain.models.tagging import TaggingResult

__all__ = [
    "Distribution",
    "IntentPrediction",
    "Loaded",
    "LoadResult",
    "ModelHandle",
    "ModelMetadata",
    "Unavailable",
    "TaggingResult",
]
