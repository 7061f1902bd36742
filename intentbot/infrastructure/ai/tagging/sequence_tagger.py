"""
Token-level sequence tagging.

Sentences are split at every boundary between word and non-word
characters, the same rule the tagging models were trained with. Each token
is embedded, the sequence is padded with all-ones vectors to the model's
fixed sequence length, and the model assigns a label distribution to every
position.
"""

from typing import List, Optional
import re

import numpy as np

from intentbot.domain.models.model_artifacts import Loaded
from intentbot.domain.models.tagging import TaggingResult
from intentbot.infrastructure.ai.inference_scope import inference_scope
from intentbot.utils.logger import get_logger

# ASCII word boundaries, matching the boundary rule the training data used
WORD_BOUNDARY = re.compile(r"\b", re.ASCII)


def tokenize_sentence(sentence: str) -> List[str]:
    """
    Split a sentence into tokens.

    Args:
        sentence: Input text

    Returns:
        Non-empty, whitespace-trimmed pieces between word boundaries
    """
    pieces = (piece.strip() for piece in WORD_BOUNDARY.split(sentence))
    return [piece for piece in pieces if piece]


class SequenceTagger:
    """
    Assigns a label distribution to each token of a sentence.
    """

    def __init__(self, registry, embedder, embedding_dim: int = 512, padding_label_index: int = 2):
        """
        Initialize the sequence tagger.

        Args:
            registry: ModelRegistry owning the tagging models
            embedder: EmbeddingService producing token embeddings
            embedding_dim: Length of each token embedding
            padding_label_index: Label shown for the padding position
        """
        self.logger = get_logger(__name__)
        self.registry = registry
        self.embedder = embedder
        self.embedding_dim = embedding_dim
        self.padding_label_index = padding_label_index

    async def tag(self, sentence: Optional[str], model_name: str) -> Optional[TaggingResult]:
        """
        Tokenize a sentence and tag the tokens.

        Args:
            sentence: Sentence to tag
            model_name: Name of the tagging model in the registry

        Returns:
            Tokens, per-token scores and display embeddings, or None if the
            sentence is empty or the model or its metadata is unavailable
        """
        if not sentence:
            return None

        metadata_result = await self.registry.load_metadata(model_name)
        if not isinstance(metadata_result, Loaded):
            self.logger.warning(f"Tagging skipped, metadata for '{model_name}' unavailable: {metadata_result.reason}")
            return None
        metadata = metadata_result.value
        if metadata.sequence_length is None:
            self.logger.warning(f"Tagging skipped, metadata for '{model_name}' has no sequenceLength")
            return None
        sequence_length = metadata.sequence_length

        tokens = tokenize_sentence(sentence)
        if not tokens:
            return None
        if len(tokens) > sequence_length:
            self.logger.warning(
                f"Input sentence has more tokens than max allowed tokens "
                f"({sequence_length}). Extra tokens will be dropped."
            )
        tokens = tokens[:sequence_length]
        token_count = len(tokens)

        activations = await self.embedder.embed(tokens)

        model_result = await self.registry.load(model_name)
        if not isinstance(model_result, Loaded):
            self.logger.warning(f"Tagging skipped, model '{model_name}' unavailable: {model_result.reason}")
            return None
        model = model_result.value

        with inference_scope(f"tagging with {model_name}") as scope:
            scope.track(activations)
            # Input shape is [1, sequence_length, embedding_dim]
            padding = scope.track(np.ones((sequence_length - token_count, self.embedding_dim), dtype=np.float32))
            padded = scope.track(np.concatenate([activations, padding], axis=0))
            batched = scope.track(np.expand_dims(padded, axis=0))
            prediction = scope.track(np.asarray(model.predict(batched)))
            token_scores = scope.keep(prediction[0])

            display_activations = scope.track(
                np.concatenate([activations, np.ones((1, self.embedding_dim), dtype=np.float32)], axis=0)
            )
            token_embeddings = scope.keep(display_activations)

        # Show the padding position in the breakdown as one extra token
        if token_count < sequence_length and self.padding_label_index < len(metadata.labels):
            tokens.append(metadata.label_for(self.padding_label_index))
        token_scores = token_scores[:len(tokens)]

        return TaggingResult(
            tokens=tokens,
            token_scores=token_scores,
            token_embeddings=token_embeddings,
            token_count=token_count,
            labels=metadata.labels
        )
