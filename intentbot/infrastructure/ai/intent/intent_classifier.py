from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
from sklearn.metrics import classification_report, accuracy_score

from intentbot.domain.models.intent import Distribution, IntentPrediction, rank_intents
from intentbot.domain.models.model_artifacts import Loaded, ModelHandle, ModelMetadata
from intentbot.infrastructure.ai.inference_scope import inference_scope
from intentbot.utils.logger import get_logger
from intentbot.utils.exceptions import IntentClassificationError


def format_preview(labels: Sequence[str], scores: Sequence[float]) -> str:
    """Render a label -> score table as two aligned rows."""
    cells = [(label, f"{score:.4f}") for label, score in zip(labels, scores)]
    widths = [max(len(label), len(score)) for label, score in cells]
    header = " | ".join(label.ljust(width) for (label, _), width in zip(cells, widths))
    values = " | ".join(score.ljust(width) for (_, score), width in zip(cells, widths))
    return f"{header}\n{values}"


class IntentClassifier:
    """
    Classifies user intent from sentence embeddings.

    The classification model and its label set are borrowed from the model
    registry for the duration of each call.
    """

    def __init__(self, registry, embedder, model_name: str = "intent"):
        """
        Initialize the intent classifier.

        Args:
            registry: ModelRegistry owning the intent model
            embedder: EmbeddingService producing sentence embeddings
            model_name: Name of the intent model in the registry
        """
        self.logger = get_logger(__name__)
        self.registry = registry
        self.embedder = embedder
        self.model_name = model_name

    async def _model(self) -> Tuple[ModelHandle, ModelMetadata]:
        model_result, metadata_result = await self._load()
        if not isinstance(model_result, Loaded):
            raise IntentClassificationError(
                f"Intent model unavailable: {model_result.reason}",
                details={"model_name": self.model_name}
            )
        if not isinstance(metadata_result, Loaded):
            raise IntentClassificationError(
                f"Intent metadata unavailable: {metadata_result.reason}",
                details={"model_name": self.model_name}
            )
        return model_result.value, metadata_result.value

    async def _load(self):
        model_result = await self.registry.load(self.model_name)
        metadata_result = await self.registry.load_metadata(self.model_name)
        return model_result, metadata_result

    async def get_labels(self) -> Tuple[str, ...]:
        """
        Get the label set of the intent model.

        Raises:
            IntentClassificationError: If the metadata is unavailable
        """
        result = await self.registry.load_metadata(self.model_name)
        if not isinstance(result, Loaded):
            raise IntentClassificationError(
                f"Intent metadata unavailable: {result.reason}",
                details={"model_name": self.model_name}
            )
        return result.value.labels

    async def classify(self, sentences: Sequence[str]) -> Distribution:
        """
        Classify the intent of an utterance.

        Args:
            sentences: One-element sequence holding the utterance

        Returns:
            Scores for the first sentence, one per intent label, exactly as
            the model produced them

        Raises:
            IntentClassificationError: If the intent model or its metadata
                is unavailable
            ModelUnavailableError: If the sentence encoder is unavailable
        """
        sentences = list(sentences)
        if not sentences:
            raise IntentClassificationError("Nothing to classify")

        self.logger.debug(f"Classifying intent for text: {sentences[0][:50]}...")

        activations = await self.embedder.embed(sentences)
        model, metadata = await self._model()

        with inference_scope("intent classification") as scope:
            scope.track(activations)
            prediction = scope.track(np.asarray(model.predict(activations)))
            distribution = scope.keep(prediction[0])

        self.logger.debug(
            "Intent scores:\n" + format_preview(metadata.labels, distribution),
            extra={"data": {"intent_scores": dict(zip(metadata.labels, distribution))}}
        )
        return distribution

    async def predict(self, sentence: str) -> IntentPrediction:
        """Classify a sentence and pick its highest scoring intent."""
        distribution = await self.classify([sentence])
        labels = await self.get_labels()
        return IntentPrediction.from_distribution(distribution, labels)

    async def get_top_intents(self, sentence: str, n: int = 3) -> List[Dict[str, Any]]:
        """
        Get the top N intent classifications.

        Args:
            sentence: Input text to classify
            n: Number of top intents to return

        Returns:
            List of dictionaries containing intent name and confidence
        """
        distribution = await self.classify([sentence])
        labels = await self.get_labels()
        return [
            {"intent": intent, "confidence": confidence}
            for intent, confidence in rank_intents(distribution, labels, n)
        ]

    async def evaluate(self, texts: List[str], labels: List[str]) -> Dict[str, Any]:
        """
        Evaluate model performance on a labelled sample.

        Args:
            texts: List of test text samples
            labels: List of corresponding intent labels

        Returns:
            Dictionary containing evaluation metrics
        """
        if len(texts) != len(labels):
            raise ValueError("Texts and labels must have the same length")
        if not texts:
            raise ValueError("Nothing to evaluate")

        y_pred = [(await self.predict(text)).label for text in texts]

        accuracy = accuracy_score(labels, y_pred)
        report = classification_report(labels, y_pred, output_dict=True, zero_division=0)

        # Extract metrics by class
        class_metrics = {}
        for label in set(labels):
            if label in report:
                class_metrics[label] = {
                    "precision": report[label]["precision"],
                    "recall": report[label]["recall"],
                    "f1-score": report[label]["f1-score"],
                    "support": report[label]["support"]
                }

        return {
            "accuracy": float(accuracy),
            "class_metrics": class_metrics,
            "num_samples": len(texts),
            "macro_avg": report["macro avg"],
            "weighted_avg": report["weighted avg"]
        }
