from dataclasses import dataclass
from typing import List, Sequence, Tuple

Distribution = List[float]


@dataclass(frozen=True)
class IntentPrediction:
    """
    Immutable value object for the winning intent of one distribution.
    """
    label: str
    confidence: float
    index: int

    @classmethod
    def from_distribution(cls, distribution: Sequence[float], labels: Sequence[str]) -> "IntentPrediction":
        """
        Pick the highest scoring label. The first occurrence wins on ties.

        Args:
            distribution: Scores, one per label
            labels: Label set of the model that produced the scores

        Returns:
            The winning prediction
        """
        if not distribution:
            raise ValueError("Cannot select an intent from an empty distribution")
        if len(distribution) > len(labels):
            raise ValueError(
                f"Distribution has {len(distribution)} scores but only {len(labels)} labels"
            )
        max_score = max(distribution)
        max_index = list(distribution).index(max_score)
        return cls(label=labels[max_index], confidence=float(max_score), index=max_index)

    def meets(self, threshold: float) -> bool:
        return self.confidence >= threshold


def rank_intents(distribution: Sequence[float], labels: Sequence[str], n: int = 3) -> List[Tuple[str, float]]:
    """Return the top ``n`` (label, score) pairs, highest first."""
    pairs = [(label, float(score)) for label, score in zip(labels, distribution)]
    return sorted(pairs, key=lambda x: x[1], reverse=True)[:n]
