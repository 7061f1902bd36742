from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class TaggingResult:
    """
    Output of one sequence-tagging request.

    ``tokens`` and ``token_scores`` always have the same length. When the
    sentence was shorter than the model's sequence length, both carry one
    trailing display-only entry for the padding label; ``token_count`` is
    the number of real tokens. ``token_embeddings`` holds the real token
    embeddings plus one all-ones filler row and is for rendering only.
    """
    tokens: List[str]
    token_scores: List[List[float]]
    token_embeddings: List[List[float]]
    token_count: int
    labels: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_padding_token(self) -> bool:
        return len(self.tokens) > self.token_count

    def real_tokens(self) -> List[Tuple[str, List[float]]]:
        """Pairs of (token, scores) for the tokens taken from the sentence."""
        return list(zip(self.tokens[:self.token_count], self.token_scores[:self.token_count]))

    def to_dict(self) -> Dict[str, Any]:
        """Shape handed to the presentation layer."""
        return {
            "tokenized": list(self.tokens),
            "tokenScores": [list(scores) for scores in self.token_scores],
            "tokenEmbeddings": [list(row) for row in self.token_embeddings],
        }
