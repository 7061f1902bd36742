from typing import List, Optional

import numpy as np

from intentbot.domain.models.tagging import TaggingResult
from intentbot.utils.logger import get_logger


def collect_slot_tokens(result: TaggingResult, slot_index: int) -> List[str]:
    """
    Collect the tokens whose highest scoring label is ``slot_index``.

    Only tokens taken from the sentence are considered; the display-only
    padding entry never contributes to a slot.

    Args:
        result: Output of the sequence tagger
        slot_index: Label index marking membership of the slot

    Returns:
        Slot tokens in sentence order
    """
    return [
        token for token, scores in result.real_tokens()
        if scores and int(np.argmax(scores)) == slot_index
    ]


class SlotExtractor:
    """
    Extracts a named slot (a location by default) from a sentence by
    running the sequence tagger and reading the winning label per token.
    """

    def __init__(
        self,
        tagger,
        model_name: str,
        slot_label_index: int = 1,
        slot_label: Optional[str] = None
    ):
        """
        Initialize the slot extractor.

        Args:
            tagger: SequenceTagger to run
            model_name: Tagging model to use
            slot_label_index: Label index marking the slot
            slot_label: Label name marking the slot; when set and present in
                the model's labels it takes precedence over the index
        """
        self.logger = get_logger(__name__)
        self.tagger = tagger
        self.model_name = model_name
        self.slot_label_index = slot_label_index
        self.slot_label = slot_label

    def resolve_slot_index(self, result: TaggingResult) -> int:
        if self.slot_label and self.slot_label in result.labels:
            return result.labels.index(self.slot_label)
        return self.slot_label_index

    async def extract(self, sentence: Optional[str]) -> str:
        """
        Extract the slot value from a sentence.

        Args:
            sentence: The user's sentence

        Returns:
            Slot tokens joined by single spaces, or an empty string when no
            token belongs to the slot or tagging is unavailable
        """
        result = await self.tagger.tag(sentence, self.model_name)
        if result is None:
            return ""

        tokens = collect_slot_tokens(result, self.resolve_slot_index(result))
        value = " ".join(tokens)
        self.logger.debug(f"Extracted slot value: {value!r}")
        return value
