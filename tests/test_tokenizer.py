import pytest

from intentbot.infrastructure.ai.tagging.sequence_tagger import tokenize_sentence


class TestTokenizeSentence:

    def test_splits_at_word_boundaries(self):
        assert tokenize_sentence("what's the weather") == ["what", "'", "s", "the", "weather"]

    def test_is_deterministic(self):
        sentence = "Will it rain in New York, tomorrow?"
        assert tokenize_sentence(sentence) == tokenize_sentence(sentence)

    def test_no_empty_tokens(self):
        tokens = tokenize_sentence("  hello ,  world!!  ")
        assert tokens == ["hello", ",", "world", "!!"]
        assert all(tokens)

    @pytest.mark.parametrize("sentence", ["", "   ", "\t\n"])
    def test_blank_input_has_no_tokens(self, sentence):
        assert tokenize_sentence(sentence) == []

    def test_punctuation_runs_stay_together(self):
        assert tokenize_sentence("wait... what?!") == ["wait", "...", "what", "?!"]

    def test_digits_and_underscores_are_word_characters(self):
        assert tokenize_sentence("room_42 at 9am") == ["room_42", "at", "9am"]

    def test_non_ascii_letters_are_not_word_characters(self):
        assert tokenize_sentence("café") == ["caf", "é"]
