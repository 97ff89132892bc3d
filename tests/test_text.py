import pytest

from stylesync.text.analyzer import (
    TextAnalyzer,
    lexical_change_ratio,
    mean,
    split_sentences,
    std_dev,
    tokenize,
)
from stylesync.text.frequency import build_frequency_map, build_sample_frequency_map, pick_preferred
from stylesync.text.pov import detect_pov


class TestAnalyzer:
    def test_split_sentences(self):
        assert split_sentences("One.  Two!\nThree?") == ["One.", "Two!", "Three?"]

    def test_split_sentences_blank(self):
        assert split_sentences("   \n ") == []

    def test_tokenize_lowercases_and_keeps_apostrophes(self):
        assert tokenize("Don't STOP 42 now") == ["don't", "stop", "now"]

    def test_mean_and_std_dev(self):
        assert mean([]) == 0.0
        assert std_dev([]) == 0.0
        assert std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_lexical_change_ratio(self):
        assert lexical_change_ratio("a b c d", "A x c") == pytest.approx(0.5)
        assert lexical_change_ratio("", "") == 0.0

    def test_empty_text_statistics_are_zero(self):
        analyzer = TextAnalyzer("")
        assert analyzer.sentence_count == 0
        assert analyzer.avg_sentence_length == 0.0
        assert analyzer.sentence_length_std == 0.0

    def test_sentence_lengths_are_characters(self):
        analyzer = TextAnalyzer("Hi there. Go.")
        assert analyzer.sentence_lengths == [9, 3]


class TestFrequencyMap:
    def test_counts_lowercase_tokens(self):
        assert build_frequency_map("The cat and the Hat.") == {"the": 2, "cat": 1, "and": 1, "hat": 1}

    def test_blank_sample(self):
        assert build_frequency_map("") == {}
        assert build_frequency_map("  \n") == {}

    def test_numbers_are_separators(self):
        assert build_frequency_map("42 apples, don't") == {"apples": 1, "don't": 1}

    def test_sample_map_weights_samples_equally(self):
        short = "The large dog ran to the large red barn."
        long = "We walked the long road past fields and farms. " * 40 + "The substantial house had a substantial yard."
        combined = build_sample_frequency_map([short, long])
        assert combined["large"] > 10 * combined["substantial"]
        assert pick_preferred(["big", "large", "substantial"], combined) == "large"

    def test_sample_map_skips_blank_samples(self):
        assert build_sample_frequency_map(["", "  "]) == {}
        assert build_sample_frequency_map(["", "go go stop"]) == pytest.approx({"go": 2 / 3, "stop": 1 / 3})

    def test_pick_preferred_highest_count(self):
        assert pick_preferred(["big", "large"], {"large": 3, "big": 1}) == "large"

    def test_pick_preferred_first_on_tie(self):
        assert pick_preferred(["big", "large"], {"large": 2, "big": 2}) == "big"

    def test_pick_preferred_none_when_unseen(self):
        assert pick_preferred(["big", "large"], {"small": 5}) is None


class TestDetectPov:
    def test_first_person(self):
        result = detect_pov("I think we should go, my friend.")
        assert result.pov == "first"
        assert result.label == "first-person"

    def test_second_person(self):
        assert detect_pov("You should check your settings.").pov == "second"

    def test_third_person(self):
        assert detect_pov("She said they would call her back.").pov == "third"

    def test_mixed_without_clear_winner(self):
        assert detect_pov("I told you.").pov == "mixed"

    def test_unknown_without_pronouns(self):
        result = detect_pov("The report is due.")
        assert result.pov == "unknown"
        assert result.label == "original"
        assert result.to_dict()["counts"] == {"first": 0, "second": 0, "third": 0}
