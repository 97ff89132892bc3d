import pytest

from stylesync.profile import StyleProfile, allows_contractions
from stylesync.text.fingerprint import (
    SampleStyle,
    analyze_sample,
    calculate_formality,
    extract_style,
)

CASUAL_SAMPLE = (
    "I don't really plan my weekends. However, I always end up at the lake. "
    "We swim, we eat, and we're home by dark. However, last week it rained all day."
)

FORMAL_SAMPLE = (
    "The committee reviewed the proposal in detail. Therefore, the budget was approved. "
    "Implementation will commence in the third quarter of the fiscal year."
)


class TestAnalyzeSample:
    def test_blank_sample_gives_default_style(self):
        assert analyze_sample("   ") == SampleStyle()

    def test_contractions_detected(self):
        assert analyze_sample(CASUAL_SAMPLE).uses_contractions is True
        assert analyze_sample(FORMAL_SAMPLE).uses_contractions is False

    def test_preferred_transitions_ranked_by_count(self):
        style = analyze_sample("However, it rained. However, we left. Still, it was fun.")
        assert style.preferred_transitions == ["However", "Still"]
        assert style.transition_start_ratio == pytest.approx(1.0)

    def test_personal_voice(self):
        assert analyze_sample(CASUAL_SAMPLE).personal_voice == "first-person"

    def test_question_ratio(self):
        style = analyze_sample("Is it late? It is. Should we go?")
        assert style.question_ratio == pytest.approx(2 / 3)

    def test_sample_count_is_one(self):
        assert analyze_sample(FORMAL_SAMPLE).sample_count == 1


class TestExtractStyle:
    def test_no_samples(self):
        assert extract_style([]).sample_count == 0
        assert extract_style(["", "  "]) == SampleStyle()

    def test_single_sample_matches_analysis(self):
        assert extract_style([FORMAL_SAMPLE]) == analyze_sample(FORMAL_SAMPLE)

    def test_samples_weighted_equally(self):
        short = "Short one. Tiny two."
        long = "This sentence is considerably longer than the sentences that came before it."
        combined = extract_style([short, long])

        expected = (analyze_sample(short).avg_sentence_length + analyze_sample(long).avg_sentence_length) / 2
        assert combined.avg_sentence_length == pytest.approx(expected)
        concatenated = analyze_sample(short + " " + long).avg_sentence_length
        assert combined.avg_sentence_length != pytest.approx(concatenated)
        assert combined.sample_count == 2

    def test_formality_weighted_equally(self):
        long_formal = " ".join([FORMAL_SAMPLE] * 10)
        combined = extract_style([CASUAL_SAMPLE, long_formal])
        expected = (analyze_sample(CASUAL_SAMPLE).formality_score + analyze_sample(long_formal).formality_score) / 2
        assert combined.formality_score == pytest.approx(expected)

    def test_contraction_majority(self):
        assert extract_style([CASUAL_SAMPLE, CASUAL_SAMPLE, FORMAL_SAMPLE]).uses_contractions is True
        assert extract_style([CASUAL_SAMPLE, FORMAL_SAMPLE, FORMAL_SAMPLE]).uses_contractions is False

    def test_blank_samples_skipped(self):
        assert extract_style(["", FORMAL_SAMPLE]) == analyze_sample(FORMAL_SAMPLE)

    def test_dict_round_trip(self):
        style = extract_style([CASUAL_SAMPLE, FORMAL_SAMPLE])
        assert SampleStyle.from_dict(style.to_dict()) == style

    def test_formality_is_bounded(self):
        for text in (CASUAL_SAMPLE, FORMAL_SAMPLE, "lol"):
            assert 0.0 <= calculate_formality(text) <= 1.0
        assert calculate_formality(FORMAL_SAMPLE) > calculate_formality(CASUAL_SAMPLE)


class TestStyleProfile:
    def test_slider_out_of_range(self):
        with pytest.raises(ValueError):
            StyleProfile(formality=1.5)
        with pytest.raises(ValueError):
            StyleProfile(directness=-0.1)

    def test_lexicon_is_trimmed(self):
        assert StyleProfile(custom_lexicon=[" grit ", "", "  "]).custom_lexicon == ["grit"]

    def test_fingerprint_extracted_from_samples(self):
        profile = StyleProfile(samples=[FORMAL_SAMPLE])
        assert profile.fingerprint == analyze_sample(FORMAL_SAMPLE)
        assert StyleProfile().fingerprint is None

    def test_with_samples_re_extracts(self):
        profile = StyleProfile(samples=[FORMAL_SAMPLE])
        updated = profile.with_samples([CASUAL_SAMPLE])
        assert updated.fingerprint.uses_contractions is True
        assert updated.id == profile.id
        assert profile.fingerprint.uses_contractions is False

    def test_allows_contractions(self):
        assert allows_contractions(None) is True
        assert allows_contractions(StyleProfile(formality=0.5)) is True
        assert allows_contractions(StyleProfile(formality=0.9)) is False
        # the fingerprint overrides the slider
        assert allows_contractions(StyleProfile(formality=0.9, samples=[CASUAL_SAMPLE])) is True

