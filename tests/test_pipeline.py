import logging
import random
import re

import pytest

from stylesync import paraphrase
from stylesync.profile import RewriteOptions, StyleProfile
from stylesync.rewrite.pipeline import finalize, rewrite
from stylesync.rewrite.rules import find_banned_phrases
from stylesync.text.analyzer import split_sentences
from stylesync.text.diagnosis import verify_style_match
from stylesync.text.fingerprint import CONTRACTION_PATTERN

SLOPPY_TEXT = (
    "Certainly! In today's fast-paced world, it is important to note that this groundbreaking "
    "framework plays a pivotal role in modern research. It seamlessly leverages cutting-edge tools "
    "to delve into the intricate tapestry of data; moreover, it is a testament to what a truly "
    "dedicated team can do when they embark on a very ambitious project — and it shows. "
    "In conclusion, the results shed light on questions that remain open."
)


class TestFinalize:
    def test_empty(self):
        result = finalize("")
        assert result.text == ""
        assert result.actions == []

    def test_clean_text_unchanged(self, flood_report):
        assert finalize(flood_report, rng=random.Random(4)).text == flood_report

    def test_no_banned_phrase_survives(self):
        for seed in range(5):
            text = finalize(SLOPPY_TEXT, rng=random.Random(seed)).text
            assert find_banned_phrases(text) == []
            assert "—" not in text
            assert ";" not in text

    def test_sentence_cap(self):
        long_text = " ".join(["The long winding road went on past the farm and the mill"] * 6) + "."
        text = finalize(long_text, rng=random.Random(0)).text
        assert all(len(s.split()) <= 22 for s in split_sentences(text))

    def test_second_pass_is_clean(self):
        once = finalize(SLOPPY_TEXT, rng=random.Random(3)).text
        twice = finalize(once, rng=random.Random(3)).text
        assert find_banned_phrases(twice) == []
        assert ",," not in twice
        assert " ." not in twice
        assert " ," not in twice

    def test_actions_recorded_in_order(self):
        codes = [a.code for a in finalize(SLOPPY_TEXT, rng=random.Random(0)).actions]
        assert "remove_opener" in codes
        assert "replace_em_dash" in codes
        assert codes.index("remove_opener") < codes.index("replace_em_dash")

    @pytest.mark.parametrize(
        "draft",
        [
            "- Pack the tent tonight\n- Check the stove fuel\n- Fill the water jugs",
            "1. Pack the tent tonight\n2. Check the stove fuel\n3. Fill the water jugs",
        ],
    )
    def test_list_markers_removed(self, draft):
        for seed in range(5):
            result = finalize(draft, rng=random.Random(seed))
            assert not re.search(r"(?:^|\s)(?:-|\d+\.)\s", result.text)
            assert result.text.startswith("Pack the tent tonight")
            assert "stove fuel" in result.text
            assert result.text.endswith("water jugs.")
            assert "strip_bullets" in [a.code for a in result.actions]


class TestRewrite:
    def test_empty(self):
        assert rewrite("") == ""
        assert rewrite("   \n\n ") == ""

    def test_contracts_without_profile(self):
        assert rewrite("We do not know why it is late.", rng=random.Random(0)) == "We don't know why it's late."

    def test_formal_profile_expands_contractions(self):
        profile = StyleProfile(formality=0.9)
        assert rewrite("We don't know why it's late.", profile, rng=random.Random(0)) == "We do not know why it is late."

    def test_fingerprint_decides_contractions(self):
        profile = StyleProfile(formality=0.2, samples=["The results were reviewed. The method is sound."])
        result = rewrite("We can't say it's done.", profile, rng=random.Random(0))
        assert "'" not in result

    def test_no_lexicon_notes_by_default(self):
        profile = StyleProfile(custom_lexicon=["grit"])
        assert "Lexicon notes:" not in rewrite("A plain plan.", profile, rng=random.Random(0))

    def test_lexicon_notes_when_requested(self):
        profile = StyleProfile(custom_lexicon=["a1", "b2", "c3", "d4", "e5", "f6"])
        options = RewriteOptions(include_lexicon_notes=True)
        result = rewrite("A plain plan.", profile, options, rng=random.Random(0))
        assert result == "A plain plan.\n\nLexicon notes: a1, b2, c3, d4, e5"


class TestParaphrase:
    def test_without_generator(self, flood_report):
        result = paraphrase(flood_report, rng=random.Random(0))
        assert result.output == flood_report

    def test_generator_draft_is_sanitized(self, flood_report):
        calls = []

        def generator(prompt, text):
            calls.append((prompt, text))
            return "Here's a rewritten version: " + flood_report

        profile = StyleProfile(tone="warm")
        result = paraphrase("Some input text here.", profile, generator=generator, rng=random.Random(0))
        assert result.output == flood_report
        assert calls[0][1] == "Some input text here."
        assert "tone=warm" in calls[0][0]

    def test_generator_failure_falls_back(self, flood_report, caplog):
        def generator(prompt, text):
            raise RuntimeError("model offline")

        with caplog.at_level(logging.WARNING, logger="stylesync"):
            result = paraphrase(flood_report, generator=generator, rng=random.Random(0))
        assert result.output == flood_report
        assert "model offline" in caplog.text

    def test_blank_generator_output_falls_back(self, flood_report):
        result = paraphrase(flood_report, generator=lambda prompt, text: "  ", rng=random.Random(0))
        assert result.output == flood_report


class TestVerifyStyleMatch:
    def test_without_profile(self):
        report = verify_style_match("Anything at all.", None)
        assert report.overall_match == 100
        assert report.details == ["No style profile to match against"]

    def test_matching_output(self):
        sample = "However, we don't stop early. We work until the light goes."
        profile = StyleProfile(samples=[sample])
        report = verify_style_match(sample, profile)
        assert report.overall_match == 100
        assert report.contraction_match and report.sentence_length_match and report.transition_match

    def test_mismatched_output(self):
        profile = StyleProfile(samples=["However, we don't stop early. We work until the light goes."])
        output = (
            "The annual report was reviewed by the full committee over three long sessions in March. "
            "The findings were then circulated to every department head for comment before release."
        )
        report = verify_style_match(output, profile)
        assert report.contraction_match is False
        assert report.sentence_length_match is False
        assert report.transition_match is False
        assert report.overall_match == 0


class TestContractionContract:
    def test_writer_who_contracts(self):
        profile = StyleProfile(samples=["We don't rush. It's fine to wait, and we're patient."])
        outputs = [
            rewrite("It is late and we do not care.", profile, rng=random.Random(seed))
            for seed in range(10)
        ]
        assert any(CONTRACTION_PATTERN.search(output) for output in outputs)

    def test_writer_who_does_not(self):
        profile = StyleProfile(samples=["We do not rush. It is fine to wait, and we are patient."])
        for seed in range(10):
            output = rewrite("It's late and we don't care. Let's go, they'll see.", profile, rng=random.Random(seed))
            assert CONTRACTION_PATTERN.search(output) is None
