import random

import pytest

from stylesync.profile import RewriteOptions, StyleProfile
from stylesync.rewrite import refine
from stylesync.rewrite.refine import (
    inject_lexicon_term,
    merge_shortest_pair,
    vary_repeated_starter,
    verify_and_refine,
)
from stylesync.text.diagnosis import measure


@pytest.fixture
def finalize_calls(monkeypatch):
    calls = []
    original = refine.finalize

    def counting_finalize(*args, **kwargs):
        calls.append(args[0])
        return original(*args, **kwargs)

    monkeypatch.setattr(refine, "finalize", counting_finalize)
    return calls


class TestMeasure:
    def test_clean_paragraph_accepted(self, flood_report):
        metrics = measure(flood_report)
        assert metrics.is_humanized is True
        assert metrics.sentence_count == 5
        assert metrics.ai_phrase_hits == []

    def test_short_text_rejected(self):
        assert measure("A plain plan.").is_humanized is False

    def test_banned_phrase_rejected(self, flood_report):
        metrics = measure(flood_report + " The cleanup was a testament to the town.")
        assert metrics.ai_phrase_hits == ["testament to"]
        assert metrics.is_humanized is False

    def test_missing_lexicon_rejected(self, flood_report):
        assert measure(flood_report, ["grit"]).is_humanized is False
        assert measure(flood_report, ["silt"]).lexicon_hits == 1
        assert measure(flood_report, ["silt"]).is_humanized is True

    def test_repeated_starters_rejected(self):
        text = (
            "The harbor was quiet for most of the morning shift. "
            "The trawlers stayed tied up because of the forecast wind. "
            "The market opened late and closed early that day. "
            "Only two buyers came down to the pier."
        )
        metrics = measure(text)
        assert metrics.repeated_starter_ratio == pytest.approx(0.75)
        assert metrics.is_humanized is False


class TestAdjustments:
    def test_merge_shortest_pair(self):
        actions = []
        result = merge_shortest_pair([["A short one.", "Tiny.", "A much longer sentence sits here."]], actions)
        assert len(result[0]) == 2
        assert result[0][1] == "A much longer sentence sits here."
        assert [a.code for a in actions] == ["refine_merge_shortest"]

    def test_inject_lexicon_term(self):
        actions = []
        result = inject_lexicon_term([["The plan worked.", "Then it rained."]], ["grit"], actions)
        assert result == [["The plan worked (grit).", "Then it rained."]]
        assert actions[0].meta == "grit"

    def test_inject_skips_present_terms(self):
        paragraphs = [["The plan had grit."]]
        assert inject_lexicon_term(paragraphs, ["grit"], []) == paragraphs

    def test_vary_repeated_starter(self):
        actions = []
        paragraphs = [["The cat sat.", "The dog ran.", "A bird sang."]]
        result = vary_repeated_starter(paragraphs, ["However"], random.Random(0), actions)
        assert result == [["The cat sat.", "However, the dog ran.", "A bird sang."]]


class TestVerifyAndRefine:
    def test_clean_text_accepted_without_passes(self, flood_report, finalize_calls):
        result = verify_and_refine(flood_report, rng=random.Random(5))
        assert result.output == flood_report
        assert result.metrics.is_humanized is True
        assert result.metrics.passes == 0
        assert len(finalize_calls) == 1

    @pytest.mark.parametrize("max_passes", [0, 1, 2, 4])
    def test_pass_budget_bounds_finalize_calls(self, finalize_calls, max_passes):
        result = verify_and_refine("A plain plan.", max_passes=max_passes, rng=random.Random(1))
        assert len(finalize_calls) == max_passes + 1
        assert result.metrics.passes == max_passes

    @pytest.mark.parametrize("draft", ["", "Word", "The flood came. " * 3334])
    def test_terminates_for_any_size(self, finalize_calls, draft):
        result = verify_and_refine(draft, max_passes=2, rng=random.Random(2))
        assert len(finalize_calls) <= 3
        assert isinstance(result.output, str)

    def test_empty_draft(self):
        result = verify_and_refine("", rng=random.Random(0))
        assert result.output == ""
        assert result.metrics.sentence_count == 0

    def test_lexicon_term_present_after_refinement(self):
        profile = StyleProfile(custom_lexicon=["nuance"])
        result = verify_and_refine("A clear plan.", profile, rng=random.Random(9))
        assert "nuance" in result.output
        assert "Lexicon notes:" not in result.output
        assert result.metrics.lexicon_hits == 1

    def test_lexicon_notes_only_when_requested(self):
        profile = StyleProfile(custom_lexicon=["nuance", "grit"])
        options = RewriteOptions(include_lexicon_notes=True)
        result = verify_and_refine("A plain plan.", profile, max_passes=0, options=options, rng=random.Random(0))
        assert result.output.endswith("\n\nLexicon notes: nuance, grit")

    def test_same_seed_same_output(self):
        profile = StyleProfile(
            formality=0.3,
            samples=["However, the big storm was strange. Still, we kept going and it was easy."],
        )
        text = "The big idea was easy to explain. The main problem was often strange. Maybe we should fix it."
        first = verify_and_refine(text, profile, rng=random.Random(11))
        second = verify_and_refine(text, profile, rng=random.Random(11))
        assert first.output == second.output
        assert [a.to_dict() for a in first.actions] == [a.to_dict() for a in second.actions]
