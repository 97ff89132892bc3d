import pytest

from stylesync.text.detection import AI_VOCABULARY, compare_ai_detection, detect_ai_content
from stylesync.text.diagnosis import check_context, extract_numbers, extract_proper_nouns

MACHINE_TEXT = (
    "Moreover, it is important to note that this robust framework plays a crucial role in modern research. "
    "Furthermore, the comprehensive approach will leverage robust tools to enhance outcomes. "
    "Additionally, the innovative design can foster seamless collaboration across teams. "
    "Consequently, the pivotal results demonstrate a significant and substantial impact overall."
)

CASUAL_TEXT = (
    "I don't know, honestly. We got lost twice on the way up, and it's kind of funny now? "
    "My brother laughed so hard he nearly dropped the map. We'll go back next summer!"
)


class TestDetectAIContent:
    def test_short_text_is_neutral(self):
        result = detect_ai_content("Too short.")
        assert result.verdict == "mixed"
        assert result.confidence == 0.0
        assert result.ai_score == 0.5
        assert result.signals == []

    def test_machine_text(self):
        result = detect_ai_content(MACHINE_TEXT)
        assert result.verdict == "ai"
        assert result.ai_score > 0.9
        assert result.breakdown["vocabulary"] == 1.0
        assert result.breakdown["patterns"] == 1.0
        assert result.breakdown["structure"] == 0.8
        categories = {s.category for s in result.signals}
        assert {"Vocabulary", "Phrases", "Structure", "Transitions"} <= categories

    def test_casual_text(self):
        result = detect_ai_content(CASUAL_TEXT)
        assert result.verdict == "human"
        assert result.human_score > 0.75
        assert result.breakdown["vocabulary"] == 0.0
        assert "Natural Speech" in [s.category for s in result.signals]

    def test_scores_sum_to_one(self):
        for text in (MACHINE_TEXT, CASUAL_TEXT):
            result = detect_ai_content(text)
            assert result.ai_score + result.human_score == pytest.approx(1.0)
            assert 0.0 <= result.confidence <= 0.95

    def test_signals_capped(self):
        text = " ".join("The %s plan is %s." % (w, w) for w in AI_VOCABULARY[:12])
        assert len(detect_ai_content(text).signals) == 8

    def test_to_dict(self):
        data = detect_ai_content(MACHINE_TEXT).to_dict()
        assert data["verdict"] == "ai"
        assert set(data["breakdown"]) == {"vocabulary", "structure", "patterns", "naturalness"}
        assert all(set(s) == {"kind", "category", "description", "weight"} for s in data["signals"])


class TestCompareAIDetection:
    def test_improvement(self):
        comparison = compare_ai_detection(MACHINE_TEXT, CASUAL_TEXT)
        assert comparison.improvement > 0.2
        assert comparison.summary.startswith("Great improvement")

    def test_no_change(self):
        comparison = compare_ai_detection(CASUAL_TEXT, CASUAL_TEXT)
        assert comparison.improvement == 0
        assert comparison.summary.startswith("Similar")

    def test_worse(self):
        comparison = compare_ai_detection(CASUAL_TEXT, MACHINE_TEXT)
        assert comparison.improvement < -0.1
        assert "still contain AI patterns" in comparison.summary


class TestCheckContext:
    ORIGINAL = "We met Anna in Paris on 3 May and spent 20% of the budget."

    def test_identical_text_preserved(self):
        result = check_context(self.ORIGINAL, self.ORIGINAL)
        assert result.is_context_preserved is True
        assert result.meaning_score == 100
        assert result.issues == []

    def test_lost_and_added_facts(self):
        result = check_context(self.ORIGINAL, "We met Anna on 4 May and spent 20% of the budget.")
        assert [i.kind for i in result.issues] == ["missing_info", "added_info", "missing_info"]
        assert "3" in result.issues[0].description
        assert "Paris" in result.issues[2].description
        assert result.meaning_score == 65
        assert result.is_context_preserved is False

    def test_much_shorter_rewrite(self):
        result = check_context("A long sentence about the river and the old mill nearby.", "A river.")
        assert [i.kind for i in result.issues] == ["missing_info"]
        assert result.meaning_score == 85
        assert result.is_context_preserved is False

    def test_blank_original(self):
        result = check_context("  ", "Anything.")
        assert result.is_context_preserved is True
        assert result.meaning_score == 100

    def test_extract_numbers(self):
        assert extract_numbers("Two cats and 3.5 dogs, 40% of Ten and two more") == ["two", "3.5", "40%", "ten"]

    def test_extract_proper_nouns(self):
        assert extract_proper_nouns("The trip to Oslo was long. Then Oslo felt cold, said Ida.") == ["Oslo", "Ida"]
