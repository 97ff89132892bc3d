from stylesync.profile import StyleProfile
from stylesync.prompt import build_style_prompt, sanitize_model_output


class TestBuildStylePrompt:
    def test_without_profile(self):
        prompt = build_style_prompt(None)
        assert "No em dashes" in prompt
        assert "Profile cues" not in prompt

    def test_formality_bands(self):
        assert "Write formally" in build_style_prompt(StyleProfile(formality=0.9))
        assert "professional" in build_style_prompt(StyleProfile(formality=0.65))
        assert "casually" in build_style_prompt(StyleProfile(formality=0.2))
        assert "neutral, everyday" in build_style_prompt(StyleProfile(formality=0.5))

    def test_lexicon_listed(self):
        prompt = build_style_prompt(StyleProfile(custom_lexicon=["grit", "nuance"]))
        assert "grit, nuance" in prompt

    def test_fingerprint_patterns(self):
        profile = StyleProfile(samples=["However, we don't stop. However, I keep going."])
        prompt = build_style_prompt(profile)
        assert "Preferred transitions: However" in prompt
        assert "Uses contractions" in prompt
        assert "Personal voice: first-person" in prompt


class TestSanitizeModelOutput:
    def test_empty(self):
        assert sanitize_model_output("") == ""

    def test_strips_preamble_and_markdown(self):
        assert sanitize_model_output("Here is the rewrite: The **plan** worked.") == "The plan worked."

    def test_strips_wrapping_quotes(self):
        assert sanitize_model_output('"The plan worked."') == "The plan worked."

    def test_strips_trailing_notes(self):
        assert sanitize_model_output("The plan worked.\n\nLexicon notes: grit") == "The plan worked."

    def test_strips_headings(self):
        assert sanitize_model_output("## Result\nThe plan worked.") == "Result\nThe plan worked."
